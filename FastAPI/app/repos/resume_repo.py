from datetime import datetime, timezone

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.resume import Resume, ResumeStatus
from app.core.security import generate_id


def create(db: Session, owner_id: str, content: dict) -> Resume:
    resume = Resume(
        id=generate_id(),
        owner_id=owner_id,
        status=ResumeStatus.DRAFT.value,
        feedback=None,
        content=content,
        version=1,
        updated_at=datetime.now(timezone.utc),
    )
    db.add(resume)
    db.commit()
    db.refresh(resume)
    return resume


def get_by_owner(db: Session, owner_id: str) -> Resume | None:
    return db.query(Resume).filter(Resume.owner_id == owner_id).first()


def get_by_id(db: Session, resume_id: str) -> Resume | None:
    return db.query(Resume).filter(Resume.id == resume_id).first()


def compare_and_set(db: Session, resume_id: str, expected_version: int, **values) -> Resume | None:
    """
    Write values only if the row is still at expected_version; bumps version by one.
    Returns the refreshed row, or None when another writer got there first.
    """
    values["version"] = expected_version + 1
    updated = (
        db.query(Resume)
        .filter(Resume.id == resume_id, Resume.version == expected_version)
        .update(values, synchronize_session=False)
    )
    if not updated:
        db.rollback()
        return None
    db.commit()
    resume = get_by_id(db, resume_id)
    db.refresh(resume)
    return resume


def list_by_status(db: Session, status: str) -> list[Resume]:
    """Oldest update first, so the queue is served in arrival order."""
    return (
        db.query(Resume)
        .filter(Resume.status == status)
        .order_by(Resume.updated_at.asc(), Resume.created_at.asc())
        .all()
    )


def list_all(db: Session, status: str | None = None) -> list[Resume]:
    q = db.query(Resume)
    if status:
        q = q.filter(Resume.status == status)
    return q.order_by(Resume.updated_at.desc()).all()


def count_by_status(db: Session) -> dict[str, int]:
    """Counts for every status, zeros included."""
    counts = {s.value: 0 for s in ResumeStatus}
    rows = db.query(Resume.status, func.count(Resume.id)).group_by(Resume.status).all()
    for status, count in rows:
        counts[status] = count
    return counts
