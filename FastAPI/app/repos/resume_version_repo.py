from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.models.resume_version import ResumeVersion
from app.core.security import generate_id


def create(db: Session, owner_id: str, name: str, data: dict) -> ResumeVersion:
    version = ResumeVersion(
        id=generate_id(),
        owner_id=owner_id,
        name=name,
        data=data,
        created_at=datetime.now(timezone.utc),
    )
    db.add(version)
    db.commit()
    db.refresh(version)
    return version


def list_by_owner(db: Session, owner_id: str) -> list[ResumeVersion]:
    return (
        db.query(ResumeVersion)
        .filter(ResumeVersion.owner_id == owner_id)
        .order_by(ResumeVersion.created_at.desc())
        .all()
    )
