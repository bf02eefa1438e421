import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, get_current_candidate
from app.models.user import User
from app.schemas.resume import (
    ResumeSave,
    ResumeSubmit,
    ResumeResponse,
    VersionCreate,
    VersionResponse,
)
from app.services.review_workflow import Actor, get_own, save_draft, submit, resubmit
from app.services.resume_versions import save_version, list_versions

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/resumes", tags=["resumes"])


def _content(body) -> dict | None:
    if body.content is None:
        return None
    return body.content.model_dump(mode="json")


@router.get("/me", response_model=ResumeResponse)
def get_my_resume(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return get_own(db, Actor.from_user(user))


@router.put("/me", response_model=ResumeResponse)
def save_my_resume(
    data: ResumeSave,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_candidate),
):
    """Create or edit the draft. Allowed while draft or changes_requested."""
    resume = save_draft(db, Actor.from_user(user), _content(data), expected_version=data.expected_version)
    logger.info("Resume saved for user %s (version %s)", user.id, resume.version)
    return resume


@router.post("/me/submit", response_model=ResumeResponse)
def submit_my_resume(
    data: ResumeSubmit | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    data = data or ResumeSubmit()
    return submit(db, Actor.from_user(user), content=_content(data), expected_version=data.expected_version)


@router.post("/me/resubmit", response_model=ResumeResponse)
def resubmit_my_resume(
    data: ResumeSubmit | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    data = data or ResumeSubmit()
    return resubmit(db, Actor.from_user(user), content=_content(data), expected_version=data.expected_version)


@router.get("/me/versions", response_model=list[VersionResponse])
def get_my_versions(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_candidate),
):
    return list_versions(db, Actor.from_user(user))


@router.post("/me/versions", response_model=VersionResponse)
def snapshot_my_resume(
    data: VersionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_candidate),
):
    return save_version(db, Actor.from_user(user), data.name)
