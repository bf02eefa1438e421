"""Append-only snapshot log of an owner's resume content, kept beside the review workflow."""
import copy
import logging

from sqlalchemy.orm import Session

from app.core.errors import NotFound, ValidationFailed
from app.models.resume_version import ResumeVersion
from app.repos import resume_repo, resume_version_repo
from app.services.review_workflow import Actor

logger = logging.getLogger(__name__)

MAX_VERSION_NAME_CHARS = 120


def save_version(db: Session, actor: Actor, name: str) -> ResumeVersion:
    name = (name or "").strip()
    if not name or len(name) > MAX_VERSION_NAME_CHARS:
        raise ValidationFailed(["name"], f"Version name must be 1-{MAX_VERSION_NAME_CHARS} characters")
    resume = resume_repo.get_by_owner(db, actor.id)
    if resume is None:
        raise NotFound("No saved resume to snapshot")
    version = resume_version_repo.create(db, actor.id, name, copy.deepcopy(resume.content or {}))
    logger.info("Resume snapshot saved: owner=%s version=%s name=%r", actor.id, version.id, name)
    return version


def list_versions(db: Session, actor: Actor) -> list[ResumeVersion]:
    return resume_version_repo.list_by_owner(db, actor.id)
