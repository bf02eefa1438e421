"""
Resume review state machine.

TRANSITIONS is the single table of allowed status changes. Every operation:
checks the actor's role, loads the record, checks ownership, the caller's
expected version, the source status and any content guard, then writes with
a compare-and-swap on ``Resume.version``. Nothing is written until every
check has passed.

    draft --submit--> pending_review --forward--> forwarded_to_admin --decide_hire--> hired
                        |    ^                        |      |
          request_changes    resubmit                 |      +--decide_reject--> rejected
                        v    |                        |
                   changes_requested      return_to_queue --> pending_review
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import (
    AccessDenied,
    ConcurrentModification,
    InvalidTransition,
    NotFound,
    ValidationFailed,
)
from app.models.resume import Resume, ResumeStatus, EDITABLE_STATUSES
from app.models.user import Role
from app.repos import resume_repo

logger = logging.getLogger(__name__)


class Operation(str, Enum):
    SUBMIT = "submit"
    REQUEST_CHANGES = "request_changes"
    FORWARD = "forward"
    RESUBMIT = "resubmit"
    DECIDE_HIRE = "decide_hire"
    DECIDE_REJECT = "decide_reject"
    RETURN_TO_QUEUE = "return_to_queue"


class Feedback(str, Enum):
    CLEAR = "clear"  # drop whatever a previous review left
    KEEP = "keep"  # leave the stored note untouched
    SET = "set"  # overwrite with the given note, None clears
    REQUIRE = "require"  # overwrite, note must be non-empty


@dataclass(frozen=True)
class Transition:
    source: ResumeStatus
    target: ResumeStatus
    roles: frozenset
    feedback: Feedback
    owner_only: bool = False
    content_guard: bool = False


_OWNER = frozenset({Role.CANDIDATE})
_REVIEWERS = frozenset({Role.MEDIATOR, Role.ADMIN})
_ADMIN = frozenset({Role.ADMIN})

TRANSITIONS: dict[Operation, Transition] = {
    Operation.SUBMIT: Transition(
        ResumeStatus.DRAFT, ResumeStatus.PENDING_REVIEW, _OWNER, Feedback.CLEAR,
        owner_only=True, content_guard=True,
    ),
    Operation.REQUEST_CHANGES: Transition(
        ResumeStatus.PENDING_REVIEW, ResumeStatus.CHANGES_REQUESTED, _REVIEWERS, Feedback.REQUIRE,
    ),
    Operation.FORWARD: Transition(
        ResumeStatus.PENDING_REVIEW, ResumeStatus.FORWARDED_TO_ADMIN, _REVIEWERS, Feedback.SET,
    ),
    Operation.RESUBMIT: Transition(
        ResumeStatus.CHANGES_REQUESTED, ResumeStatus.PENDING_REVIEW, _OWNER, Feedback.KEEP,
        owner_only=True, content_guard=True,
    ),
    Operation.DECIDE_HIRE: Transition(
        ResumeStatus.FORWARDED_TO_ADMIN, ResumeStatus.HIRED, _ADMIN, Feedback.SET,
    ),
    Operation.DECIDE_REJECT: Transition(
        ResumeStatus.FORWARDED_TO_ADMIN, ResumeStatus.REJECTED, _ADMIN, Feedback.SET,
    ),
    Operation.RETURN_TO_QUEUE: Transition(
        ResumeStatus.FORWARDED_TO_ADMIN, ResumeStatus.PENDING_REVIEW, _ADMIN, Feedback.KEEP,
    ),
}


@dataclass(frozen=True)
class Actor:
    """Who is acting, as supplied by the auth layer."""

    id: str
    role: Role

    @classmethod
    def from_user(cls, user: Any) -> "Actor":
        return cls(id=user.id, role=Role(user.role))


def can_perform(role: Role | str, operation: Operation | str, current_state: ResumeStatus | str) -> bool:
    """Pure role/state check against TRANSITIONS. Ownership is checked separately."""
    try:
        rule = TRANSITIONS[Operation(operation)]
        return Role(role) in rule.roles and ResumeStatus(current_state) is rule.source
    except (ValueError, KeyError):
        return False


def missing_submission_fields(content: dict | None) -> list[str]:
    """What a resume still lacks before it can go to review: name, a contact, one experience entry."""
    content = content or {}
    missing = []
    if not _text(content.get("full_name")):
        missing.append("full_name")
    if not (_text(content.get("email")) or _text(content.get("phone"))):
        missing.append("contact")
    experience = [
        e for e in content.get("experience") or []
        if isinstance(e, dict) and (_text(e.get("role")) or _text(e.get("company")))
    ]
    if not experience:
        missing.append("experience")
    return missing


def _text(value: Any) -> str:
    return str(value or "").strip()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _check_version(resume: Resume, expected_version: int | None) -> None:
    if expected_version is not None and expected_version != resume.version:
        raise ConcurrentModification(resume.id, expected_version, resume.version)


def _write(db: Session, resume: Resume, op: str, actor: Actor, **values) -> Resume:
    resume_id, version = resume.id, resume.version
    updated = resume_repo.compare_and_set(db, resume_id, version, **values)
    if updated is None:
        logger.warning("CAS conflict: resume=%s op=%s actor=%s expected_version=%d", resume_id, op, actor.id, version)
        raise ConcurrentModification(resume_id, version)
    return updated


def _apply(
    db: Session,
    actor: Actor,
    operation: Operation,
    resume: Resume | None,
    *,
    feedback: str | None = None,
    content: dict | None = None,
    expected_version: int | None = None,
) -> Resume:
    rule = TRANSITIONS[operation]
    if resume is None:
        raise NotFound("Resume not found")
    if rule.owner_only and resume.owner_id != actor.id:
        raise InvalidTransition(f"Only the resume owner may {operation.value}")
    _check_version(resume, expected_version)

    current = ResumeStatus(resume.status)
    if current is not rule.source:
        logger.info(
            "Rejected transition: resume=%s op=%s actor=%s status=%s",
            resume.id, operation.value, actor.id, current.value,
        )
        raise InvalidTransition(f"Cannot {operation.value} a resume in status {current.value}")

    if rule.content_guard:
        missing = missing_submission_fields(resume.content if content is None else content)
        if missing:
            raise ValidationFailed(missing)

    values: dict[str, Any] = {"status": rule.target.value, "updated_at": _now()}
    note = _text(feedback) or None
    if rule.feedback is Feedback.REQUIRE:
        if not note:
            raise ValidationFailed(["feedback"], "Feedback is required when requesting changes")
        values["feedback"] = note
    elif rule.feedback is Feedback.SET:
        values["feedback"] = note
    elif rule.feedback is Feedback.CLEAR:
        values["feedback"] = None
    if content is not None:
        values["content"] = content

    updated = _write(db, resume, operation.value, actor, **values)
    logger.info(
        "resume=%s op=%s actor=%s %s -> %s",
        updated.id, operation.value, actor.id, current.value, rule.target.value,
    )
    return updated


def _authorize(actor: Actor, operation: Operation) -> None:
    if actor.role not in TRANSITIONS[operation].roles:
        logger.info("Rejected transition: op=%s actor=%s role=%s", operation.value, actor.id, actor.role.value)
        raise InvalidTransition(f"Role {actor.role.value} may not {operation.value}")


def _owner_transition(db, actor, operation, content, expected_version) -> Resume:
    _authorize(actor, operation)
    resume = resume_repo.get_by_owner(db, actor.id)
    return _apply(db, actor, operation, resume, content=content, expected_version=expected_version)


def _review_transition(db, actor, operation, resume_id, feedback, expected_version) -> Resume:
    _authorize(actor, operation)
    resume = resume_repo.get_by_id(db, resume_id)
    return _apply(db, actor, operation, resume, feedback=feedback, expected_version=expected_version)


# ---- owner operations ----

def _create_draft(db: Session, actor: Actor, content: dict) -> Resume:
    try:
        created = resume_repo.create(db, actor.id, content)
    except IntegrityError:
        db.rollback()
        logger.warning("Concurrent first save: owner=%s", actor.id)
        raise ConcurrentModification(
            None, 0, message="Another request created this resume first; reload it and retry",
        )
    logger.info("Resume created: resume=%s owner=%s", created.id, actor.id)
    return created


def submit(db: Session, actor: Actor, content: dict | None = None, expected_version: int | None = None) -> Resume:
    """Send a draft to the review queue, optionally saving new content in the same write.

    With content and no saved record the draft is created first, so a
    candidate can submit without an earlier save. Incomplete content is
    rejected before anything is stored.
    """
    _authorize(actor, Operation.SUBMIT)
    resume = resume_repo.get_by_owner(db, actor.id)
    if resume is None and content is not None and expected_version is None:
        missing = missing_submission_fields(content)
        if missing:
            raise ValidationFailed(missing)
        resume = _create_draft(db, actor, content)
    return _apply(db, actor, Operation.SUBMIT, resume, content=content, expected_version=expected_version)


def resubmit(db: Session, actor: Actor, content: dict | None = None, expected_version: int | None = None) -> Resume:
    return _owner_transition(db, actor, Operation.RESUBMIT, content, expected_version)


def save_draft(db: Session, actor: Actor, content: dict, expected_version: int | None = None) -> Resume:
    """Create the owner's resume on first save, otherwise replace its content. Never touches status."""
    if actor.role is not Role.CANDIDATE:
        raise AccessDenied("Only candidates keep a resume")
    resume = resume_repo.get_by_owner(db, actor.id)
    if resume is None:
        if expected_version is not None:
            raise NotFound("Resume not found")
        return _create_draft(db, actor, content)

    _check_version(resume, expected_version)
    if ResumeStatus(resume.status) not in EDITABLE_STATUSES:
        raise InvalidTransition(f"Resume is locked while {resume.status}")
    return _write(db, resume, "save_draft", actor, content=content, updated_at=_now())


# ---- reviewer operations ----

def request_changes(db: Session, actor: Actor, resume_id: str, feedback: str, expected_version: int | None = None) -> Resume:
    return _review_transition(db, actor, Operation.REQUEST_CHANGES, resume_id, feedback, expected_version)


def forward(db: Session, actor: Actor, resume_id: str, feedback: str | None = None, expected_version: int | None = None) -> Resume:
    return _review_transition(db, actor, Operation.FORWARD, resume_id, feedback, expected_version)


def decide_hire(db: Session, actor: Actor, resume_id: str, feedback: str | None = None, expected_version: int | None = None) -> Resume:
    return _review_transition(db, actor, Operation.DECIDE_HIRE, resume_id, feedback, expected_version)


def decide_reject(db: Session, actor: Actor, resume_id: str, feedback: str | None = None, expected_version: int | None = None) -> Resume:
    return _review_transition(db, actor, Operation.DECIDE_REJECT, resume_id, feedback, expected_version)


def return_to_queue(db: Session, actor: Actor, resume_id: str, expected_version: int | None = None) -> Resume:
    return _review_transition(db, actor, Operation.RETURN_TO_QUEUE, resume_id, None, expected_version)


# ---- read projections ----

def get_own(db: Session, actor: Actor, owner_id: str | None = None) -> Resume:
    """Owner sees their own record; a mediator only while it is queued; admin sees any."""
    owner_id = owner_id or actor.id
    resume = resume_repo.get_by_owner(db, owner_id)
    if resume is None:
        raise NotFound("No saved resume found")
    _ensure_visible(actor, resume)
    return resume


def get_for_review(db: Session, actor: Actor, resume_id: str) -> Resume:
    resume = resume_repo.get_by_id(db, resume_id)
    if resume is None:
        raise NotFound("Resume not found")
    _ensure_visible(actor, resume)
    return resume


def get_queue(db: Session, actor: Actor) -> list[Resume]:
    if actor.role not in _REVIEWERS:
        raise AccessDenied("Mediator or admin role required")
    return resume_repo.list_by_status(db, ResumeStatus.PENDING_REVIEW.value)


def get_all(db: Session, actor: Actor, status: ResumeStatus | str | None = None) -> list[Resume]:
    if actor.role is not Role.ADMIN:
        raise AccessDenied("Admin role required")
    status_value = ResumeStatus(status).value if status else None
    return resume_repo.list_all(db, status=status_value)


def _ensure_visible(actor: Actor, resume: Resume) -> None:
    if actor.role is Role.ADMIN or resume.owner_id == actor.id:
        return
    if actor.role is Role.MEDIATOR and resume.status == ResumeStatus.PENDING_REVIEW.value:
        return
    raise AccessDenied("You do not have access to this resume")
