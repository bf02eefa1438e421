import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, get_current_reviewer
from app.models.user import User
from app.schemas.resume import ResumeResponse
from app.schemas.review import ChangeRequest, ReviewDecision, RankRequest, RankedCandidate
from app.services.candidate_ranker import rank_queue
from app.services.review_workflow import Actor, get_queue, get_for_review, request_changes, forward

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/review", tags=["review"])


@router.get("/queue", response_model=list[ResumeResponse])
def list_queue(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_reviewer),
):
    """Resumes waiting in pending_review, oldest first."""
    return get_queue(db, Actor.from_user(user))


@router.post("/rank", response_model=list[RankedCandidate])
def rank_candidates(
    data: RankRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_reviewer),
):
    """Rank the queue against a job description. Does not change any resume."""
    return rank_queue(db, Actor.from_user(user), data.job_description, limit=data.limit)


@router.get("/{resume_id}", response_model=ResumeResponse)
def get_resume_for_review(
    resume_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_reviewer),
):
    return get_for_review(db, Actor.from_user(user), resume_id)


# Transitions only authenticate here; role checks happen in the workflow.
@router.post("/{resume_id}/request-changes", response_model=ResumeResponse)
def request_resume_changes(
    resume_id: str,
    data: ChangeRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return request_changes(db, Actor.from_user(user), resume_id, data.feedback, expected_version=data.expected_version)


@router.post("/{resume_id}/forward", response_model=ResumeResponse)
def forward_resume(
    resume_id: str,
    data: ReviewDecision | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    data = data or ReviewDecision()
    return forward(db, Actor.from_user(user), resume_id, data.feedback, expected_version=data.expected_version)
