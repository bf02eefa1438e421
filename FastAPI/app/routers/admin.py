import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user, get_current_admin
from app.models.resume import ResumeStatus
from app.models.user import User, Role
from app.repos.admin_repo import get_stats
from app.repos.user_repo import (
    get_all_users_paginated,
    get_by_email,
    get_by_id,
    create as create_user_repo,
    update as update_user,
)
from app.schemas.admin import AdminUserCreate, AdminUserUpdate
from app.schemas.resume import ResumeResponse
from app.schemas.review import ReviewDecision, QueueReturn
from app.services.review_workflow import Actor, get_all, decide_hire, decide_reject, return_to_queue

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


def _user_to_response(u: User) -> dict:
    return {
        "id": u.id,
        "name": u.name,
        "email": u.email,
        "role": u.role,
        "is_active": u.is_active,
        "created_at": u.created_at.isoformat() if u.created_at else None,
        "last_login_at": u.last_login_at.isoformat() if getattr(u, "last_login_at", None) else None,
    }


@router.get("/stats")
def get_admin_stats(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_admin),
):
    """Return dashboard stats. Admin only."""
    try:
        return get_stats(db)
    except Exception as e:
        logger.exception("Admin stats failed for admin=%s: %s", user.email, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to load admin stats") from e


# ---- Resume decisions ----
@router.get("/resumes", response_model=list[ResumeResponse])
def list_resumes(
    status_filter: ResumeStatus | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_admin),
):
    """All resumes regardless of status, optionally filtered. Admin only."""
    return get_all(db, Actor.from_user(user), status=status_filter)


# Decision routes only authenticate; the workflow rejects non-admins with InvalidTransition.
@router.post("/resumes/{resume_id}/hire", response_model=ResumeResponse)
def hire_candidate(
    resume_id: str,
    data: ReviewDecision | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    data = data or ReviewDecision()
    return decide_hire(db, Actor.from_user(user), resume_id, data.feedback, expected_version=data.expected_version)


@router.post("/resumes/{resume_id}/reject", response_model=ResumeResponse)
def reject_candidate(
    resume_id: str,
    data: ReviewDecision | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    data = data or ReviewDecision()
    return decide_reject(db, Actor.from_user(user), resume_id, data.feedback, expected_version=data.expected_version)


@router.post("/resumes/{resume_id}/return-to-queue", response_model=ResumeResponse)
def send_back_to_queue(
    resume_id: str,
    data: QueueReturn | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    data = data or QueueReturn()
    return return_to_queue(db, Actor.from_user(user), resume_id, expected_version=data.expected_version)


# ---- Users ----
@router.get("/users")
def list_users(
    search: str | None = None,
    role: Role | None = None,
    page: int = 1,
    page_size: int = 20,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_admin),
):
    """List users with optional name/email search, role filter and pagination. Admin only."""
    page = max(1, page)
    page_size = min(max(1, page_size), 100)
    offset = (page - 1) * page_size
    users, total = get_all_users_paginated(
        db,
        search=search,
        role=role.value if role else None,
        limit=page_size,
        offset=offset,
    )
    return {"items": [_user_to_response(u) for u in users], "total": total}


@router.post("/users")
def create_user_admin(
    body: AdminUserCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """Create a user with any role (mediators and admins are created here). Admin only."""
    if get_by_email(db, body.email):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    user = create_user_repo(db, body.email, body.password, name=body.name.strip(), role=body.role.value)
    if not body.is_active:
        user = update_user(db, user.id, is_active=False)
    logger.info("Admin %s created user %s role=%s", current_user.email, user.email, user.role)
    return _user_to_response(user)


@router.patch("/users/{user_id}")
def update_user_admin(
    user_id: str,
    body: AdminUserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_admin),
):
    """Change a user's name, role or active flag. Admin only. Cannot demote or disable self."""
    target = get_by_id(db, user_id)
    if not target:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    if target.id == current_user.id and (
        (body.role is not None and body.role is not Role.ADMIN) or body.is_active is False
    ):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Cannot remove your own admin access",
        )
    updated = update_user(
        db,
        user_id,
        name=body.name,
        role=body.role.value if body.role else None,
        is_active=body.is_active,
    )
    if not updated:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    logger.info("Admin %s updated user %s", current_user.email, user_id)
    return _user_to_response(updated)
