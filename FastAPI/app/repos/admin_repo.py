"""Admin-specific repository functions for dashboard stats."""

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.models.user import User, Role
from app.models.resume import ResumeStatus
from app.repos.resume_repo import count_by_status


def get_stats(db: Session) -> dict:
    """Return admin dashboard stats."""
    users_by_role = {r.value: 0 for r in Role}
    for role, count in db.query(User.role, func.count(User.id)).group_by(User.role).all():
        users_by_role[role] = count
    active_user_count = db.query(func.count(User.id)).filter(User.is_active == True).scalar() or 0
    resumes_by_status = count_by_status(db)
    return {
        "users_total": sum(users_by_role.values()),
        "users_active": active_user_count,
        "users_by_role": users_by_role,
        "resumes_total": sum(resumes_by_status.values()),
        "resumes_by_status": resumes_by_status,
        "pending_reviews": resumes_by_status[ResumeStatus.PENDING_REVIEW.value],
    }
