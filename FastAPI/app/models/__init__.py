from app.models.user import User, Role
from app.models.resume import Resume, ResumeStatus
from app.models.resume_version import ResumeVersion

__all__ = [
    "User",
    "Role",
    "Resume",
    "ResumeStatus",
    "ResumeVersion",
]
