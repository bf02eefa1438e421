import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.database import get_db
from app.core.security import decode_access_token
from app.models.user import Role
from app.repos.user_repo import get_by_id

logger = logging.getLogger(__name__)
security = HTTPBearer(auto_error=False)


def get_current_user(
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> "User":
    from app.models.user import User

    if not credentials:
        logger.info("Auth failed: missing bearer credentials")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )
    user_id = decode_access_token(credentials.credentials)
    if not user_id:
        logger.info("Auth failed: invalid or expired token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    user = get_by_id(db, user_id)
    if not user:
        logger.info("Auth failed: user from token not found")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )
    return user


def require_roles(*roles: Role):
    """Dependency factory: the current user must hold one of roles."""
    allowed = {r.value for r in roles}
    label = " or ".join(sorted(allowed))

    def _dependency(user=Depends(get_current_user)):
        role = getattr(user, "role", None)
        if getattr(role, "value", role) not in allowed:
            logger.info("Access denied: user=%s role=%s needs %s", user.id, role, label)
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"{label.capitalize()} access required",
            )
        return user

    return _dependency


get_current_candidate = require_roles(Role.CANDIDATE)
get_current_reviewer = require_roles(Role.MEDIATOR, Role.ADMIN)
get_current_admin = require_roles(Role.ADMIN)
