import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.dependencies import get_current_user
from app.schemas.auth import UserRegister, UserLogin, Token, UserResponse
from app.core.security import verify_password, create_access_token
from app.repos.user_repo import get_by_email, create as create_user, touch_last_login
from app.repos.resume_repo import get_by_owner
from app.models.user import User, Role

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _user_to_response(user: User, has_resume: bool) -> UserResponse:
    role = getattr(user, "role", Role.CANDIDATE.value)
    return UserResponse(
        id=user.id,
        name=getattr(user, "name", "") or "",
        email=user.email,
        role=getattr(role, "value", role),
        has_resume=has_resume,
    )


def _issue_token(user: User, has_resume: bool) -> Token:
    profile = _user_to_response(user, has_resume)
    return Token(
        access_token=create_access_token(user.id, role=profile.role.value),
        expires_in=settings.access_token_expire_minutes * 60,
        user=profile,
    )


@router.post("/register", response_model=Token)
def register(data: UserRegister, db: Session = Depends(get_db)):
    """Self-registration always creates a candidate; reviewers are created by an admin."""
    try:
        if get_by_email(db, data.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered",
            )
        user = create_user(db, data.email, data.password, name=data.name)
        logger.info("User registered: %s", user.email)
        return _issue_token(user, has_resume=False)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Register failed for email=%s: %s", data.email, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Registration failed") from e


@router.post("/login", response_model=Token)
def login(data: UserLogin, db: Session = Depends(get_db)):
    try:
        user = get_by_email(db, data.email)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )
        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is disabled",
            )
        if not verify_password(data.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )
        touch_last_login(db, user.id)
        logger.info("User logged in: %s role=%s", user.email, user.role)
        return _issue_token(user, has_resume=get_by_owner(db, user.id) is not None)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Login failed for email=%s: %s", data.email, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Login failed") from e


@router.get("/me", response_model=UserResponse)
def get_me(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    has_resume = get_by_owner(db, user.id) is not None
    return _user_to_response(user, has_resume)
