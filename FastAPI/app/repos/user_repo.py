from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.models.user import User, Role
from app.core.security import hash_password, generate_id


def get_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email).first()


def get_by_id(db: Session, user_id: str) -> User | None:
    return db.query(User).filter(User.id == user_id).first()


def create(db: Session, email: str, password: str, name: str = "", role: str = Role.CANDIDATE.value) -> User:
    user = User(
        id=generate_id(),
        name=name,
        email=email,
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def update(
    db: Session,
    user_id: str,
    *,
    name: str | None = None,
    email: str | None = None,
    password_hash: str | None = None,
    role: str | None = None,
    is_active: bool | None = None,
) -> User | None:
    user = get_by_id(db, user_id)
    if not user:
        return None
    if name is not None:
        user.name = name
    if email is not None:
        user.email = email
    if password_hash is not None:
        user.password_hash = password_hash
    if role is not None:
        user.role = role
    if is_active is not None:
        user.is_active = is_active
    db.commit()
    db.refresh(user)
    return user


def touch_last_login(db: Session, user_id: str) -> None:
    user = get_by_id(db, user_id)
    if not user:
        return
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()


def get_all_users_paginated(
    db: Session,
    search: str | None = None,
    role: str | None = None,
    limit: int = 20,
    offset: int = 0,
) -> tuple[list[User], int]:
    """List users with optional name/email search and role filter. Returns (items, total)."""
    q = db.query(User).order_by(User.created_at.desc())
    if search and search.strip():
        term = f"%{search.strip()}%"
        q = q.filter(User.email.ilike(term) | User.name.ilike(term))
    if role:
        q = q.filter(User.role == role)
    total = q.count()
    items = q.offset(offset).limit(limit).all()
    return items, total
