import hashlib
from datetime import datetime, timedelta, timezone
from uuid import uuid4

import bcrypt
from jose import JWTError, jwt

from app.config import settings


def _prehash(password: str) -> bytes:
    # bcrypt ignores input past 72 bytes; sha256 keeps long passphrases distinct.
    return hashlib.sha256(password.encode()).digest()


def hash_password(password: str) -> str:
    return bcrypt.hashpw(_prehash(password), bcrypt.gensalt()).decode()


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(_prehash(plain), hashed.encode())


def create_access_token(subject: str, role: str | None = None, expires_minutes: int | None = None) -> str:
    """
    Signed JWT for subject (a user id). The role claim is informational:
    dependencies always re-read the role from the users table.
    """
    issued = datetime.now(timezone.utc)
    claims = {
        "sub": subject,
        "iat": issued,
        "exp": issued + timedelta(minutes=expires_minutes or settings.access_token_expire_minutes),
    }
    if role:
        claims["role"] = role
    return jwt.encode(claims, settings.secret_key, algorithm=settings.algorithm)


def decode_token_claims(token: str) -> dict | None:
    try:
        return jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None


def decode_access_token(token: str) -> str | None:
    """Return the user id inside a valid, unexpired token."""
    claims = decode_token_claims(token)
    return claims.get("sub") if claims else None


def generate_id() -> str:
    return str(uuid4())
