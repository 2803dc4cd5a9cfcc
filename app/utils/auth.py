"""
utils/auth.py

Password hashing (bcrypt) and session tokens (JWT, HS256).

Tokens carry the user id in `sub` plus the user's role, and are only ever
rejected for one of two reasons: the window elapsed (TokenExpiredError) or
the token cannot be trusted (InvalidTokenError).
"""

import base64
import hashlib
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import BaseModel

from app.core.config import settings
from app.core.exceptions import InvalidTokenError, TokenExpiredError
from app.models.user import UserRole


# ─── Passwords ────────────────────────────────────────────────────────────────

def _prehash(password: str) -> bytes:
    """SHA-256 pre-hash so bcrypt never sees (and truncates) more than 72 bytes."""
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def get_password_hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_prehash(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Return True on match; any malformed input is simply a mismatch."""
    try:
        return bool(bcrypt.checkpw(_prehash(plain_password), hashed_password.encode("utf-8")))
    except (ValueError, TypeError, AttributeError):
        return False


# ─── Tokens ───────────────────────────────────────────────────────────────────

class TokenClaims(BaseModel):
    user_id: UUID
    role: UserRole
    expires_at: datetime


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta if expires_delta is not None
                    else timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))

    to_encode = data.copy()
    to_encode.update({
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    })
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.ALGORITHM)


def create_session_token(user_id: UUID, role: UserRole, expires_delta: Optional[timedelta] = None) -> str:
    role_value = role.value if isinstance(role, UserRole) else role
    return create_access_token({"sub": str(user_id), "role": role_value}, expires_delta)


def decode_token(token: Optional[str]) -> TokenClaims:
    if not token:
        raise InvalidTokenError()

    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.ALGORITHM],
            options={"require_exp": True, "require_sub": True},
        )
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()

    try:
        return TokenClaims(
            user_id=UUID(payload["sub"]),
            role=UserRole(payload.get("role")),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )
    except (KeyError, TypeError, ValueError):
        raise InvalidTokenError()


def token_expiry_millis(token: str) -> int:
    """Absolute expiry of a token we just issued, in epoch milliseconds."""
    payload = jwt.get_unverified_claims(token)
    return int(payload["exp"]) * 1000
