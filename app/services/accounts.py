"""
services/accounts.py

Registration, login/logout, profile, account deletion and password reset.
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.exceptions import (
    ConflictError, InvalidCredentialsError, NotFoundError, ValidationError, operation_guard,
)
from app.models.user import User
from app.schemas.user import MOBILE_PATTERN, UserCreate, clean_mobile
from app.utils.auth import (
    create_session_token, decode_token, get_password_hash, token_expiry_millis, verify_password,
)

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
REGISTER_ATTEMPTS = 3


class AccountService:
    def __init__(self, db: Session):
        self.db = db

    def _get(self, user_id: UUID) -> Optional[User]:
        return self.db.get(User, user_id)

    def _duplicate_field(self, email: str, mobile: str) -> Optional[str]:
        existing = self.db.query(User).filter(
            or_(User.email == email, User.mobile == mobile)
        ).first()
        if existing is None:
            return None
        return "Email" if existing.email == email else "Mobile number"

    def _next_signup_seq(self) -> int:
        return (self.db.query(func.max(User.signup_seq)).scalar() or 0) + 1

    # ── Register ──────────────────────────────────────────────────────────────

    def register(self, data: UserCreate) -> User:
        with operation_guard("Error registering user"):
            password_hash = get_password_hash(data.password)

            for _ in range(REGISTER_ATTEMPTS):
                duplicate = self._duplicate_field(data.email, data.mobile)
                if duplicate:
                    raise ConflictError(f"{duplicate} already registered")

                user = User(
                    name=data.name,
                    email=data.email,
                    mobile=data.mobile,
                    password_hash=password_hash,
                    role=data.role,
                    signup_seq=self._next_signup_seq(),
                    is_active=False,
                )
                self.db.add(user)
                try:
                    self.db.commit()
                    break
                except IntegrityError:
                    # Lost a race with a concurrent registration: a taken
                    # email/mobile is reported on the next pass, a taken
                    # signup_seq is retried
                    self.db.rollback()
            else:
                raise ConflictError("Email or mobile number already registered")
            self.db.refresh(user)

        logger.info("Registered user %s (%s)", user.id, user.role.value)
        return user

    # ── Login / Logout ────────────────────────────────────────────────────────

    def login(self, mobile: str, password: str) -> Tuple[str, User, int]:
        """Return (token, user, expires_at_ms). Unknown mobile and wrong password look identical."""
        with operation_guard("Failed to login"):
            user = self.db.query(User).filter(User.mobile == mobile).first()
            if not user or not verify_password(password, user.password_hash):
                raise InvalidCredentialsError()

            user.is_active = True
            self.db.commit()
            self.db.refresh(user)

            token = create_session_token(user.id, user.role)
            expires_at = token_expiry_millis(token)

        logger.info("User %s logged in", user.id)
        return token, user, expires_at

    def logout(self, token: str) -> None:
        # Verified here rather than by the request gate
        claims = decode_token(token)
        with operation_guard("Logout failed"):
            user = self._get(claims.user_id)
            if user is None:
                logger.warning("Logout for unknown user %s", claims.user_id)
                return
            user.is_active = False
            self.db.commit()
        logger.info("User %s logged out", claims.user_id)

    # ── Profile / Delete ──────────────────────────────────────────────────────

    def get_profile(self, user_id: UUID) -> User:
        user = self._get(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    def delete_account(self, user_id: UUID) -> None:
        with operation_guard("Failed to delete account"):
            user = self._get(user_id)
            if user is None:
                raise NotFoundError("User not found")
            self.db.delete(user)
            self.db.commit()
        logger.info("Deleted account %s", user_id)

    # ── Password reset ────────────────────────────────────────────────────────

    def reset_password(self, mobile: Optional[str], new_password: Optional[str]) -> None:
        """
        Replace the password for the account with this mobile number.

        Phone ownership is proven to the external OTP provider by the client
        beforehand; nothing here checks that it happened.
        """
        mobile = clean_mobile(mobile)
        if not MOBILE_PATTERN.match(mobile):
            raise ValidationError("Invalid mobile number")
        if not new_password or len(new_password) < MIN_PASSWORD_LENGTH:
            raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

        with operation_guard("Failed to reset password"):
            user = self.db.query(User).filter(User.mobile == mobile).first()
            if user is None:
                raise NotFoundError("User not found")
            user.password_hash = get_password_hash(new_password)
            self.db.commit()
        logger.info("Password reset for user %s", user.id)

    # ── Admin listing ─────────────────────────────────────────────────────────

    def list_users_summary(self) -> List[User]:
        with operation_guard("Failed to fetch users"):
            return self.db.query(User).order_by(User.signup_seq).all()
