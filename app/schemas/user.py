from pydantic import EmailStr, Field, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime
from app.models.user import UserRole, LEGACY_ROLE_ALIASES
from app.schemas.property import CamelModel, PropertyResponse
import re

MOBILE_PATTERN = re.compile(r"^\d{10}$")


def clean_mobile(mobile: Optional[str]) -> str:
    """Strip the spaces and dashes people type into phone numbers."""
    return re.sub(r"[\s\-]", "", mobile or "")


def normalize_mobile(mobile: str) -> str:
    """Clean, then require exactly 10 digits."""
    mobile = clean_mobile(mobile)
    if not MOBILE_PATTERN.match(mobile):
        raise ValueError("Mobile number must be exactly 10 digits")
    return mobile


class UserCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    mobile: str
    password: str = Field(..., min_length=6)
    role: UserRole

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name is required")
        return v.strip()

    @field_validator("mobile")
    @classmethod
    def validate_mobile(cls, v):
        return normalize_mobile(v)

    @field_validator("role", mode="before")
    @classmethod
    def map_legacy_role(cls, v):
        if isinstance(v, str):
            return LEGACY_ROLE_ALIASES.get(v, v)
        return v


class UserLogin(CamelModel):
    mobile: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    # Same form as stored at registration; a malformed number just fails to match
    @field_validator("mobile")
    @classmethod
    def clean_login_mobile(cls, v: str) -> str:
        return clean_mobile(v)


class PasswordResetRequest(CamelModel):
    # Checked by the account service so the client gets the specific message
    mobile: Optional[str] = None
    new_password: Optional[str] = None


class UserResponse(CamelModel):
    id: UUID
    name: str
    email: str
    mobile: str
    role: UserRole
    is_active: bool
    properties: List[PropertyResponse] = []
    created_at: datetime


class UserSummary(CamelModel):
    name: str
    mobile: str
    role: UserRole
    is_active: bool


class RegisterResponse(CamelModel):
    message: str = "User registered successfully"
    user: UserResponse


class LoginResponse(CamelModel):
    message: str = "Login successful"
    token: str
    user: UserResponse
    # Epoch milliseconds, read from the token's exp claim
    expires_at: int


class ProfileResponse(CamelModel):
    status: str = "success"
    user: UserResponse


class MessageResponse(CamelModel):
    message: str
