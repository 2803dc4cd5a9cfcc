from sqlalchemy import Column, String, Boolean, DateTime, Enum, Integer
from sqlalchemy.orm import relationship
from app.models.base import BaseModel, enum_values
import enum


class UserRole(str, enum.Enum):
    OWNER = "Owner"
    TENANT = "Tenant"


# Role names the first frontend release still sends
LEGACY_ROLE_ALIASES = {
    "Broker": UserRole.OWNER,
    "User": UserRole.TENANT,
}


class User(BaseModel):
    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    mobile = Column(String(10), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole, values_callable=enum_values, native_enum=False), nullable=False)

    # Sign-up order; created_at can tie, this cannot
    signup_seq = Column(Integer, unique=True, index=True, nullable=False)

    # Reserved; password reset is verified by the external phone-OTP provider
    otp = Column(String(6), nullable=True)
    otp_expires = Column(DateTime(timezone=True), nullable=True)

    # True while a session is open
    is_active = Column(Boolean, default=False, nullable=False)

    from app.models.property import Property
    properties = relationship(
        "Property",
        back_populates="owner",
        order_by="Property.position",
        cascade="all, delete-orphan",
    )
