from sqlalchemy import Column, Integer, Boolean, Text, Enum, ForeignKey, JSON, Uuid
from sqlalchemy.orm import relationship
from app.models.base import BaseModel, enum_values
import enum


class GenderPreference(str, enum.Enum):
    BOYS = "Boys"
    GIRLS = "Girls"
    ANY = "Girls-boys"


class Furnishing(str, enum.Enum):
    NON_FURNISHED = "Non-furnished"
    SEMI_FURNISHED = "Semi-furnished"
    FULLY_FURNISHED = "Fully-furnished"


class OccupancyRestriction(str, enum.Enum):
    WITHOUT_RESTRICTION = "Without restriction"
    WITH_RESTRICTION = "With restriction"


class PropertyStatus(str, enum.Enum):
    OPEN = "Open"
    CLOSED = "Closed"


MAX_RENT = 2**31 - 1


class Property(BaseModel):
    __tablename__ = "properties"

    # Owner's list: position keeps insertion order
    owner_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    position = Column(Integer, nullable=False, default=0)

    # Location / listing text
    address = Column(Text, nullable=False)
    nearby_landmark = Column(Text, nullable=False)
    description = Column(Text, nullable=False)

    # Pricing (whole rupees), capped to fit a 32-bit INTEGER
    rent = Column(Integer, nullable=False)

    # Occupancy
    gender = Column(Enum(GenderPreference, values_callable=enum_values, native_enum=False), nullable=False)
    furnishing = Column(Enum(Furnishing, values_callable=enum_values, native_enum=False), nullable=False)
    restriction = Column(Enum(OccupancyRestriction, values_callable=enum_values, native_enum=False), nullable=False)
    status = Column(
        Enum(PropertyStatus, values_callable=enum_values, native_enum=False),
        default=PropertyStatus.OPEN,
        nullable=False,
    )

    # Media: inline data URLs, in display order
    images = Column(JSON, default=list, nullable=False)

    # Amenities
    wifi = Column(Boolean, default=False, nullable=False)
    ac = Column(Boolean, default=False, nullable=False)
    water_supply = Column(Boolean, default=False, nullable=False)
    power_backup = Column(Boolean, default=False, nullable=False)
    security = Column(Boolean, default=False, nullable=False)

    # Layout
    bhk = Column(Integer, nullable=False)
    bathroom = Column(Integer, nullable=False)
    floor = Column(Integer, nullable=False)
    total_floors = Column(Integer, nullable=False)

    owner = relationship("User", back_populates="properties")
