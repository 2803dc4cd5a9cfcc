from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PositiveInt, StrictInt, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List, Union
from uuid import UUID
from app.models.property import GenderPreference, Furnishing, OccupancyRestriction, PropertyStatus, MAX_RENT
from app.utils.images import validate_image_data_url


class CamelModel(BaseModel):
    """JSON uses camelCase (`totalFloors`); snake_case is accepted on input too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ─── Property Base ────────────────────────────────────────────────────────────

class PropertyBase(CamelModel):
    address: str = Field(..., min_length=1)
    # Older clients send this as "near"
    nearby_landmark: str = Field(
        ...,
        min_length=1,
        alias="nearbyLandmark",
        validation_alias=AliasChoices("nearbyLandmark", "nearby_landmark", "near"),
    )
    description: str = Field(..., min_length=1)
    rent: int = Field(..., gt=0, le=MAX_RENT)
    gender: GenderPreference
    furnishing: Furnishing
    restriction: OccupancyRestriction
    images: List[str] = []

    wifi: bool = False
    ac: bool = False
    water_supply: bool = False
    power_backup: bool = False
    security: bool = False

    bhk: PositiveInt
    bathroom: PositiveInt
    floor: PositiveInt
    total_floors: PositiveInt


# ─── Create ───────────────────────────────────────────────────────────────────

class PropertyCreate(PropertyBase):
    status: Optional[PropertyStatus] = None

    @field_validator("address", "nearby_landmark", "description")
    @classmethod
    def text_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v.strip()

    @field_validator("images")
    @classmethod
    def images_must_be_data_urls(cls, v: List[str]) -> List[str]:
        return [validate_image_data_url(img) for img in v]


# ─── Update ───────────────────────────────────────────────────────────────────
# Rent/status rules (and their messages) live in the inventory service.

class PropertyUpdate(CamelModel):
    # Whole numbers stay ints; floats are only accepted when they are whole
    rent: Optional[Union[StrictInt, float]] = None
    status: Optional[str] = None


# ─── Responses ────────────────────────────────────────────────────────────────

class PropertyResponse(PropertyBase):
    id: UUID
    status: PropertyStatus


class AddPropertyResponse(CamelModel):
    status: str = "success"
    property: PropertyResponse


class PropertyListResponse(CamelModel):
    properties: List[PropertyResponse] = []
