"""
services/inventory.py

Property listings. Each owner has an ordered list of properties; every
mutation loads the owner row with a write lock so concurrent changes to the
same list are serialized (a no-op on SQLite, real on PostgreSQL).
"""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, selectinload

from app.core.exceptions import NotFoundError, ValidationError, operation_guard
from app.models.property import MAX_RENT, Property, PropertyStatus
from app.models.user import User
from app.schemas.property import PropertyCreate, PropertyUpdate
from app.services.notifications import PropertyNotice

logger = logging.getLogger(__name__)

AMENITY_LABELS = (
    ("wifi", "WiFi"),
    ("ac", "AC"),
    ("water_supply", "Water Supply"),
    ("power_backup", "Power Backup"),
    ("security", "Security"),
)


def _parse_property_id(property_id: str) -> Optional[UUID]:
    try:
        return UUID(str(property_id))
    except ValueError:
        return None


def build_property_notice(owner: User, prop: Property) -> PropertyNotice:
    return PropertyNotice(
        owner_name=owner.name,
        owner_email=owner.email,
        address=prop.address,
        nearby_landmark=prop.nearby_landmark,
        description=prop.description,
        rent=prop.rent,
        bhk=prop.bhk,
        bathroom=prop.bathroom,
        floor=prop.floor,
        total_floors=prop.total_floors,
        gender=prop.gender.value,
        furnishing=prop.furnishing.value,
        restriction=prop.restriction.value,
        status=prop.status.value,
        amenities=[label for attr, label in AMENITY_LABELS if getattr(prop, attr)],
    )


class InventoryService:
    def __init__(self, db: Session):
        self.db = db

    def _owner(self, owner_id: UUID, lock: bool = False) -> User:
        query = self.db.query(User).filter(User.id == owner_id)
        if lock:
            query = query.with_for_update()
        owner = query.first()
        if owner is None:
            raise NotFoundError("User not found")
        return owner

    @staticmethod
    def _find(owner: User, property_id: str) -> Property:
        wanted = _parse_property_id(property_id)
        for prop in owner.properties:
            if wanted is not None and prop.id == wanted:
                return prop
        raise NotFoundError("Property not found")

    # ── Create ────────────────────────────────────────────────────────────────

    def add_property(self, owner_id: UUID, data: PropertyCreate) -> Property:
        with operation_guard("Failed to add property"):
            owner = self._owner(owner_id, lock=True)

            fields = data.model_dump(exclude={"status"})
            next_position = max((p.position for p in owner.properties), default=-1) + 1
            prop = Property(
                **fields,
                status=data.status or PropertyStatus.OPEN,
                position=next_position,
            )
            owner.properties.append(prop)
            self.db.commit()
            self.db.refresh(prop)

        logger.info("User %s added property %s", owner_id, prop.id)
        return prop

    # ── Read ──────────────────────────────────────────────────────────────────

    def list_own_properties(self, owner_id: UUID) -> List[Property]:
        with operation_guard("Failed to fetch properties"):
            return list(self._owner(owner_id).properties)

    def list_all_properties(self) -> List[Property]:
        """Every owner's list, owners in sign-up order, each list in its own order."""
        with operation_guard("Failed to fetch properties"):
            owners = (
                self.db.query(User)
                .options(selectinload(User.properties))
                .order_by(User.signup_seq)
                .all()
            )
            return [prop for owner in owners for prop in owner.properties]

    # ── Update ────────────────────────────────────────────────────────────────

    def update_property(self, owner_id: UUID, property_id: str, data: PropertyUpdate) -> Property:
        if data.rent is None and data.status is None:
            raise ValidationError("No fields to update")

        rent = None
        if data.rent is not None:
            rent = data.rent
            if isinstance(rent, float):
                if not rent.is_integer():
                    raise ValidationError("Invalid rent amount")
                rent = int(rent)
            if not 0 < rent <= MAX_RENT:
                raise ValidationError("Invalid rent amount")

        status = None
        if data.status is not None:
            try:
                status = PropertyStatus(data.status)
            except ValueError:
                raise ValidationError("Invalid status value")

        with operation_guard("Failed to update property"):
            owner = self._owner(owner_id, lock=True)
            prop = self._find(owner, property_id)

            if rent is not None:
                prop.rent = rent
            if status is not None:
                prop.status = status

            self.db.commit()
            self.db.refresh(prop)

        logger.info("User %s updated property %s", owner_id, prop.id)
        return prop

    # ── Delete ────────────────────────────────────────────────────────────────

    def delete_property(self, owner_id: UUID, property_id: str) -> None:
        with operation_guard("Failed to delete property"):
            owner = self._owner(owner_id, lock=True)
            prop = self._find(owner, property_id)
            # delete-orphan cascade removes the row; positions of the rest are untouched
            owner.properties.remove(prop)
            self.db.commit()

        logger.info("User %s deleted property %s", owner_id, property_id)
