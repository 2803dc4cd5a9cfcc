from fastapi import APIRouter, BackgroundTasks, Depends
from typing import List
from app.api.deps import get_inventory_service, get_notifier, get_token_claims, require_role
from app.models.user import UserRole
from app.schemas.property import (
    PropertyCreate, PropertyUpdate, PropertyResponse, AddPropertyResponse, PropertyListResponse,
)
from app.schemas.user import MessageResponse
from app.services.inventory import InventoryService, build_property_notice
from app.services.notifications import PropertyNotifier, send_property_notification
from app.utils.auth import TokenClaims

# Listing routes share the /users prefix with the account routes
router = APIRouter(prefix="/users", tags=["Properties"])


@router.post("/add-property", response_model=AddPropertyResponse)
def add_property(
    property_data: PropertyCreate,
    background_tasks: BackgroundTasks,
    claims: TokenClaims = Depends(require_role(UserRole.OWNER)),
    inventory: InventoryService = Depends(get_inventory_service),
    notifier: PropertyNotifier = Depends(get_notifier),
):
    """Append a listing to the caller's properties and email a notice after responding."""
    prop = inventory.add_property(claims.user_id, property_data)

    notice = build_property_notice(prop.owner, prop)
    background_tasks.add_task(send_property_notification, notifier, notice)

    return AddPropertyResponse(property=PropertyResponse.model_validate(prop))


@router.get("/my-properties", response_model=PropertyListResponse)
def list_my_properties(
    claims: TokenClaims = Depends(get_token_claims),
    inventory: InventoryService = Depends(get_inventory_service),
):
    return PropertyListResponse(
        properties=[PropertyResponse.model_validate(p) for p in inventory.list_own_properties(claims.user_id)]
    )


@router.get("/properties", response_model=List[PropertyResponse])
def list_all_properties(inventory: InventoryService = Depends(get_inventory_service)):
    """Every listing on the site; searching and price filtering happen client-side."""
    return inventory.list_all_properties()


@router.put("/update-property/{property_id}", response_model=PropertyResponse)
def update_property(
    property_id: str,
    changes: PropertyUpdate,
    claims: TokenClaims = Depends(get_token_claims),
    inventory: InventoryService = Depends(get_inventory_service),
):
    return inventory.update_property(claims.user_id, property_id, changes)


@router.delete("/delete-property/{property_id}", response_model=MessageResponse)
def delete_property(
    property_id: str,
    claims: TokenClaims = Depends(get_token_claims),
    inventory: InventoryService = Depends(get_inventory_service),
):
    inventory.delete_property(claims.user_id, property_id)
    return MessageResponse(message="Property deleted successfully")
