"""
Equipment API Routes

Inventory listing for everyone; add, edit and delete for admins.
Deletes require ``confirm=true`` and return an undo action id.
"""

from fastapi import APIRouter, Depends, Query, status
from loguru import logger

from kitcheckout.api.dependencies import get_current_user, get_inventory, require_admin
from kitcheckout.api.schemas import (
    BulkDeleteRequest,
    DeleteResponse,
    EquipmentCreate,
    EquipmentResponse,
    EquipmentUpdate,
    ErrorResponse,
)
from kitcheckout.ledger.inventory import InventoryManager
from kitcheckout.storage.records import Equipment, User

router = APIRouter(prefix="/equipment", tags=["equipment"])


def _to_record(equipment_id: int, body) -> Equipment:
    return Equipment(
        id=equipment_id,
        name=body.name,
        type=body.type,
        total=body.total,
        avail=body.avail,
        photo=body.photo,
    )


@router.get("", response_model=list[EquipmentResponse])
def list_equipment(
    inventory: InventoryManager = Depends(get_inventory),
    user: User = Depends(get_current_user),
):
    """List all equipment."""
    return [EquipmentResponse.model_validate(e) for e in inventory.list_equipment()]


@router.get(
    "/{equipment_id}",
    response_model=EquipmentResponse,
    responses={404: {"model": ErrorResponse, "description": "Equipment not found"}},
)
def get_equipment(
    equipment_id: int,
    inventory: InventoryManager = Depends(get_inventory),
    user: User = Depends(get_current_user),
):
    """Get one equipment item."""
    return EquipmentResponse.model_validate(inventory.get(equipment_id))


@router.post(
    "",
    response_model=EquipmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse, "description": "Invalid equipment data"}},
)
def create_equipment(
    body: EquipmentCreate,
    inventory: InventoryManager = Depends(get_inventory),
    admin: User = Depends(require_admin),
):
    """Add a new equipment item."""
    saved = inventory.save(_to_record(0, body))
    return EquipmentResponse.model_validate(saved)


@router.put(
    "/{equipment_id}",
    response_model=EquipmentResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid equipment data"},
        404: {"model": ErrorResponse, "description": "Equipment not found"},
    },
)
def update_equipment(
    equipment_id: int,
    body: EquipmentUpdate,
    inventory: InventoryManager = Depends(get_inventory),
    admin: User = Depends(require_admin),
):
    """Replace an equipment item. May set counts that differ from open loans."""
    saved = inventory.save(_to_record(equipment_id, body))
    return EquipmentResponse.model_validate(saved)


@router.delete("/{equipment_id}", response_model=DeleteResponse)
def delete_equipment(
    equipment_id: int,
    confirm: bool = Query(False, description="Must be true to delete"),
    inventory: InventoryManager = Depends(get_inventory),
    admin: User = Depends(require_admin),
):
    """Delete an item. Loan logs that reference it are kept."""
    action = inventory.delete(equipment_id, lambda message: confirm)
    if action is None:
        return DeleteResponse(deleted=False, message="Delete not confirmed.")

    logger.info(f"{admin.email} deleted equipment {equipment_id}")
    return DeleteResponse(deleted=True, undo_action_id=action.id, message="Item deleted.")


@router.post("/bulk-delete", response_model=DeleteResponse)
def bulk_delete_equipment(
    body: BulkDeleteRequest,
    inventory: InventoryManager = Depends(get_inventory),
    admin: User = Depends(require_admin),
):
    """Delete several items with one confirmation."""
    action = inventory.bulk_delete(body.ids, lambda message: body.confirm)
    if action is None:
        return DeleteResponse(deleted=False, message="Delete not confirmed.")

    logger.info(f"{admin.email} bulk-deleted equipment {body.ids}")
    return DeleteResponse(
        deleted=True,
        undo_action_id=action.id,
        message=f"{len(set(body.ids))} items deleted.",
    )
