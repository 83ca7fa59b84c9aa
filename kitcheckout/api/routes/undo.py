"""
Undo API Routes

Apply the compensating action of a recent destructive operation.
"""

from fastapi import APIRouter, Depends

from kitcheckout.api.dependencies import get_undo_registry, require_admin
from kitcheckout.api.schemas import ErrorResponse, UndoResponse
from kitcheckout.ledger.undo import UndoRegistry
from kitcheckout.storage.records import User

router = APIRouter(prefix="/undo", tags=["undo"])


@router.post(
    "/{action_id}",
    response_model=UndoResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Unknown or pruned action"},
        409: {"model": ErrorResponse, "description": "Action expired or already undone"},
    },
)
def apply_undo(
    action_id: str,
    registry: UndoRegistry = Depends(get_undo_registry),
    admin: User = Depends(require_admin),
):
    """Undo a delete within its time window."""
    action = registry.undo(action_id)
    return UndoResponse(action_id=action.id, state=action.state.value, description=action.description)
