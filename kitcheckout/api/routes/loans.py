"""
Loan API Routes

Borrow and return for the signed-in user.
"""

from fastapi import APIRouter, Depends, status

from kitcheckout.api.dependencies import get_current_user, get_ledger
from kitcheckout.api.schemas import (
    BorrowRequest,
    BorrowStatusResponse,
    ErrorResponse,
    LogResponse,
    ReturnRequest,
)
from kitcheckout.ledger.engine import LedgerEngine
from kitcheckout.storage.records import User

router = APIRouter(prefix="/loans", tags=["loans"])


@router.post(
    "/borrow",
    response_model=LogResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        404: {"model": ErrorResponse, "description": "Equipment not found"},
        409: {"model": ErrorResponse, "description": "Already borrowing or not enough available"},
    },
)
def borrow(
    body: BorrowRequest,
    ledger: LedgerEngine = Depends(get_ledger),
    user: User = Depends(get_current_user),
):
    """Borrow equipment with a proof photo."""
    log = ledger.borrow(user.email, body.equipment_id, body.quantity, body.photo)
    return LogResponse.model_validate(log)


@router.post(
    "/return",
    response_model=LogResponse,
    responses={409: {"model": ErrorResponse, "description": "No active loan"}},
)
def return_equipment(
    body: ReturnRequest,
    ledger: LedgerEngine = Depends(get_ledger),
    user: User = Depends(get_current_user),
):
    """Return borrowed equipment with a proof photo."""
    log = ledger.return_equipment(user.email, body.equipment_id, body.photo)
    return LogResponse.model_validate(log)


@router.get("/active", response_model=list[LogResponse])
def active_loans(
    ledger: LedgerEngine = Depends(get_ledger),
    user: User = Depends(get_current_user),
):
    """Open loans of the signed-in user."""
    return [LogResponse.model_validate(log) for log in ledger.active_loans(user.email)]


@router.get("/status/{equipment_id}", response_model=BorrowStatusResponse)
def borrow_status(
    equipment_id: int,
    ledger: LedgerEngine = Depends(get_ledger),
    user: User = Depends(get_current_user),
):
    """Whether the signed-in user is already borrowing an item."""
    return BorrowStatusResponse(
        equipment_id=equipment_id,
        borrowing=ledger.is_already_borrowing(user.email, equipment_id),
    )
