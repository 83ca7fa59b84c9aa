"""
Report API Routes for KitCheckout

Ledger insights:
- Inventory totals
- Personal and global loan history
- Consistency audit
"""

from fastapi import APIRouter, Depends, Query
from loguru import logger

from kitcheckout.api.dependencies import get_current_user, get_reports, require_admin
from kitcheckout.api.schemas import AuditResponse, DiscrepancyResponse, LogResponse, StatsResponse
from kitcheckout.ledger.reports import LedgerReports
from kitcheckout.storage.records import User

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/stats", response_model=StatsResponse)
def get_stats(
    reports: LedgerReports = Depends(get_reports),
    user: User = Depends(get_current_user),
):
    """Total, available and borrowed unit counts."""
    return StatsResponse(**reports.stats().to_dict())


@router.get("/history", response_model=list[LogResponse])
def my_history(
    reports: LedgerReports = Depends(get_reports),
    user: User = Depends(get_current_user),
):
    """The signed-in user's loans, newest first."""
    return [LogResponse.model_validate(log) for log in reports.user_history(user.email)]


@router.get("/history/all", response_model=list[LogResponse])
def all_history(
    reports: LedgerReports = Depends(get_reports),
    admin: User = Depends(require_admin),
):
    """Every loan, newest first."""
    return [LogResponse.model_validate(log) for log in reports.all_history()]


@router.get("/recent", response_model=list[LogResponse])
def recent_activity(
    limit: int = Query(5, ge=1, le=100),
    reports: LedgerReports = Depends(get_reports),
    admin: User = Depends(require_admin),
):
    """Latest loans, newest first."""
    return [LogResponse.model_validate(log) for log in reports.recent_logs(limit)]


@router.get("/audit", response_model=AuditResponse)
def audit_ledger(
    reports: LedgerReports = Depends(get_reports),
    admin: User = Depends(require_admin),
):
    """Check availability bounds, duplicate open loans and conservation."""
    report = reports.audit()
    if not report.ok:
        logger.warning(
            f"Ledger audit: {len(report.discrepancies)} discrepancies, "
            f"{len(report.orphaned_loans)} orphaned loans"
        )
    return AuditResponse(
        ok=report.ok,
        discrepancies=[DiscrepancyResponse(**d.to_dict()) for d in report.discrepancies],
        orphaned_loans=[LogResponse.model_validate(log) for log in report.orphaned_loans],
    )
