"""
Ledger Module for KitCheckout

Lending ledger and inventory consistency:
- Borrow/return transitions with invariant checks
- Admin inventory edits with confirmation and undo
- Statistics, history and audit reports
"""

from kitcheckout.ledger.engine import (
    LedgerEngine,
    find_open_log,
)
from kitcheckout.ledger.inventory import (
    ConfirmPrompt,
    InventoryManager,
)
from kitcheckout.ledger.undo import (
    UndoAction,
    UndoRegistry,
    UndoState,
)
from kitcheckout.ledger.reports import (
    AuditReport,
    Discrepancy,
    InventoryStats,
    LedgerReports,
    audit,
    inventory_stats,
)

__all__ = [
    # Engine
    "LedgerEngine",
    "find_open_log",
    # Inventory
    "ConfirmPrompt",
    "InventoryManager",
    # Undo
    "UndoAction",
    "UndoRegistry",
    "UndoState",
    # Reports
    "AuditReport",
    "Discrepancy",
    "InventoryStats",
    "LedgerReports",
    "audit",
    "inventory_stats",
]
