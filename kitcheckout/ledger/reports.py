"""
Ledger reports: inventory totals, loan history and consistency audit.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Optional

from kitcheckout.storage.records import Equipment, Log
from kitcheckout.storage.repository import CheckoutRepository
from kitcheckout.utils import normalize_email


@dataclass
class InventoryStats:
    """Unit totals across all equipment."""

    total: int
    avail: int
    borrowed: int

    def to_dict(self) -> dict:
        return {"total": self.total, "avail": self.avail, "borrowed": self.borrowed}


@dataclass
class Discrepancy:
    """One equipment item whose counts disagree with its open loans."""

    equipment_id: int
    name: str
    total: int
    avail: int
    on_loan: int
    issues: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "equipment_id": self.equipment_id,
            "name": self.name,
            "total": self.total,
            "avail": self.avail,
            "on_loan": self.on_loan,
            "issues": list(self.issues),
        }


@dataclass
class AuditReport:
    """Result of checking the ledger invariants."""

    discrepancies: list[Discrepancy] = field(default_factory=list)
    orphaned_loans: list[Log] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.discrepancies and not self.orphaned_loans

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "discrepancies": [d.to_dict() for d in self.discrepancies],
            "orphaned_loans": [log.to_dict() for log in self.orphaned_loans],
        }


def inventory_stats(equipment: list[Equipment]) -> InventoryStats:
    total = sum(e.total for e in equipment)
    avail = sum(e.avail for e in equipment)
    return InventoryStats(total=total, avail=avail, borrowed=total - avail)


def audit(equipment: list[Equipment], logs: list[Log]) -> AuditReport:
    """
    Check bounds, one-open-loan-per-pair and conservation for every item.

    Conservation mismatches also appear after legitimate admin edits to
    ``total`` or ``avail``; the report flags them without judging intent.
    """
    on_loan: dict[int, int] = defaultdict(int)
    open_pairs: dict[tuple[str, int], int] = defaultdict(int)
    for log in logs:
        if log.is_open:
            on_loan[log.equipment_id] += log.quantity
            open_pairs[(log.email, log.equipment_id)] += 1

    report = AuditReport()
    known_ids = set()

    for item in equipment:
        known_ids.add(item.id)
        issues = []
        if item.avail < 0:
            issues.append("available below zero")
        if item.avail > item.total:
            issues.append("available exceeds total")
        if item.avail + on_loan[item.id] != item.total:
            issues.append("available plus on loan does not equal total")
        duplicates = [email for (email, eid), count in open_pairs.items() if eid == item.id and count > 1]
        for email in sorted(duplicates):
            issues.append(f"{email} has more than one open loan")

        if issues:
            report.discrepancies.append(Discrepancy(
                equipment_id=item.id,
                name=item.name,
                total=item.total,
                avail=item.avail,
                on_loan=on_loan[item.id],
                issues=issues,
            ))

    report.orphaned_loans = [log for log in logs if log.is_open and log.equipment_id not in known_ids]
    return report


class LedgerReports:
    """Read-only views over the ledger."""

    def __init__(self, repository: CheckoutRepository):
        self.repository = repository

    def stats(self) -> InventoryStats:
        return inventory_stats(self.repository.get_equipment())

    def user_history(self, email: str) -> list[Log]:
        """A borrower's logs, newest first."""
        email = normalize_email(email)
        return [log for log in reversed(self.repository.get_logs()) if log.email == email]

    def all_history(self) -> list[Log]:
        return list(reversed(self.repository.get_logs()))

    def recent_logs(self, limit: int = 5) -> list[Log]:
        if limit <= 0:
            return []
        return list(reversed(self.repository.get_logs()[-limit:]))

    def audit(self) -> AuditReport:
        return audit(self.repository.get_equipment(), self.repository.get_logs())

    def find_equipment(self, equipment_id: int) -> Optional[Equipment]:
        """Equipment for a log, or None if it has been deleted."""
        return next((e for e in self.repository.get_equipment() if e.id == equipment_id), None)
