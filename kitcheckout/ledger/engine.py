"""
Ledger Engine for KitCheckout

Borrow/return state transitions over Equipment and Logs.

Each (email, equipment id) pair is either without an active loan or on
loan with exactly one open Log. Borrowing moves units from ``avail`` into
a new open Log; returning closes the Log and puts the units back, never
letting ``avail`` exceed ``total``.

Design Decisions:
1. Guard inside the engine: ``borrow`` re-checks for an open loan itself
2. Each transition runs under the repository lock, so concurrent callers
   in one process cannot interleave their reads and writes
3. Two writes per transition, no cross-collection transaction. Borrow
   writes Equipment then Logs; return writes Logs then Equipment. A crash
   between them leaves the ledger partially applied and ``audit`` in
   ``reports`` will report the mismatch.
4. Best-effort restore: closing a loan on deleted equipment still succeeds
"""

from typing import Optional

from loguru import logger

from kitcheckout.errors import ConflictError, NotFoundError, ValidationError
from kitcheckout.storage.records import Equipment, Log
from kitcheckout.storage.repository import CheckoutRepository
from kitcheckout.utils import Clock, next_id, normalize_email, utcnow


def find_open_log(logs: list[Log], email: str, equipment_id: int) -> Optional[Log]:
    """First open log for the pair in storage order."""
    return next((log for log in logs if log.is_open and log.matches(email, equipment_id)), None)


def _find_equipment(equipment: list[Equipment], equipment_id: int) -> Optional[Equipment]:
    return next((e for e in equipment if e.id == equipment_id), None)


class LedgerEngine:
    """
    Borrow and return operations with invariant enforcement.

    Usage:
        ledger = LedgerEngine(repo)

        log = ledger.borrow("a@x.com", 1, 2, photo)
        ledger.is_already_borrowing("a@x.com", 1)   # True
        ledger.return_equipment("a@x.com", 1, return_photo)
    """

    def __init__(self, repository: CheckoutRepository, clock: Optional[Clock] = None):
        self.repository = repository
        self.clock = clock or utcnow

    def is_already_borrowing(self, email: str, equipment_id: int) -> bool:
        """True iff an open loan exists for the pair."""
        email = normalize_email(email)
        return find_open_log(self.repository.get_logs(), email, equipment_id) is not None

    def active_loans(self, email: Optional[str] = None) -> list[Log]:
        """Open logs, optionally restricted to one borrower."""
        logs = [log for log in self.repository.get_logs() if log.is_open]
        if email is not None:
            email = normalize_email(email)
            logs = [log for log in logs if log.email == email]
        return logs

    def borrow(self, email: str, equipment_id: int, quantity: int, photo: str) -> Log:
        """
        Check out ``quantity`` units of an equipment item.

        Args:
            email: Borrower email
            equipment_id: Equipment to borrow
            quantity: Units, at least 1
            photo: Proof photo (data URL)

        Returns:
            The new open Log

        Raises:
            ValidationError: Bad quantity or missing photo
            NotFoundError: Unknown equipment
            ConflictError: ALREADY_BORROWING or INSUFFICIENT_AVAILABILITY
        """
        email = normalize_email(email)

        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise ValidationError("Quantity must be a whole number of at least 1.", code="INVALID_QUANTITY")
        if not photo:
            raise ValidationError("Please take a photo as proof.", code="PHOTO_REQUIRED")

        with self.repository.lock:
            return self._apply_borrow(email, equipment_id, quantity, photo)

    def _apply_borrow(self, email: str, equipment_id: int, quantity: int, photo: str) -> Log:
        equipment = self.repository.get_equipment()
        item = _find_equipment(equipment, equipment_id)
        if item is None:
            raise NotFoundError("Equipment", equipment_id)

        logs = self.repository.get_logs()
        if find_open_log(logs, email, equipment_id) is not None:
            raise ConflictError(
                "You are already borrowing this item. Please return it first before borrowing another one.",
                code="ALREADY_BORROWING",
            )

        if item.avail < quantity:
            raise ConflictError(
                f"Only {item.avail} of {item.name} available.",
                code="INSUFFICIENT_AVAILABILITY",
                detail=f"requested {quantity}, available {item.avail}",
            )

        item.avail -= quantity
        self.repository.save_equipment(equipment)

        now = self.clock()
        log = Log(
            id=next_id((entry.id for entry in logs), now),
            email=email,
            equipment_id=equipment_id,
            name=item.name,
            quantity=quantity,
            borrow_at=now.isoformat(),
            return_at=None,
            photo=photo,
        )
        self.repository.save_logs([*logs, log])

        logger.info(f"{email} borrowed {quantity} x {item.name} (equipment {equipment_id}, log {log.id})")
        return log

    def return_equipment(self, email: str, equipment_id: int, return_photo: str) -> Log:
        """
        Close the open loan for the pair and restore availability.

        Availability is increased by the loan quantity but clamped to the
        current ``total``, which an admin may have lowered meanwhile.

        Returns:
            The closed Log

        Raises:
            ValidationError: Missing photo
            ConflictError: NO_ACTIVE_LOAN
        """
        email = normalize_email(email)

        if not return_photo:
            raise ValidationError("Please take a photo as proof.", code="PHOTO_REQUIRED")

        with self.repository.lock:
            return self._apply_return(email, equipment_id, return_photo)

    def _apply_return(self, email: str, equipment_id: int, return_photo: str) -> Log:
        logs = self.repository.get_logs()
        log = find_open_log(logs, email, equipment_id)
        if log is None:
            raise ConflictError("No active loan found for this item.", code="NO_ACTIVE_LOAN")

        log.return_at = self.clock().isoformat()
        log.return_photo = return_photo
        self.repository.save_logs(logs)

        equipment = self.repository.get_equipment()
        item = _find_equipment(equipment, equipment_id)
        if item is None:
            logger.warning(f"Closed log {log.id} for missing equipment {equipment_id}; availability not restored")
            return log

        item.avail = min(item.avail + log.quantity, item.total)
        self.repository.save_equipment(equipment)

        logger.info(f"{email} returned {log.quantity} x {item.name} (equipment {equipment_id}, log {log.id})")
        return log
