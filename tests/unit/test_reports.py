"""
Unit tests for ledger reports and the consistency audit.
"""

from kitcheckout.ledger.reports import audit, inventory_stats
from kitcheckout.storage.records import Equipment, Log

PHOTO = "data:image/jpeg;base64,AAAA"


def _log(log_id, email, equipment_id, quantity, returned=False):
    return Log(
        id=log_id,
        email=email,
        equipment_id=equipment_id,
        name="Item",
        quantity=quantity,
        borrow_at="2024-09-02T08:30:00+00:00",
        return_at="2024-09-02T10:30:00+00:00" if returned else None,
    )


class TestStats:
    """Tests for inventory totals."""

    def test_stats(self, sample_inventory, reports):
        stats = reports.stats()

        assert stats.total == 16
        assert stats.avail == 14
        assert stats.borrowed == 2

    def test_empty(self):
        assert inventory_stats([]).to_dict() == {"total": 0, "avail": 0, "borrowed": 0}


class TestHistory:
    """Tests for history listings."""

    def test_user_history_newest_first(self, ledger, reports, sample_inventory):
        ledger.borrow("a@x.com", 1, 1, PHOTO)
        ledger.borrow("b@x.com", 1, 1, PHOTO)
        ledger.borrow("a@x.com", 3, 1, PHOTO)

        history = reports.user_history("A@x.com")

        assert [log.equipment_id for log in history] == [3, 1]
        assert len(reports.all_history()) == 3

    def test_recent_logs(self, ledger, reports, sample_inventory):
        for email in ("a@x.com", "b@x.com", "c@x.com"):
            ledger.borrow(email, 1, 1, PHOTO)

        recent = reports.recent_logs(2)

        assert [log.email for log in recent] == ["c@x.com", "b@x.com"]
        assert reports.recent_logs(0) == []

    def test_find_equipment_for_deleted_item(self, reports, sample_inventory):
        assert reports.find_equipment(1).name == "Size 5 Soccer Ball"
        assert reports.find_equipment(99) is None


class TestAudit:
    """Tests for invariant checking."""

    def test_consistent_ledger(self):
        equipment = [Equipment(1, "Ball", "Soccer", 5, 3)]
        logs = [_log(1, "a@x.com", 1, 2), _log(2, "b@x.com", 1, 4, returned=True)]

        report = audit(equipment, logs)

        assert report.ok
        assert report.to_dict() == {"ok": True, "discrepancies": [], "orphaned_loans": []}

    def test_conservation_mismatch(self):
        """Test a partially applied borrow shows up."""
        equipment = [Equipment(1, "Ball", "Soccer", 5, 3)]

        report = audit(equipment, [])

        assert not report.ok
        assert report.discrepancies[0].issues == ["available plus on loan does not equal total"]

    def test_bounds_and_duplicates(self):
        equipment = [Equipment(1, "Ball", "Soccer", 2, 3), Equipment(2, "Net", "Volleyball", 2, -2)]
        logs = [_log(1, "a@x.com", 2, 2), _log(2, "a@x.com", 2, 2)]

        report = audit(equipment, logs)

        by_id = {d.equipment_id: d for d in report.discrepancies}
        assert "available exceeds total" in by_id[1].issues
        assert "available below zero" in by_id[2].issues
        assert "a@x.com has more than one open loan" in by_id[2].issues
        assert by_id[2].on_loan == 4

    def test_orphaned_loans(self):
        """Test open loans on deleted equipment are reported."""
        logs = [_log(1, "a@x.com", 9, 1), _log(2, "b@x.com", 9, 1, returned=True)]

        report = audit([], logs)

        assert [log.id for log in report.orphaned_loans] == [1]
        assert not report.ok
