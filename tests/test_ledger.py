"""
Pending-action ledger tests - queueing, listing and one-way resolution.
"""

import pytest

from crm.core.errors import InvalidStateError, NotFoundError
from crm.core.ledger import PendingActionLedger
from crm.core.schema import APPROVED, PENDING, REJECTED, PendingAction


class TestEnqueue:
    """Queueing proposed mutations."""

    def test_enqueue_returns_pending_entry(self, ledger, employee):
        action = ledger.enqueue("create", "leads", {"name": "Acme"}, actor=employee)

        assert action.status == PENDING
        assert action.type == "create"
        assert action.module == "leads"
        assert action.data == {"name": "Acme"}
        assert action.requested_by == "2"
        assert action.requested_by_name == "Prathmesh Tare"
        assert action.requested_at
        assert action.resolved_at is None

    def test_ids_are_unique(self, ledger, employee):
        ids = {ledger.enqueue("create", "leads", {"name": str(i)}, actor=employee).id for i in range(20)}
        assert len(ids) == 20

    def test_data_is_snapshotted(self, ledger, employee):
        data = {"name": "Acme", "tags": ["hot"]}
        action = ledger.enqueue("create", "leads", data, actor=employee)
        data["tags"].append("cold")

        assert ledger.get(action.id).data == {"name": "Acme", "tags": ["hot"]}

    def test_update_requires_original_data(self, ledger, employee):
        with pytest.raises(ValueError, match="originalData"):
            ledger.enqueue("update", "projects", {"id": "7", "status": "Inactive"}, actor=employee)

    def test_unknown_type_or_module_rejected(self, ledger, employee):
        with pytest.raises(ValueError):
            ledger.enqueue("archive", "leads", {}, actor=employee)
        with pytest.raises(ValueError):
            ledger.enqueue("create", "invoices", {}, actor=employee)

    def test_create_never_stores_original_data(self, ledger, employee):
        action = ledger.enqueue("create", "leads", {"name": "Acme"}, {"name": "stale"}, employee)

        assert action.original_data is None
        assert "originalData" not in ledger.get(action.id).to_dict()

    def test_actor_required(self, ledger):
        with pytest.raises(ValueError):
            ledger.enqueue("create", "leads", {"name": "Acme"})

    def test_entries_persist_in_store(self, store, employee):
        PendingActionLedger(store).enqueue("create", "land", {"name": "Plot 4"}, actor=employee)

        stored = store.get("pendingActions")
        assert len(stored) == 1
        assert stored[0]["requestedBy"] == "2"
        assert stored[0]["status"] == "pending"


class TestListing:
    """Listing pending entries."""

    def test_insertion_order(self, ledger, employee):
        names = ["first", "second", "third"]
        for name in names:
            ledger.enqueue("create", "contacts", {"name": name}, actor=employee)

        assert [a.data["name"] for a in ledger.list_pending()] == names

    def test_module_filter(self, ledger, employee):
        ledger.enqueue("create", "leads", {"name": "L"}, actor=employee)
        ledger.enqueue("create", "land", {"name": "P"}, actor=employee)

        pending = ledger.list_pending("land")
        assert [a.module for a in pending] == ["land"]

    def test_resolved_entries_leave_pending_list_but_stay_in_history(self, ledger, employee, admin):
        keep = ledger.enqueue("create", "leads", {"name": "keep"}, actor=employee)
        drop = ledger.enqueue("create", "leads", {"name": "drop"}, actor=employee)
        ledger.resolve(drop.id, REJECTED, "duplicate", admin)

        assert [a.id for a in ledger.list_pending()] == [keep.id]
        history = ledger.list_actions()
        assert [a.id for a in history] == [keep.id, drop.id]
        assert [a.id for a in ledger.list_actions(status=REJECTED)] == [drop.id]

    def test_empty_ledger(self, ledger):
        assert ledger.list_pending() == []


class TestResolve:
    """Approve/reject transitions."""

    def test_reject_records_decision(self, ledger, employee, admin):
        action = ledger.enqueue("create", "leads", {"name": "Acme"}, actor=employee)

        resolved = ledger.resolve(action.id, REJECTED, "not a real lead", admin)

        assert resolved.status == REJECTED
        assert resolved.admin_notes == "not a real lead"
        assert resolved.resolved_by == "1"
        assert resolved.resolved_at
        assert ledger.get(action.id).status == REJECTED

    def test_reject_does_not_touch_records(self, ledger, store, employee, admin):
        action = ledger.enqueue("create", "leads", {"name": "Acme"}, actor=employee)
        ledger.resolve(action.id, REJECTED, None, admin)

        assert store.get("leads") == []

    def test_second_resolution_fails_and_leaves_entry_unchanged(self, ledger, employee, admin):
        action = ledger.enqueue("create", "leads", {"name": "Acme"}, actor=employee)
        ledger.resolve(action.id, REJECTED, "first", admin)
        before = ledger.get(action.id)

        with pytest.raises(InvalidStateError) as exc_info:
            ledger.resolve(action.id, APPROVED, "second", admin)

        assert exc_info.value.status == REJECTED
        after = ledger.get(action.id)
        assert after.status == REJECTED
        assert after.admin_notes == "first"
        assert after.resolved_at == before.resolved_at

    def test_unknown_id(self, ledger, admin):
        with pytest.raises(NotFoundError):
            ledger.resolve("missing", APPROVED, None, admin)

    def test_invalid_decision(self, ledger, employee, admin):
        action = ledger.enqueue("create", "leads", {"name": "Acme"}, actor=employee)
        with pytest.raises(ValueError):
            ledger.resolve(action.id, "pending", None, admin)

        assert ledger.get(action.id).status == PENDING

    def test_approve_without_applier_fails(self, store, employee, admin):
        ledger = PendingActionLedger(store)
        action = ledger.enqueue("create", "leads", {"name": "Acme"}, actor=employee)

        with pytest.raises(RuntimeError):
            ledger.resolve(action.id, APPROVED, None, admin)

        assert ledger.get(action.id).status == PENDING
        assert store.get("leads") == []

    def test_reject_without_applier(self, store, employee, admin):
        ledger = PendingActionLedger(store)
        action = ledger.enqueue("create", "leads", {"name": "Acme"}, actor=employee)

        assert ledger.resolve(action.id, REJECTED, None, admin).status == REJECTED

    def test_failed_applier_leaves_entry_pending(self, store, employee, admin):
        def failing_applier(action_type, module, data, original_data):
            raise NotFoundError("Record", "x", module)

        ledger = PendingActionLedger(store, applier=failing_applier)
        action = ledger.enqueue("create", "leads", {"name": "Acme"}, actor=employee)

        with pytest.raises(NotFoundError):
            ledger.resolve(action.id, APPROVED, None, admin)
        assert ledger.get(action.id).status == PENDING


class TestPendingActionSerialization:
    """Stored camelCase form."""

    def test_round_trip(self, ledger, employee, admin):
        action = ledger.enqueue("update", "projects", {"id": "7", "status": "Inactive"},
                                {"id": "7", "status": "Active"}, employee)
        ledger.resolve(action.id, REJECTED, "keep active", admin)

        stored = ledger.get(action.id).to_dict()
        assert stored["originalData"] == {"id": "7", "status": "Active"}
        assert stored["adminNotes"] == "keep active"
        assert stored["resolvedBy"] == "1"
        assert PendingAction.from_dict(stored).to_dict() == stored

    def test_optional_keys_omitted_while_pending(self, ledger, employee):
        stored = ledger.enqueue("create", "leads", {"name": "Acme"}, actor=employee).to_dict()

        assert "originalData" not in stored
        assert "resolvedAt" not in stored
        assert "adminNotes" not in stored
