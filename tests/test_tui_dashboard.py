"""
Operations dashboard tests - admin login and approve/reject helpers.
"""

import pytest

from crm.core.session import SessionProvider, UserDirectory
from tui.approvals import approve_action, pending_rows, reject_action, summarize_change
from tui.auth import authenticate, validate_dashboard_config


@pytest.fixture
def sessions(store):
    directory = UserDirectory(store)
    directory.seed_demo_users()
    return SessionProvider(store, directory)


class TestDashboardConfig:
    """Dashboard configuration validation."""

    def test_enabled_by_default(self, monkeypatch):
        monkeypatch.delenv("DASHBOARD_ENABLED", raising=False)

        result = validate_dashboard_config()
        assert result == {"enabled": True, "store": "memory"}

    def test_disabled(self, monkeypatch):
        monkeypatch.setenv("DASHBOARD_ENABLED", "false")

        assert validate_dashboard_config() == {"enabled": False, "store": None}

    def test_invalid_store_provider(self, monkeypatch):
        monkeypatch.setenv("CRM_STORE_PROVIDER", "mongo")

        result = validate_dashboard_config()
        assert isinstance(result, str)
        assert "CRM_STORE_PROVIDER" in result


class TestDashboardAuthentication:
    """Only admins get into the dashboard."""

    def test_admin_login(self, sessions):
        actor = authenticate(sessions, "admin", "admin123")

        assert actor is not None
        assert actor.is_admin

    def test_employee_refused_and_logged_out(self, sessions):
        assert authenticate(sessions, "prathamesh.tase", "Green@7581") is None
        assert sessions.current_actor() is None

    def test_bad_password(self, sessions):
        assert authenticate(sessions, "admin", "guess") is None

    def test_disabled_dashboard_refuses_login(self, sessions, monkeypatch):
        monkeypatch.setenv("DASHBOARD_ENABLED", "false")

        assert authenticate(sessions, "admin", "admin123") is None


class TestApprovalHelpers:
    """Table rows and resolution triggers."""

    def test_rows_in_request_order(self, gate, employee):
        first = gate.propose(employee, "create", "leads", {"name": "Acme"}).pending_action
        second = gate.propose(employee, "create", "land", {"name": "Plot 4"}).pending_action

        rows = pending_rows(gate)

        assert [r[0] for r in rows] == [first.id, second.id]
        assert rows[0][1:4] == ("create", "leads", "Prathmesh Tare")
        assert rows[0][5] == "create Acme"

    def test_rows_filtered_by_module(self, gate, employee):
        gate.propose(employee, "create", "leads", {"name": "Acme"})

        assert pending_rows(gate, "land") == []

    def test_update_summary_lists_changed_fields(self, gate, store, employee):
        store.put("inventory", [{"id": "7", "name": "Hub", "status": "Available"}])
        action = gate.propose(employee, "update", "inventory",
                              {"id": "7", "name": "Hub", "status": "Occupied"}).pending_action

        assert summarize_change(action) == "status: Available -> Occupied"

    def test_long_summary_truncated(self, gate, employee):
        action = gate.propose(employee, "create", "leads", {"name": "x" * 200}).pending_action

        summary = summarize_change(action, limit=30)
        assert len(summary) == 30
        assert summary.endswith("...")

    def test_approve_applies_change(self, gate, store, employee, admin):
        action = gate.propose(employee, "create", "leads", {"name": "Acme"}).pending_action

        result = approve_action(gate, action.id, admin, "ok")

        assert result["success"] is True
        assert result["status"] == "approved"
        assert [r["name"] for r in store.get("leads")] == ["Acme"]
        assert pending_rows(gate) == []

    def test_reject_with_blank_notes(self, gate, employee, admin):
        action = gate.propose(employee, "create", "leads", {"name": "Acme"}).pending_action

        result = reject_action(gate, action.id, admin, "")

        assert result["success"] is True
        assert gate.ledger.get(action.id).admin_notes is None

    def test_second_resolution_reported_as_error(self, gate, employee, admin):
        action = gate.propose(employee, "create", "leads", {"name": "Acme"}).pending_action
        reject_action(gate, action.id, admin)

        result = approve_action(gate, action.id, admin)

        assert result["success"] is False
        assert "already rejected" in result["error"]

    def test_unknown_action_reported_as_error(self, gate, admin):
        result = approve_action(gate, "missing", admin)

        assert result["success"] is False
        assert "not found" in result["error"]
