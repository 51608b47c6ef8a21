"""
Operations dashboard - admin interface for reviewing and resolving pending record changes.
"""

import sys

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widgets import Button, DataTable, Footer, Header, Input, Label, Static

from crm.core.config import get_record_store, seed_demo_users_enabled
from crm.core.gate import MutationGate
from crm.core.session import SessionProvider, UserDirectory
from util.logging import logger

from .approvals import COLUMNS, approve_action, pending_rows, reject_action
from .auth import authenticate, validate_dashboard_config


class LoginScreen(Screen):
    """Username/email and password login."""

    def compose(self) -> ComposeResult:
        yield Container(
            Static("Brokerage CRM Operations Dashboard", classes="title"),
            Static("Admin login required", classes="subtitle"),
            Label("Username or Email:", classes="label"),
            Input(id="login-name", placeholder="e.g. admin"),
            Label("Password:", classes="label"),
            Input(id="login-password", password=True),
            Button("Login", id="login-button", variant="primary"),
            Static("ESC to cancel", classes="hint"),
            id="auth-container",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "login-button":
            self.handle_login()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "login-password":
            self.handle_login()

    def handle_login(self) -> None:
        login = self.query_one("#login-name", Input).value
        password = self.query_one("#login-password", Input).value

        actor = authenticate(self.app.sessions, login, password)
        if actor is None:
            self.handle_auth_failure()
            return

        self.app.actor = actor
        self.app.switch_screen(ApprovalsScreen())

    def handle_auth_failure(self) -> None:
        button = self.query_one("#login-button", Button)
        button.label = "Invalid credentials - Try Again"
        button.variant = "error"
        self.query_one("#login-password", Input).value = ""


class ApprovalsScreen(Screen):
    """Pending action queue with approve/reject controls."""

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("Pending Approvals", classes="section-title")
        yield DataTable(id="pending-table", cursor_type="row")
        yield Input(id="admin-notes", placeholder="Admin notes (optional)")
        yield Horizontal(
            Button("Approve", id="approve-button", variant="success"),
            Button("Reject", id="reject-button", variant="error"),
            Button("Refresh", id="refresh-button", variant="primary"),
            id="actions-section",
        )
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#pending-table", DataTable)
        table.add_columns(*COLUMNS)
        self.refresh_pending()

    def refresh_pending(self) -> None:
        table = self.query_one("#pending-table", DataTable)
        table.clear()
        self._rows = pending_rows(self.app.gate)
        for row in self._rows:
            table.add_row(*row, key=row[0])
        self.app.sub_title = f"{len(self._rows)} pending"

    def selected_action_id(self):
        table = self.query_one("#pending-table", DataTable)
        if not self._rows or table.cursor_row is None or table.cursor_row >= len(self._rows):
            return None
        return self._rows[table.cursor_row][0]

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id

        if button_id == "refresh-button":
            self.refresh_pending()
            return

        action_id = self.selected_action_id()
        if action_id is None:
            self.notify("No pending action selected", title="Approvals", severity="warning")
            return

        notes_input = self.query_one("#admin-notes", Input)
        if button_id == "approve-button":
            result = approve_action(self.app.gate, action_id, self.app.actor, notes_input.value)
        elif button_id == "reject-button":
            result = reject_action(self.app.gate, action_id, self.app.actor, notes_input.value)
        else:
            return

        if result["success"]:
            self.notify(result["message"], title="Resolved", severity="information")
            notes_input.value = ""
        else:
            self.notify(result["error"], title="Resolution Failed", severity="error")
        self.refresh_pending()


class DashboardApp(App):
    """Brokerage CRM Operations Dashboard TUI Application."""

    CSS = """
    .title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
        color: blue;
    }

    .subtitle {
        text-align: center;
        margin-bottom: 2;
        color: gray;
    }

    .section-title {
        text-style: bold;
        margin: 1 0;
        color: cyan;
    }

    .label {
        margin-bottom: 1;
    }

    .hint {
        text-align: center;
        margin-top: 1;
        color: gray;
        text-style: italic;
    }

    #pending-table {
        height: 1fr;
        border: solid white;
    }

    #actions-section {
        height: auto;
        margin-top: 1;
    }

    #auth-container {
        width: 60;
        height: 24;
        align: center middle;
    }
    """

    TITLE = "Brokerage CRM Operations Dashboard"

    def __init__(self, store=None):
        super().__init__()
        self.store = store if store is not None else get_record_store()
        directory = UserDirectory(self.store)
        if seed_demo_users_enabled():
            directory.seed_demo_users()
        self.sessions = SessionProvider(self.store, directory)
        self.gate = MutationGate(self.store)
        self.actor = None

    def on_mount(self) -> None:
        logger.info("Brokerage CRM Operations Dashboard started")
        self.push_screen(LoginScreen())

    def on_key(self, event) -> None:
        if event.key == "escape":
            if isinstance(self.screen, LoginScreen):
                self.exit(message="Dashboard authentication cancelled")
            elif isinstance(self.screen, ApprovalsScreen):
                self.sessions.logout()
                self.actor = None
                self.switch_screen(LoginScreen())


def main():
    """Main dashboard entry point."""
    try:
        config_validation = validate_dashboard_config()
        if isinstance(config_validation, str):
            print(f"Dashboard configuration error: {config_validation}")
            sys.exit(1)

        if config_validation["enabled"]:
            print("Starting Brokerage CRM Operations Dashboard...")
            DashboardApp().run()
        else:
            print("Dashboard is disabled. Set DASHBOARD_ENABLED=true to enable.")
            sys.exit(0)

    except KeyboardInterrupt:
        print("\nDashboard interrupted by user")
        logger.info("Dashboard exited via keyboard interrupt")


if __name__ == "__main__":
    main()
