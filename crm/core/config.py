"""
Runtime configuration for the brokerage CRM, read from environment variables.
"""

import os
from pathlib import Path

# Database path configuration
DB_PATH = os.getenv("CRM_DB_PATH", "./data/crm.db")

# Record store backend: sqlite|memory
STORE_PROVIDER = os.getenv("CRM_STORE_PROVIDER", "sqlite")

DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Seed the demo user list into an empty user directory
SEED_DEMO_USERS = os.getenv("SEED_DEMO_USERS", "true").lower() == "true"

# Operations dashboard (TUI)
DASHBOARD_ENABLED = os.getenv("DASHBOARD_ENABLED", "true").lower() == "true"

# Roles
ADMIN_ROLE = "admin"
EMPLOYEE_ROLE = "employee"

# Collections that can be targeted by proposals
MODULES = ("leads", "developers", "contacts", "projects", "inventory", "land")

# Internal collections kept in the same store
PENDING_ACTIONS_COLLECTION = "pendingActions"
USERS_COLLECTION = "users"
SESSIONS_COLLECTION = "sessions"

VERSION = "1.0.0"


def get_db_path() -> str:
    """Current database path; re-reads the environment so tests can redirect it."""
    return os.getenv("CRM_DB_PATH", DB_PATH)


def get_store_provider() -> str:
    return os.getenv("CRM_STORE_PROVIDER", STORE_PROVIDER).lower()


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def seed_demo_users_enabled():
    return os.getenv("SEED_DEMO_USERS", "true").lower() == "true"


def dashboard_enabled():
    return os.getenv("DASHBOARD_ENABLED", "true").lower() == "true"


def ensure_db_directory(db_path: str = None):
    """Ensure the database directory exists."""
    Path(db_path or get_db_path()).parent.mkdir(parents=True, exist_ok=True)


def get_record_store():
    """Get the configured record store implementation."""
    provider = get_store_provider()

    if provider == "memory":
        from crm.store.index import InMemoryRecordStore
        return InMemoryRecordStore()
    elif provider == "sqlite":
        from crm.store.sqlite_store import SqliteRecordStore
        return SqliteRecordStore(get_db_path())
    else:
        raise ValueError(f"Unknown CRM_STORE_PROVIDER: {provider}. Must be 'sqlite' or 'memory'")
