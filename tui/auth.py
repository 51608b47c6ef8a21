"""
Operations dashboard authentication - username/email login against the CRM user directory.
Only admins get past the login screen, since the dashboard resolves pending actions.
"""

from typing import Optional, Union

from crm.core import config
from crm.core.schema import Actor
from crm.core.session import SessionProvider
from util.logging import logger


def authenticate(sessions: SessionProvider, login: str, password: str) -> Optional[Actor]:
    """
    Log in through the session provider and return the acting admin.

    Returns None when the credentials are wrong or the user is not an admin.
    All attempts are logged.
    """
    if not config.dashboard_enabled():
        logger.warning("Dashboard authentication attempt when feature disabled")
        return None

    token = sessions.login(login, password)
    if not token:
        log_auth_event(False, f"dashboard login for {login}")
        return None

    actor = sessions.current_actor(token)
    if actor is None or not actor.is_admin:
        sessions.logout(token)
        log_auth_event(False, f"non-admin dashboard login for {login}")
        return None

    log_auth_event(True, f"dashboard login for {login}")
    return actor


def validate_dashboard_config() -> Union[dict, str]:
    """
    Validate dashboard configuration.

    Returns:
        dict with valid config if successful, error message string if invalid
    """
    if not config.dashboard_enabled():
        return {"enabled": False, "store": None}

    provider = config.get_store_provider()
    if provider not in ("sqlite", "memory"):
        error_msg = f"Dashboard configuration invalid: Invalid CRM_STORE_PROVIDER: {provider}. Must be 'sqlite' or 'memory'"
        logger.error(error_msg)
        return error_msg

    return {"enabled": True, "store": provider}


def log_auth_event(success: bool, details: str = ""):
    """Log authentication-related events."""
    event_type = "dashboard_auth_success" if success else "dashboard_auth_failure"

    logger.log_operation(
        f"dashboard.{event_type}",
        "success" if success else "failure",
        {"details": details}
    )
