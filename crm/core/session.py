"""
Session and identity provider.

Users live in the ``users`` collection of the record store and log in with
their username or email. Passwords are compared in plain text: this is a
convenience login for a local tool, not a security boundary.
"""

import secrets
from typing import Any, Dict, List, Optional

from util.logging import logger

from .config import ADMIN_ROLE, EMPLOYEE_ROLE, SESSIONS_COLLECTION, USERS_COLLECTION
from .schema import Actor, utc_now

DEMO_USERS = [
    {
        "id": "1",
        "name": "Clayton Reynolds",
        "email": "clayton.reynolds@example.com",
        "username": "clayton.reynolds",
        "password": "Green@7581",
        "mobileNo": "9820000001",
        "role": ADMIN_ROLE,
        "status": "active",
    },
    {
        "id": "2",
        "name": "Prathmesh Tare",
        "email": "prathamesh.tase@example.com",
        "username": "prathamesh.tase",
        "password": "Green@7581",
        "mobileNo": "9820000002",
        "role": EMPLOYEE_ROLE,
        "status": "active",
    },
    {
        "id": "3",
        "name": "Lavinia Reynolds",
        "email": "lavinia.reynolds@example.com",
        "username": "lavinia.reynolds",
        "password": "Green@7581",
        "mobileNo": "9820000003",
        "role": EMPLOYEE_ROLE,
        "status": "active",
    },
    {
        "id": "4",
        "name": "Administrator",
        "email": "admin@example.com",
        "username": "admin",
        "password": "admin123",
        "mobileNo": "9820000004",
        "role": ADMIN_ROLE,
        "status": "active",
    },
]


def _to_actor(user: Dict[str, Any]) -> Actor:
    return Actor(id=str(user["id"]), name=user.get("name", ""), role=user.get("role", EMPLOYEE_ROLE))


class UserDirectory:
    """Read access to the locally stored user list."""

    def __init__(self, store):
        self.store = store

    def seed_demo_users(self) -> int:
        """Store the demo users when the directory is empty; returns how many were added."""
        if self.store.get(USERS_COLLECTION):
            return 0
        created_at = utc_now()
        self.store.put(USERS_COLLECTION, [{**u, "createdAt": created_at} for u in DEMO_USERS])
        logger.info(f"Seeded {len(DEMO_USERS)} demo users")
        return len(DEMO_USERS)

    def list_users(self) -> List[Dict[str, Any]]:
        return self.store.get(USERS_COLLECTION)

    def get_user(self, user_id: str) -> Optional[Dict[str, Any]]:
        for user in self.list_users():
            if str(user.get("id")) == str(user_id):
                return user
        return None

    def find_by_login(self, username_or_email: str) -> Optional[Dict[str, Any]]:
        login = (username_or_email or "").strip()
        if not login:
            return None
        for user in self.list_users():
            if user.get("username") == login or user.get("email") == login:
                return user
        return None


def authenticate(directory: UserDirectory, username_or_email: str, password: str) -> Optional[Actor]:
    """
    Check credentials against the user directory.

    Returns the Actor on success, None otherwise. Every attempt is logged
    without the password.
    """
    user = directory.find_by_login(username_or_email)

    if user is None:
        logger.log_auth_event(username_or_email or "", False, "unknown user")
        return None

    if user.get("status", "active") != "active":
        logger.log_auth_event(username_or_email, False, "inactive user")
        return None

    if user.get("password") != password:
        logger.log_auth_event(username_or_email, False, "invalid password")
        return None

    logger.log_auth_event(username_or_email, True)
    return _to_actor(user)


class SessionProvider:
    """Token-keyed login sessions persisted in the ``sessions`` collection.

    The most recent successful login is remembered as the active session so
    single-user front-ends can call ``current_actor()`` without a token.
    """

    def __init__(self, store, directory: UserDirectory = None):
        self.store = store
        self.directory = directory or UserDirectory(store)
        self._active_token: Optional[str] = None

    def login(self, username_or_email: str, password: str) -> Optional[str]:
        """Start a session and return its token, or None on bad credentials.

        Earlier sessions of the same user are ended.
        """
        actor = authenticate(self.directory, username_or_email, password)
        if actor is None:
            return None

        token = secrets.token_urlsafe(24)
        sessions = [s for s in self.store.get(SESSIONS_COLLECTION) if s.get("userId") != actor.id]
        sessions.append({"id": token, "userId": actor.id, "createdAt": utc_now()})
        self.store.put(SESSIONS_COLLECTION, sessions)

        self._active_token = token
        return token

    def logout(self, token: str = None) -> bool:
        """End a session; returns False when the token was not active."""
        token = token or self._active_token
        if not token:
            return False

        sessions = self.store.get(SESSIONS_COLLECTION)
        remaining = [s for s in sessions if s.get("id") != token]
        if len(remaining) == len(sessions):
            return False
        self.store.put(SESSIONS_COLLECTION, remaining)

        if token == self._active_token:
            self._active_token = None
        return True

    def current_actor(self, token: str = None) -> Optional[Actor]:
        """Resolve the acting user for a token (or the active session)."""
        token = token or self._active_token
        if not token:
            return None

        session = next((s for s in self.store.get(SESSIONS_COLLECTION) if s.get("id") == token), None)
        if session is None:
            return None

        user = self.directory.get_user(session["userId"])
        if user is None or user.get("status", "active") != "active":
            return None
        return _to_actor(user)
