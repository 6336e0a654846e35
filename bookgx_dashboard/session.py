"""
Login gate and application state.

The gate checks a name/password against the users sheet and keeps a 24-hour
session in a pluggable SessionStore. It is an access convenience for a
trusted team, not a security boundary: credentials and sessions are stored
in plaintext.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

from .config import SESSION_TTL_HOURS
from .exceptions import AuthenticationError
from .loaders.users import User
from .storage import JsonDocument

logger = logging.getLogger(__name__)

SESSION_KEY = "dashboard_auth"


class SessionStore(ABC):
    """Key/value persistence port for session data."""

    @abstractmethod
    def get(self, key: str) -> dict | None:
        ...

    @abstractmethod
    def set(self, key: str, value: dict) -> None:
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        ...


class MemorySessionStore(SessionStore):
    def __init__(self):
        self._data: dict[str, dict] = {}

    def get(self, key: str) -> dict | None:
        return self._data.get(key)

    def set(self, key: str, value: dict) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileSessionStore(SessionStore):
    """Session entries in one JSON file (plaintext)."""

    def __init__(self, path: str | Path):
        self.document = JsonDocument(path)

    @property
    def path(self) -> Path:
        return self.document.path

    def get(self, key: str) -> dict | None:
        return self.document.read().get(key)

    def set(self, key: str, value: dict) -> None:
        data = self.document.read()
        data[key] = value
        self.document.write(data)

    def delete(self, key: str) -> None:
        data = self.document.read()
        if data.pop(key, None) is not None:
            self.document.write(data)


class AccessGate:
    """Name/password login with a time-limited session."""

    def __init__(
        self,
        users: list[User],
        store: SessionStore,
        users_passcode: str = "",
        ttl: timedelta = timedelta(hours=SESSION_TTL_HOURS),
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.users = users
        self.store = store
        self.users_passcode = users_passcode
        self.ttl = ttl
        self.clock = clock

    def _find(self, name: str, role: str | None = None) -> User | None:
        for user in self.users:
            if user.name.lower() != name.lower():
                continue
            if role is None or user.role == role:
                return user
        return None

    def login(self, name: str, password: str) -> User:
        """Match name (case-insensitive) and password; start a session.

        Raises AuthenticationError on a mismatch.
        """
        user = self._find(name.strip())
        if user is None or user.password != password:
            logger.info("Failed login for %r", name)
            raise AuthenticationError("Invalid name or password. Please try again.")

        expires = self.clock() + self.ttl
        self.store.set(SESSION_KEY, {
            "Name": user.name,
            "Role": user.role,
            "expires": expires.isoformat(),
        })
        logger.info("User %s (%s) logged in until %s", user.name, user.role, expires)
        return user

    def restore(self) -> User | None:
        """User of the stored session, or None when absent, expired or stale."""
        entry = self.store.get(SESSION_KEY)
        if not entry:
            return None

        try:
            expires = datetime.fromisoformat(entry["expires"])
        except (KeyError, TypeError, ValueError):
            logger.warning("Discarding malformed session entry")
            self.store.delete(SESSION_KEY)
            return None

        if self.clock() >= expires:
            self.store.delete(SESSION_KEY)
            return None

        user = self._find(entry.get("Name", ""), entry.get("Role"))
        if user is None:
            self.store.delete(SESSION_KEY)
        return user

    def logout(self) -> None:
        self.store.delete(SESSION_KEY)

    def unlock_users_page(self, passcode: str) -> bool:
        """Check the users-page passcode. An unset passcode never unlocks."""
        if not self.users_passcode or passcode != self.users_passcode:
            raise AuthenticationError("Invalid passcode. Please try again.")
        return True


@dataclass
class AppState:
    """Everything the view needs between reruns."""

    user: User | None = None
    start_date: str = ""
    end_date: str = ""
    period: str = "all"
    dashboard: dict | None = None
    last_updated: datetime | None = None
    users_unlocked: bool = False
    error: str = ""
    loaded_range: tuple[str, str] | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def allowed_cards(self) -> list[str]:
        return list(self.user.cards) if self.user else []

    def set_range(self, start_date: str, end_date: str, period: str = "all") -> None:
        self.start_date, self.end_date, self.period = start_date, end_date, period

    def needs_reload(self) -> bool:
        """True before the first load and whenever the date range changed."""
        return self.dashboard is None or self.loaded_range != (self.start_date, self.end_date)

    def record_load(self, dashboard: dict, when: datetime | None = None) -> None:
        self.dashboard = dashboard
        self.last_updated = when or datetime.now()
        self.loaded_range = (self.start_date, self.end_date)
