"""Explicit session context: the signed-in user's tokens, passed to whoever needs them."""

import logging
from collections.abc import Callable
from typing import Any

from schoolboard.application.interfaces import CredentialStore

logger = logging.getLogger(__name__)


class SessionContext:
    """Auth state with an explicit lifecycle.

    ``hydrate`` restores persisted credentials at start-up, ``login`` and
    ``update_access_token`` persist new ones, ``logout`` wipes them and runs
    the registered logout listeners (e.g. clearing cached responses).
    """

    def __init__(self, store: CredentialStore | None = None):
        self._store = store
        self._logout_listeners: list[Callable[[], None]] = []
        self.access_token: str | None = None
        self.refresh_token: str | None = None
        self.user: dict[str, Any] | None = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.access_token)

    @property
    def role(self) -> str | None:
        if self.user is None:
            return None
        return self.user.get("role")

    def on_logout(self, listener: Callable[[], None]) -> None:
        self._logout_listeners.append(listener)

    def hydrate(self) -> bool:
        """Load persisted credentials. Returns True when a token was restored."""
        if self._store is None:
            return False
        credentials = self._store.read()
        if not credentials:
            return False
        self.access_token = credentials.get("accessToken") or None
        self.refresh_token = credentials.get("refreshToken") or None
        self.user = credentials.get("user")
        if self.access_token:
            logger.info("Session restored for %s", self._user_label())
        return self.is_authenticated

    def login(
        self,
        access_token: str,
        refresh_token: str | None = None,
        user: dict[str, Any] | None = None,
    ) -> None:
        self.access_token = access_token
        self.refresh_token = refresh_token
        self.user = user
        self._persist()
        logger.info("Signed in as %s", self._user_label())

    def update_access_token(self, access_token: str) -> None:
        self.access_token = access_token
        self._persist()

    def logout(self) -> None:
        label = self._user_label()
        self.access_token = None
        self.refresh_token = None
        self.user = None
        if self._store is not None:
            self._store.clear()
        for listener in self._logout_listeners:
            listener()
        logger.info("Signed out %s", label)

    def _persist(self) -> None:
        if self._store is None:
            return
        self._store.write(
            {
                "accessToken": self.access_token,
                "refreshToken": self.refresh_token,
                "user": self.user,
            }
        )

    def _user_label(self) -> str:
        if not self.user:
            return "anonymous user"
        return str(self.user.get("username") or self.user.get("email") or self.user.get("id"))
