"""Abstract credential store (port) used to hydrate and persist the session."""

from abc import ABC, abstractmethod
from typing import Any


class CredentialStore(ABC):
    """Port for persisted session credentials."""

    @abstractmethod
    def read(self) -> dict[str, Any] | None:
        """Return the persisted credentials, or None when nothing is stored."""
        ...

    @abstractmethod
    def write(self, credentials: dict[str, Any]) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...
