"""Abstract notifier (port) for transient success/error feedback."""

from abc import ABC, abstractmethod


class Notifier(ABC):
    """Port for toast-style notifications — implemented in the infrastructure layer."""

    @abstractmethod
    def success(self, message: str) -> None:
        ...

    @abstractmethod
    def error(self, message: str) -> None:
        ...
