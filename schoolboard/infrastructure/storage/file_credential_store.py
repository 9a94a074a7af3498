"""JSON file storage for the persisted session credentials."""

import json
import logging
from pathlib import Path
from typing import Any

from schoolboard.application.interfaces import CredentialStore

logger = logging.getLogger(__name__)


class FileCredentialStore(CredentialStore):
    """Infrastructure adapter keeping credentials in a single JSON file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)

    def read(self) -> dict[str, Any] | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read credentials from %s: %s", self._path, exc)
            return None
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed credentials file %s", self._path)
            return None
        return data

    def write(self, credentials: dict[str, Any]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(credentials, indent=2), "utf-8")

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
