"""Logging setup for the fixture API and scripts using the schoolboard core.

Each category in ``LOGGER_CATEGORIES`` names the Settings field that holds
its level, so the chatty HTTP transport loggers can stay at WARNING while
list loads and mutations are traced at DEBUG.
"""

import logging
import sys

from schoolboard.config import Settings, get_settings

LOGGER_CATEGORIES: dict[str, tuple[str, ...]] = {
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_client": (
        "schoolboard.infrastructure.http",
        "schoolboard.infrastructure.sources",
        "schoolboard.application.services",
    ),
}

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(settings: Settings | None = None) -> None:
    """Apply root and per-category levels. Safe to call more than once."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT, datefmt="%H:%M:%S"))
        root.addHandler(handler)

    levels = {field: getattr(settings, field, "INFO") for field in LOGGER_CATEGORIES}
    for field, logger_names in LOGGER_CATEGORIES.items():
        level = _parse_level(levels[field])
        for name in logger_names:
            logging.getLogger(name).setLevel(level)

    logging.getLogger(__name__).debug(
        "Logging configured: root=%s %s",
        settings.log_level,
        " ".join(f"{field.removeprefix('log_level_')}={value}" for field, value in levels.items()),
    )


def _parse_level(raw: str) -> int:
    """Level name → logging constant; unknown names mean INFO."""
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO
