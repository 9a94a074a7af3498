"""Unit tests for the logging setup."""

import logging

import pytest

from schoolboard.config import Settings
from schoolboard.infrastructure.logging.log_config import LOGGER_CATEGORIES, setup_logging


@pytest.fixture
def restore_levels():
    names = [""] + [name for names in LOGGER_CATEGORIES.values() for name in names]
    saved = {name: logging.getLogger(name or None).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name or None).setLevel(level)


def test_category_levels_follow_settings(restore_levels):
    settings = Settings(
        log_level="warning",
        log_level_http="ERROR",
        log_level_uvicorn="INFO",
        log_level_client="DEBUG",
    )
    setup_logging(settings)

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.ERROR
    assert logging.getLogger("uvicorn.access").level == logging.INFO
    assert logging.getLogger("schoolboard.infrastructure.http").level == logging.DEBUG


def test_unknown_level_name_means_info(restore_levels):
    setup_logging(Settings(log_level_http="LOUD"))
    assert logging.getLogger("httpcore").level == logging.INFO
