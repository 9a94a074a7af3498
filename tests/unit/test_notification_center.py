"""Unit tests for the NotificationCenter."""

import logging

from schoolboard.application.schemas import NotificationLevel
from schoolboard.infrastructure.notifications.notification_center import NotificationCenter


def test_notifications_keep_arrival_order_and_are_logged(caplog):
    center = NotificationCenter()
    with caplog.at_level(logging.INFO):
        center.success("Status updated to published")
        center.error("locked")

    assert [n.level for n in center.items] == [NotificationLevel.SUCCESS, NotificationLevel.ERROR]
    assert center.latest.message == "locked"
    assert "locked" in caplog.text


def test_queue_is_bounded():
    center = NotificationCenter(max_items=2)
    for i in range(5):
        center.success(f"saved {i}")
    assert [n.message for n in center.items] == ["saved 3", "saved 4"]


def test_dismiss_and_clear():
    center = NotificationCenter()
    center.success("one")
    center.success("two")
    center.dismiss(0)
    center.dismiss(7)
    assert [n.message for n in center.items] == ["two"]
    center.clear()
    assert center.latest is None
