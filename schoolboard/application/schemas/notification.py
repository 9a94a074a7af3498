"""Notification DTO shown to the user as a transient toast."""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class NotificationLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notification(BaseModel):
    level: NotificationLevel
    message: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
