"""Domain entity for school announcements."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .record import PublicationStatus, Record


class Audience(str, Enum):
    ALL = "all"
    STUDENTS = "students"
    TEACHERS = "teachers"
    PARENTS = "parents"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(kw_only=True)
class Announcement(Record):
    """A notice published to part of the school community."""

    collection = "announcements"
    search_fields = ("title", "content")
    filter_fields = ("audience", "priority", "status")
    status_type = PublicationStatus

    title: str
    content: str = ""
    audience: Audience = Audience.ALL
    priority: Priority = Priority.MEDIUM
    status: PublicationStatus = PublicationStatus.DRAFT
    author_id: str | None = None
    publish_date: datetime | None = None
