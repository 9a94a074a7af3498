"""Domain entity for learning content (videos, documents, quizzes, links)."""

from dataclasses import dataclass
from enum import Enum

from .record import PublicationStatus, Record


class ContentType(str, Enum):
    VIDEO = "video"
    DOCUMENT = "document"
    QUIZ = "quiz"
    LINK = "link"


@dataclass(kw_only=True)
class ContentItem(Record):
    collection = "content"
    search_fields = ("title",)
    filter_fields = ("content_type", "subject", "status")
    status_type = PublicationStatus

    title: str
    content_type: ContentType = ContentType.DOCUMENT
    subject: str = ""
    url: str = ""
    views: int = 0
    status: PublicationStatus = PublicationStatus.DRAFT
