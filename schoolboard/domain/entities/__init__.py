from .record import ActivityStatus, PublicationStatus, Record, RecordT
from .test import Test, TestCategory
from .announcement import Announcement, Audience, Priority
from .academics import ClassGroup, Subject
from .organisation import Region, School
from .user import AccountStatus, User, UserRole
from .homework import Homework, Submission, SubmissionStatus
from .content import ContentItem, ContentType

ENTITY_TYPES: dict[str, type[Record]] = {
    kind.collection: kind
    for kind in (
        Test,
        Announcement,
        ClassGroup,
        Subject,
        User,
        School,
        Region,
        Homework,
        Submission,
        ContentItem,
    )
}

__all__ = [
    "ActivityStatus",
    "PublicationStatus",
    "Record",
    "RecordT",
    "Test",
    "TestCategory",
    "Announcement",
    "Audience",
    "Priority",
    "ClassGroup",
    "Subject",
    "Region",
    "School",
    "AccountStatus",
    "User",
    "UserRole",
    "Homework",
    "Submission",
    "SubmissionStatus",
    "ContentItem",
    "ContentType",
    "ENTITY_TYPES",
]
