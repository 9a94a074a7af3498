"""Domain entity for tests (exam papers) managed by admins and teachers."""

from dataclasses import dataclass
from enum import Enum

from .record import PublicationStatus, Record


class TestCategory(str, Enum):
    """Where a test comes from."""

    __test__ = False

    PYQ = "PYQ"
    PLATFORM = "Platform"
    USER_CUSTOM = "UserCustom"


@dataclass(kw_only=True)
class Test(Record):
    """A test paper: questions, marks and a publication status."""

    __test__ = False

    collection = "tests"
    search_fields = ("title",)
    filter_fields = ("test_category", "status", "subject", "exam_type")
    status_type = PublicationStatus
    wire_aliases = {"class_level": "class"}

    title: str
    test_category: TestCategory = TestCategory.PLATFORM
    platform_test_type: str | None = None
    subject: str = ""
    exam_type: str = ""
    class_level: str = ""
    status: PublicationStatus = PublicationStatus.DRAFT
    question_count: int = 0
    total_marks: int = 0
    year: int | None = None
