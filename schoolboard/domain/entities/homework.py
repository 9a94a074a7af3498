"""Domain entities for homework assignments and student submissions."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .record import PublicationStatus, Record


class SubmissionStatus(str, Enum):
    """Grading lifecycle of a submission."""

    PENDING = "pending"
    SUBMITTED = "submitted"
    GRADED = "graded"
    LATE = "late"


@dataclass(kw_only=True)
class Homework(Record):
    collection = "homework"
    search_fields = ("title", "description")
    filter_fields = ("subject", "class_id", "status")
    status_type = PublicationStatus

    title: str
    description: str = ""
    subject: str = ""
    class_id: str | None = None
    teacher_id: str | None = None
    due_date: datetime | None = None
    total_marks: int = 0
    status: PublicationStatus = PublicationStatus.DRAFT


@dataclass(kw_only=True)
class Submission(Record):
    """A student's answer to a homework. References are loose ids."""

    collection = "submissions"
    search_fields = ("student_name",)
    filter_fields = ("homework_id", "student_id", "status")
    status_type = SubmissionStatus

    homework_id: str
    student_id: str
    student_name: str = ""
    status: SubmissionStatus = SubmissionStatus.PENDING
    score: float | None = None
    feedback: str = ""
    submitted_at: datetime | None = None
