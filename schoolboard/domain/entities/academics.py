"""Domain entities for the academic structure: classes and subjects."""

from dataclasses import dataclass

from .record import ActivityStatus, Record


@dataclass(kw_only=True)
class ClassGroup(Record):
    """A class section (e.g. grade 8, section B) with its class teacher."""

    collection = "classes"
    search_fields = ("name", "section")
    filter_fields = ("grade", "status")
    status_type = ActivityStatus

    name: str
    grade: str = ""
    section: str = ""
    teacher_id: str | None = None
    school_id: str | None = None
    student_count: int = 0
    status: ActivityStatus = ActivityStatus.ACTIVE


@dataclass(kw_only=True)
class Subject(Record):
    collection = "subjects"
    search_fields = ("name", "code")
    filter_fields = ("status",)
    status_type = ActivityStatus

    name: str
    code: str = ""
    description: str = ""
    status: ActivityStatus = ActivityStatus.ACTIVE
