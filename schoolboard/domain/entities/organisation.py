"""Domain entities for the organisation hierarchy managed by super-admins."""

from dataclasses import dataclass

from .record import ActivityStatus, Record


@dataclass(kw_only=True)
class Region(Record):
    collection = "regions"
    search_fields = ("name", "code")
    filter_fields = ("status",)
    status_type = ActivityStatus

    name: str
    code: str = ""
    school_count: int = 0
    status: ActivityStatus = ActivityStatus.ACTIVE


@dataclass(kw_only=True)
class School(Record):
    """A school, optionally attached to a region by id."""

    collection = "schools"
    search_fields = ("name", "code", "principal_name")
    filter_fields = ("region_id", "status")
    status_type = ActivityStatus

    name: str
    code: str = ""
    region_id: str | None = None
    principal_name: str = ""
    address: str = ""
    student_count: int = 0
    teacher_count: int = 0
    status: ActivityStatus = ActivityStatus.ACTIVE
