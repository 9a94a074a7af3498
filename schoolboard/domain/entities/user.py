"""Domain entity for platform users of every role."""

from dataclasses import dataclass
from enum import Enum

from .record import Record


class UserRole(str, Enum):
    STUDENT = "student"
    TEACHER = "teacher"
    PRINCIPAL = "principal"
    ADMIN = "admin"
    SUPERADMIN = "superadmin"


class AccountStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


@dataclass(kw_only=True)
class User(Record):
    collection = "users"
    search_fields = ("full_name", "username", "email")
    filter_fields = ("role", "status")
    status_type = AccountStatus

    full_name: str
    username: str = ""
    email: str = ""
    role: UserRole = UserRole.STUDENT
    status: AccountStatus = AccountStatus.ACTIVE
    school_id: str | None = None
    avatar: str | None = None
