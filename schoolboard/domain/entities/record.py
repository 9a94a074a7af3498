"""Generic record base shared by every entity kind shown in a list view."""

import dataclasses
import typing
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import cache
from typing import Any, ClassVar, TypeVar


class PublicationStatus(str, Enum):
    """Lifecycle of authored content. Every transition is legal except to itself."""

    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class ActivityStatus(str, Enum):
    """Whether an organisational record is in use."""

    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(kw_only=True)
class Record:
    """Base domain entity: an id assigned by the backing store plus timestamps.

    Subclasses describe how a list view treats them through class-level
    metadata rather than per-page code:

    - ``collection``: backend path segment (``/tests``, ``/users``, ...)
    - ``search_fields``: text fields matched by the free-text search
    - ``filter_fields``: fields selectable in the filter bar
    - ``status_type``: closed enum of the ``status`` field, if any
    - ``wire_aliases``: attribute name → wire key overrides
    """

    collection: ClassVar[str] = ""
    search_fields: ClassVar[tuple[str, ...]] = ()
    filter_fields: ClassVar[tuple[str, ...]] = ()
    status_type: ClassVar[type[Enum] | None] = None
    wire_aliases: ClassVar[dict[str, str]] = {}

    id: str
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def kind(cls) -> str:
        return cls.__name__

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in dataclasses.fields(cls))

    @classmethod
    def filter_domain(cls, key: str) -> tuple[str, ...] | None:
        """Allowed values for a filter key, or None when the domain is open.

        Raises KeyError if the key is not one of ``filter_fields``.
        """
        if key not in cls.filter_fields:
            raise KeyError(key)
        return _enum_domains(cls).get(key)

    @classmethod
    def parse_status(cls, value: str | Enum) -> Enum:
        """Coerce a raw status value into this kind's status enum.

        Raises ValueError for kinds without a status or unknown values.
        """
        if cls.status_type is None:
            raise ValueError(f"{cls.kind()} has no status field")
        if isinstance(value, cls.status_type):
            return value
        raw = value.value if isinstance(value, Enum) else value
        return cls.status_type(raw)

    def field_value(self, name: str) -> Any:
        """Attribute value normalised for comparison (enums → their value)."""
        value = getattr(self, name, None)
        if isinstance(value, Enum):
            return value.value
        return value


RecordT = TypeVar("RecordT", bound=Record)


@cache
def _enum_domains(cls: type[Record]) -> dict[str, tuple[str, ...]]:
    """Map each enum-typed dataclass field to the values of its enum."""
    hints = typing.get_type_hints(cls)
    domains: dict[str, tuple[str, ...]] = {}
    for name, hint in hints.items():
        enum_type = _enum_in(hint)
        if enum_type is not None:
            domains[name] = tuple(str(member.value) for member in enum_type)
    return domains


def _enum_in(hint: Any) -> type[Enum] | None:
    if isinstance(hint, type) and issubclass(hint, Enum):
        return hint
    for arg in typing.get_args(hint):
        if isinstance(arg, type) and issubclass(arg, Enum):
            return arg
    return None
