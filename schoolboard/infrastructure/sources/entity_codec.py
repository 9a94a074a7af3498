"""Entity codec — maps backend JSON documents to domain records and back.

Wire documents use camelCase keys and ``_id``; domain records use
snake_case attributes. Per-kind overrides come from ``wire_aliases``.
Validation and coercion (ISO dates, enum values, numbers) go through a
pydantic ``TypeAdapter`` of the record dataclass.
"""

from functools import cache
from typing import Any

from pydantic import TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel, to_snake
from pydantic_core import to_jsonable_python

from schoolboard.domain.entities import Record, RecordT
from schoolboard.domain.exceptions import ParseError


@cache
def _adapter(entity_type: type[Record]) -> TypeAdapter:
    return TypeAdapter(entity_type)


def wire_name(entity_type: type[Record], attribute: str) -> str:
    """Wire key of an attribute (``test_category`` → ``testCategory``)."""
    if attribute == "id":
        return "_id"
    return entity_type.wire_aliases.get(attribute) or to_camel(attribute)


def attribute_name(entity_type: type[Record], key: str) -> str:
    """Attribute of a wire key (``testCategory`` → ``test_category``)."""
    if key in ("_id", "id"):
        return "id"
    for attribute, alias in entity_type.wire_aliases.items():
        if alias == key:
            return attribute
    return to_snake(key)


def build(entity_type: type[RecordT], attributes: dict[str, Any]) -> RecordT:
    """Validate attribute-named values into a record, coercing raw values."""
    known = set(entity_type.field_names())
    data = {k: v for k, v in attributes.items() if k in known}
    if data.get("id") is not None:
        data["id"] = str(data["id"])
    try:
        return _adapter(entity_type).validate_python(data)
    except ValidationError as exc:
        raise ParseError(
            f"Malformed {entity_type.kind()} record: {exc.error_count()} invalid field(s)"
        ) from exc


def decode(entity_type: type[RecordT], document: Any) -> RecordT:
    """Backend document → domain record. Raises ParseError on a bad shape."""
    if not isinstance(document, dict):
        raise ParseError(f"Expected a {entity_type.kind()} object, got {type(document).__name__}")
    attributes = {attribute_name(entity_type, key): value for key, value in document.items()}
    if attributes.get("id") in (None, ""):
        raise ParseError(f"{entity_type.kind()} record without an id")
    return build(entity_type, attributes)


def to_attributes(record: Record) -> dict[str, Any]:
    """Record → attribute dict with Python values (enums, datetimes kept)."""
    return _adapter(type(record)).dump_python(record)


def encode_fields(entity_type: type[Record], fields: dict[str, Any]) -> dict[str, Any]:
    """Attribute values → JSON-ready wire body (camelCase keys)."""
    return {
        wire_name(entity_type, name): to_jsonable_python(value)
        for name, value in fields.items()
    }


def encode(record: Record) -> dict[str, Any]:
    """Full record → wire document."""
    return encode_fields(type(record), to_attributes(record))
