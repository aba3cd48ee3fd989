"""Duck-typed access to records: mappings or plain objects with an ``id``."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable

from ..exceptions import InvalidRecordError

_MISSING = object()


def get_field(record: Any, key: str) -> Any:
    """Return ``record[key]`` / ``record.key``, or ``None`` when absent."""
    if isinstance(record, Mapping):
        return record.get(key)
    return getattr(record, key, None)


def record_id(record: Any) -> str:
    """Return the record id as a string, raising if the record has none."""
    if isinstance(record, Mapping):
        value = record.get("id", _MISSING)
    else:
        value = getattr(record, "id", _MISSING)
    if value is _MISSING or value is None or value == "":
        raise InvalidRecordError(f"Record {record!r} has no 'id'.")
    return str(value)


def record_values(record: Any) -> Iterable[Any]:
    """Iterate over every field value of a record."""
    if isinstance(record, Mapping):
        return record.values()
    if hasattr(record, "__dict__"):
        return [
            value
            for name, value in vars(record).items()
            if not name.startswith("_")
        ]
    slots = getattr(type(record), "__slots__", ())
    return [getattr(record, name, None) for name in slots]


def ensure_records(records: Iterable[Any]) -> list[Any]:
    """Materialize records, checking each one carries an id."""
    materialized = list(records)
    for record in materialized:
        record_id(record)
    return materialized
