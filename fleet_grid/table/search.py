"""Free-text search over records."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Sequence

from .columns import ColumnDescriptor
from .records import record_values

SEARCH_SCOPE_RECORD = "record"
SEARCH_SCOPE_VISIBLE_COLUMNS = "visible_columns"


def searchable_text(value: Any) -> Optional[str]:
    """
    Text used to match ``value`` against a search term.

    Only strings, numbers and booleans are searchable; everything else
    (``None``, dates, nested objects) returns ``None``. Booleans and integral
    floats use the spelling a browser shows: ``true``, ``3`` rather than ``3.0``.
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        return repr(value)
    if isinstance(value, (int, Decimal)):
        return str(value)
    return None


def value_matches(value: Any, needle: str) -> bool:
    text = searchable_text(value)
    return text is not None and needle in text.lower()


def matches_search(
    record: Any,
    term: str,
    columns: Optional[Sequence[ColumnDescriptor]] = None,
) -> bool:
    """
    True when any searchable field of ``record`` contains ``term``.

    With ``columns`` only those columns' raw values are searched.
    """
    needle = (term or "").lower()
    if not needle:
        return True
    if columns is None:
        values: Iterable[Any] = record_values(record)
    else:
        values = [column.raw_value(record) for column in columns]
    return any(value_matches(value, needle) for value in values)


def filter_records(
    records: Iterable[Any],
    term: str,
    custom_filter: Optional[Callable[[Any], bool]] = None,
    columns: Optional[Sequence[ColumnDescriptor]] = None,
) -> list[Any]:
    """Apply the search term ANDed with the optional custom predicate."""
    return [
        record
        for record in records
        if matches_search(record, term, columns)
        and (custom_filter is None or custom_filter(record))
    ]
