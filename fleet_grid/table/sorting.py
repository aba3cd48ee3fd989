"""
Sort comparison for table columns.

``compare_values`` defines the ascending order of two raw field values:

* ``None`` sorts before every other value;
* two strings compare with a locale-style collation (accents and case only
  break ties);
* two numbers compare numerically (booleans are not numbers);
* two booleans compare ``False < True``;
* any other pairing compares equal, so ``sorted`` keeps the input order.

Descending order is the exact negation, which puts ``None`` last.
"""

from __future__ import annotations

import functools
import unicodedata
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional

from .records import get_field

SORT_ASC = "asc"
SORT_DESC = "desc"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


@functools.lru_cache(maxsize=4096)
def collation_key(text: str) -> tuple[str, str, str]:
    """
    Collation key approximating a root-locale comparison.

    Base letters decide first, then accents, then case (lowercase first).
    """
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch)).casefold()
    return base, decomposed.casefold(), text.swapcase()


def compare_strings(left: str, right: str) -> int:
    left_key = collation_key(left)
    right_key = collation_key(right)
    if left_key < right_key:
        return -1
    if left_key > right_key:
        return 1
    return 0


def compare_values(left: Any, right: Any) -> int:
    """Ascending comparison of two raw values; see the module docstring."""
    if left is None and right is None:
        return 0
    if left is None:
        return -1
    if right is None:
        return 1

    if isinstance(left, str) and isinstance(right, str):
        return compare_strings(left, right)
    if _is_number(left) and _is_number(right):
        if left < right:
            return -1
        if left > right:
            return 1
        return 0
    if isinstance(left, bool) and isinstance(right, bool):
        return int(left) - int(right)
    return 0


def sort_records(
    records: Iterable[Any],
    key: Optional[str],
    direction: str = SORT_ASC,
    value_getter: Callable[[Any, str], Any] = get_field,
) -> list[Any]:
    """Return ``records`` stably sorted by field ``key``; no key keeps the order."""
    items = list(records)
    if not key:
        return items
    sign = -1 if direction == SORT_DESC else 1

    def _compare(a: Any, b: Any) -> int:
        return sign * compare_values(value_getter(a, key), value_getter(b, key))

    return sorted(items, key=functools.cmp_to_key(_compare))


def toggle_direction(direction: str) -> str:
    return SORT_DESC if direction == SORT_ASC else SORT_ASC
