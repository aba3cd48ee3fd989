"""Column descriptors: how to label, sort and render one field."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence

from ..exceptions import DuplicateColumnError
from .records import get_field


@dataclass(frozen=True)
class ColumnDescriptor:
    """
    One column of a table.

    ``key`` names a field on the record. When ``render`` is given the key may
    be synthetic; ``render`` then computes the display value from the record.
    """

    key: str
    label: str
    sortable: bool = False
    default_visible: bool = True
    render: Optional[Callable[[Any], Any]] = None

    def raw_value(self, record: Any) -> Any:
        return get_field(record, self.key)

    def display_value(self, record: Any) -> Any:
        if self.render is not None:
            return self.render(record)
        return self.raw_value(record)


def build_column_set(columns: Iterable[ColumnDescriptor | dict]) -> tuple[ColumnDescriptor, ...]:
    """
    Normalize column declarations and enforce key uniqueness.

    Dict declarations accept the same names as ``ColumnDescriptor`` plus the
    camelCase ``defaultVisible`` used by front-end column configs.
    """
    built: list[ColumnDescriptor] = []
    seen: set[str] = set()
    for column in columns:
        if isinstance(column, dict):
            column = _column_from_dict(column)
        if column.key in seen:
            raise DuplicateColumnError(f"Duplicate column key '{column.key}'.")
        seen.add(column.key)
        built.append(column)
    return tuple(built)


def _column_from_dict(data: dict) -> ColumnDescriptor:
    default_visible = data.get("default_visible", data.get("defaultVisible", True))
    return ColumnDescriptor(
        key=str(data["key"]),
        label=str(data.get("label", data["key"])),
        sortable=bool(data.get("sortable", False)),
        # Only an explicit False hides a column by default.
        default_visible=default_visible is not False,
        render=data.get("render"),
    )


def column_keys(columns: Sequence[ColumnDescriptor]) -> list[str]:
    return [column.key for column in columns]


def find_column(columns: Sequence[ColumnDescriptor], key: str) -> Optional[ColumnDescriptor]:
    for column in columns:
        if column.key == key:
            return column
    return None
