"""Projection of a table's visible rows and columns for spreadsheet export."""

from __future__ import annotations

import html
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, List, Sequence

from django.utils.html import strip_tags
from django.utils.safestring import SafeData

from ..excel import render_workbook
from .columns import ColumnDescriptor


def to_export_text(value: Any) -> Any:
    """
    Reduce a rendered cell to something a spreadsheet cell can hold.

    Primitives and dates pass through. Rendered markup (``format_html``
    output) keeps only its text. Objects exposing ``text_content()`` or
    ``children`` are reduced to that text, sequences are joined, and anything
    else becomes an empty string.
    """
    if value is None or isinstance(value, (bool, int, float, date, datetime)):
        return value
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, SafeData):
        return html.unescape(strip_tags(str(value))).strip()
    if isinstance(value, str):
        return value
    text_content = getattr(value, "text_content", None)
    if callable(text_content):
        return to_export_text(text_content())
    children = getattr(value, "children", None)
    if children is not None:
        return to_export_text(children)
    if isinstance(value, (list, tuple)):
        parts = [to_export_text(item) for item in value]
        return "".join("" if part is None else str(part) for part in parts)
    return ""


@dataclass
class ExportProjection:
    headers: List[str] = field(default_factory=list)
    rows: List[List[Any]] = field(default_factory=list)

    def as_rows(self) -> List[List[Any]]:
        """Header row followed by the data rows."""
        return [list(self.headers)] + [list(row) for row in self.rows]

    def as_dicts(self) -> List[dict]:
        return [dict(zip(self.headers, row)) for row in self.rows]

    def to_xlsx(self, sheet_name: str = "Sheet1") -> bytes:
        return render_workbook(self.as_rows(), sheet_name=sheet_name)


def project_records(
    records: Sequence[Any],
    columns: Sequence[ColumnDescriptor],
) -> ExportProjection:
    """Project ``records`` onto ``columns`` (already in visible order)."""
    return ExportProjection(
        headers=[column.label for column in columns],
        rows=[
            [to_export_text(column.display_value(record)) for column in columns]
            for record in records
        ],
    )
