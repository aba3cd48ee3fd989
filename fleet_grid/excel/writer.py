"""
XLSX rendering with openpyxl.

The first row of every sheet is the header row. Data cells keep their
native types (numbers, dates, booleans) so spreadsheets can sort and filter
them.
"""

from __future__ import annotations

import io
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

# Excel refuses sheet titles longer than this or containing these characters.
SHEET_TITLE_LIMIT = 31
SHEET_TITLE_FORBIDDEN = re.compile(r"[\\/?*\[\]:]")

DEFAULT_HEADER_STYLE: Dict[str, Any] = {
    "bold": True,
    "fill_color": "4472C4",
    "font_color": "FFFFFF",
    "font_size": 11,
    "alignment": "center",
}


def _cell_value(value: Any) -> Any:
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (str, int, float, bool, date, datetime)):
        return value
    return str(value)


def _column_width(value: Any, min_width: int = 8, max_width: int = 50) -> int:
    if value is None:
        return min_width
    width = max(len(line) for line in str(value).split("\n")) + 2
    return max(min_width, min(width, max_width))


def _style_header(cell: Any, style: Dict[str, Any]) -> None:
    font_kwargs: Dict[str, Any] = {
        "bold": style.get("bold", True),
        "size": style.get("font_size", 11),
    }
    if style.get("font_color"):
        font_kwargs["color"] = style["font_color"]
    cell.font = Font(**font_kwargs)
    if style.get("fill_color"):
        cell.fill = PatternFill(
            start_color=style["fill_color"],
            end_color=style["fill_color"],
            fill_type="solid",
        )
    cell.alignment = Alignment(horizontal=style.get("alignment", "center"), vertical="center")


def render_sheet(
    worksheet: Any,
    rows: Sequence[Sequence[Any]],
    header_style: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Write ``rows`` (header first) into an openpyxl worksheet.

    Column widths follow the longest value, the header row is frozen and an
    auto-filter is set on it.
    """
    if not rows:
        return
    style = header_style or DEFAULT_HEADER_STYLE
    widths: Dict[int, int] = {}

    for row_idx, row in enumerate(rows, start=1):
        for col_idx, value in enumerate(row, start=1):
            cell = worksheet.cell(row=row_idx, column=col_idx, value=_cell_value(value))
            if row_idx == 1:
                _style_header(cell, style)
            elif isinstance(value, datetime):
                cell.number_format = "YYYY-MM-DD HH:MM:SS"
            elif isinstance(value, date):
                cell.number_format = "YYYY-MM-DD"
            widths[col_idx] = max(widths.get(col_idx, 8), _column_width(value))

    for col_idx, width in widths.items():
        worksheet.column_dimensions[get_column_letter(col_idx)].width = width

    worksheet.freeze_panes = "A2"
    header_width = len(rows[0])
    if header_width:
        worksheet.auto_filter.ref = f"A1:{get_column_letter(header_width)}1"


def sheet_title(name: Any) -> str:
    """Make ``name`` acceptable as a worksheet title."""
    title = SHEET_TITLE_FORBIDDEN.sub("-", str(name or "")).strip()[:SHEET_TITLE_LIMIT]
    return title or "Sheet1"


def render_workbook(
    rows: List[Sequence[Any]],
    *,
    sheet_name: str = "Sheet1",
    header_style: Optional[Dict[str, Any]] = None,
) -> bytes:
    """Render a single-sheet workbook and return the XLSX bytes."""
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = sheet_title(sheet_name)
    render_sheet(worksheet, rows, header_style)

    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()
