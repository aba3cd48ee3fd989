"""
Spreadsheet writing for table exports and import templates.

Public API:
    render_workbook(rows, sheet_name=...) -> bytes
"""

from .writer import DEFAULT_HEADER_STYLE, render_sheet, render_workbook, sheet_title  # noqa: F401

__all__ = ["DEFAULT_HEADER_STYLE", "render_sheet", "render_workbook", "sheet_title"]
