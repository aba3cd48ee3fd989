"""Blank import templates: a workbook holding only the header row."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Iterable, Optional, Union

from ...config_proxy import get_setting
from ...excel import render_workbook


def template_headers(columns: Union[Iterable[str], Mapping[str, str]]) -> list[str]:
    """Headers in order; a column mapping contributes its external headers."""
    if isinstance(columns, Mapping):
        return [str(header) for header in columns.keys()]
    return [str(header) for header in columns]


def export_import_template(
    headers: Union[Iterable[str], Mapping[str, str]],
    sheet_name: Optional[str] = None,
) -> bytes:
    names = template_headers(headers)
    if not names:
        raise ValueError("An import template needs at least one header.")
    return render_workbook(
        [names],
        sheet_name=sheet_name or get_setting("import.template_sheet_name", "Sheet1"),
    )


def template_filename(base_name: str = "template") -> str:
    return f"{base_name}.xlsx"
