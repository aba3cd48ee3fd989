"""CSV/XLSX parser with import limits and header handling."""

from __future__ import annotations

import csv
import io
import logging
from collections.abc import Mapping
from pathlib import PurePath
from typing import Any, Iterable, Optional

from openpyxl import load_workbook

from ...config_proxy import get_setting
from ...exceptions import FatalParseError
from ...utils import coerce_positive_int
from ..constants import FILE_EXTENSIONS, ImportFileFormat, ImportIssueCode
from ..types import ImportLimits, ParsedImportFile

logger = logging.getLogger(__name__)


def _read_uploaded_file(uploaded_file: Any) -> bytes:
    if uploaded_file is None:
        raise FatalParseError(ImportIssueCode.MISSING_FILE, "No file was selected.")
    if isinstance(uploaded_file, str):
        return uploaded_file.encode("utf-8")
    if isinstance(uploaded_file, (bytes, bytearray)):
        return bytes(uploaded_file)
    if isinstance(uploaded_file, Mapping):
        for key in ("file", "originFileObj", "raw", "value"):
            nested = uploaded_file.get(key)
            if hasattr(nested, "read"):
                uploaded_file = nested
                break
        else:
            raise FatalParseError(
                ImportIssueCode.INVALID_FILE_FORMAT,
                "Uploaded file payload is invalid. Expected a binary uploaded file.",
            )
    if not hasattr(uploaded_file, "read"):
        raise FatalParseError(
            ImportIssueCode.INVALID_FILE_FORMAT,
            "Uploaded file payload is invalid. Expected a readable file object.",
        )
    try:
        if hasattr(uploaded_file, "seek"):
            uploaded_file.seek(0)
        content = uploaded_file.read()
    except OSError as exc:
        raise FatalParseError(
            ImportIssueCode.UNREADABLE_FILE, f"Failed to read uploaded file: {exc}"
        ) from exc
    if isinstance(content, str):
        return content.encode("utf-8")
    return bytes(content or b"")


def _file_name(uploaded_file: Any, default: str = "upload") -> str:
    name = getattr(uploaded_file, "name", None)
    if isinstance(uploaded_file, Mapping):
        name = uploaded_file.get("name") or name
    return str(name) if name else default


def detect_file_format(file_name: str, file_format: Optional[str] = None) -> ImportFileFormat:
    """Resolve the format from an explicit value or the file extension."""
    if file_format:
        try:
            return ImportFileFormat(str(file_format).upper())
        except ValueError:
            raise FatalParseError(
                ImportIssueCode.INVALID_FILE_FORMAT,
                f"Unsupported file format '{file_format}'.",
            ) from None
    suffix = PurePath(file_name).suffix.lower()
    if suffix in FILE_EXTENSIONS:
        return FILE_EXTENSIONS[suffix]
    raise FatalParseError(
        ImportIssueCode.INVALID_FILE_FORMAT,
        f"Cannot determine the format of '{file_name}'. Expected an .xlsx or .csv file.",
    )


def resolve_limits(
    max_rows: Optional[int] = None,
    max_file_size_bytes: Optional[int] = None,
) -> ImportLimits:
    default_rows = coerce_positive_int(get_setting("import.max_rows"), 5000)
    default_size = coerce_positive_int(get_setting("import.max_file_size_bytes"), 10 * 1024 * 1024)
    return ImportLimits(
        max_rows=coerce_positive_int(max_rows, default_rows),
        max_file_size_bytes=coerce_positive_int(max_file_size_bytes, default_size),
    )


def _validate_size(content: bytes, max_file_size_bytes: int) -> None:
    if not content:
        raise FatalParseError(ImportIssueCode.UNREADABLE_FILE, "The selected file is empty.")
    if len(content) > max_file_size_bytes:
        raise FatalParseError(
            ImportIssueCode.FILE_TOO_LARGE,
            f"Uploaded file exceeds {max_file_size_bytes} bytes.",
        )


def _unique_headers(raw_headers: Iterable[Any]) -> list[tuple[int, str]]:
    """
    Index and clean header cells.

    Blank headers are skipped; repeated headers get ``_1``, ``_2`` suffixes so
    no column silently overwrites another.
    """
    indexed: list[tuple[int, str]] = []
    seen: dict[str, int] = {}
    for column_index, header_value in enumerate(raw_headers):
        if header_value is None:
            continue
        header_name = str(header_value).strip()
        if not header_name:
            continue
        if header_name in seen:
            seen[header_name] += 1
            header_name = f"{header_name}_{seen[header_name]}"
        else:
            seen[header_name] = 0
        indexed.append((column_index, header_name))
    return indexed


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _build_row(values: Any, indexed_headers: list[tuple[int, str]]) -> dict[str, Any]:
    # Empty cells are left out of the row, so "header exists in the row"
    # means the cell has a value.
    row: dict[str, Any] = {}
    for column_index, header_name in indexed_headers:
        value = values[column_index] if column_index < len(values) else None
        if not _is_blank(value):
            row[header_name] = value
    return row


def _parse_csv(content: bytes, *, max_rows: int) -> tuple[list[str], list[dict[str, Any]]]:
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        text = content.decode("latin-1")

    reader = csv.reader(io.StringIO(text))
    try:
        header_row = next(reader, None)
        indexed_headers = _unique_headers(header_row or [])
        if not indexed_headers:
            raise FatalParseError(
                ImportIssueCode.MISSING_HEADER_ROW,
                "CSV header row is missing.",
            )

        rows: list[dict[str, Any]] = []
        for values in reader:
            row = _build_row(values, indexed_headers)
            if not row:
                continue
            if len(rows) >= max_rows:
                raise FatalParseError(
                    ImportIssueCode.ROW_LIMIT_EXCEEDED,
                    f"File exceeds row limit of {max_rows}.",
                )
            rows.append(row)
    except csv.Error as exc:
        raise FatalParseError(ImportIssueCode.UNREADABLE_FILE, f"Failed to read CSV file: {exc}") from exc
    return [header for _index, header in indexed_headers], rows


def _parse_xlsx(
    content: bytes,
    *,
    max_rows: int,
    sheet_name: Optional[str] = None,
) -> tuple[list[str], list[dict[str, Any]], str]:
    try:
        workbook = load_workbook(io.BytesIO(content), data_only=True, read_only=True)
    except Exception as exc:
        raise FatalParseError(
            ImportIssueCode.UNREADABLE_FILE,
            f"Failed to read XLSX file: {exc}",
        ) from exc

    try:
        target_sheet = sheet_name or workbook.sheetnames[0]
        if target_sheet not in workbook.sheetnames:
            raise FatalParseError(
                ImportIssueCode.SHEET_NOT_FOUND,
                f'Sheet "{target_sheet}" not found in the workbook.',
            )
        sheet = workbook[target_sheet]

        header_row = next(sheet.iter_rows(min_row=1, max_row=1, values_only=True), None)
        indexed_headers = _unique_headers(header_row or [])
        if not indexed_headers:
            raise FatalParseError(
                ImportIssueCode.MISSING_HEADER_ROW,
                "XLSX header row is missing.",
            )

        rows: list[dict[str, Any]] = []
        for values in sheet.iter_rows(min_row=2, values_only=True):
            row = _build_row(values, indexed_headers)
            if not row:
                continue
            if len(rows) >= max_rows:
                raise FatalParseError(
                    ImportIssueCode.ROW_LIMIT_EXCEEDED,
                    f"File exceeds row limit of {max_rows}.",
                )
            rows.append(row)
    finally:
        workbook.close()
    return [header for _index, header in indexed_headers], rows, target_sheet


def parse_uploaded_file(
    uploaded_file: Any,
    *,
    file_name: Optional[str] = None,
    file_format: Optional[str] = None,
    sheet_name: Optional[str] = None,
    max_rows: Optional[int] = None,
    max_file_size_bytes: Optional[int] = None,
) -> ParsedImportFile:
    """
    Turn an uploaded spreadsheet into header-keyed rows.

    Any failure raises ``FatalParseError``: a file is either fully parsed or
    rejected as a whole.
    """
    name = file_name or _file_name(uploaded_file)
    limits = resolve_limits(max_rows, max_file_size_bytes)
    content = _read_uploaded_file(uploaded_file)
    _validate_size(content, max_file_size_bytes=limits.max_file_size_bytes)

    normalized_format = detect_file_format(name, file_format)
    accepted = [str(value).upper() for value in get_setting("import.accepted_formats", [])]
    if accepted and normalized_format.value not in accepted:
        raise FatalParseError(
            ImportIssueCode.INVALID_FILE_FORMAT,
            f"File format '{normalized_format.value}' is not accepted.",
        )

    used_sheet: Optional[str] = None
    if normalized_format is ImportFileFormat.CSV:
        headers, rows = _parse_csv(content, max_rows=limits.max_rows)
    else:
        headers, rows, used_sheet = _parse_xlsx(
            content, max_rows=limits.max_rows, sheet_name=sheet_name
        )

    logger.debug("Parsed %s: %d rows, headers=%s", name, len(rows), headers)
    return ParsedImportFile(
        headers=headers,
        rows=rows,
        file_format=normalized_format.value,
        file_name=name,
        file_size_bytes=len(content),
        sheet_name=used_sheet,
    )
