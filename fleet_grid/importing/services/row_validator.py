"""Row-level validation of parsed import rows."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Iterable, Optional

from ..constants import NON_FIELD_PATH
from ..types import ImportRowOutcome, ValidationReport
from .file_parser import parse_uploaded_file
from .row_schema import as_row_schema

logger = logging.getLogger(__name__)


def format_field_errors(errors: Mapping[str, Iterable[str]]) -> list[str]:
    """Render ``{path: [messages]}`` as ``"path: message"`` lines."""
    lines: list[str] = []
    for path, messages in errors.items():
        for message in messages:
            lines.append(f"{path or NON_FIELD_PATH}: {message}")
    return lines


class ImportValidationPipeline:
    """
    Maps spreadsheet headers to canonical keys and validates each row.

    Rows are validated independently: the pipeline performs no cross-row
    checks, and one bad row never affects another.
    """

    def __init__(self, column_mapping: Mapping[str, str], schema: Any) -> None:
        self.column_mapping = dict(column_mapping)
        self.schema = as_row_schema(schema)

    def map_row(self, raw_row: Mapping[str, Any]) -> dict[str, Any]:
        mapped: dict[str, Any] = {}
        for header, field_key in self.column_mapping.items():
            if header in raw_row:
                mapped[field_key] = raw_row[header]
        return mapped

    def validate_row(self, raw_row: Mapping[str, Any], row_number: int) -> ImportRowOutcome:
        original_row = dict(raw_row)
        mapped = self.map_row(raw_row)
        try:
            cleaned, errors = self.schema.validate(mapped)
        except Exception as exc:
            logger.warning("Row schema raised on row %s: %s", row_number, exc, exc_info=True)
            return ImportRowOutcome(
                row_number=row_number,
                original_row=original_row,
                mapped_data=None,
                errors=[f"{NON_FIELD_PATH}: {exc}"],
                is_valid=False,
            )

        if errors:
            return ImportRowOutcome(
                row_number=row_number,
                original_row=original_row,
                mapped_data=None,
                errors=format_field_errors(errors),
                is_valid=False,
            )
        return ImportRowOutcome(
            row_number=row_number,
            original_row=original_row,
            mapped_data=cleaned if cleaned is not None else mapped,
            errors=[],
            is_valid=True,
        )

    def validate_rows(self, raw_rows: Iterable[Mapping[str, Any]]) -> ValidationReport:
        outcomes = [
            self.validate_row(raw_row, row_number)
            for row_number, raw_row in enumerate(raw_rows, start=1)
        ]
        report = ValidationReport(outcomes=outcomes)
        logger.debug(
            "Validated %d rows: %d valid, %d invalid",
            report.total_rows,
            report.valid_count,
            report.invalid_count,
        )
        return report


def run_validation(
    content: Any,
    *,
    column_mapping: Mapping[str, str],
    schema: Any,
    file_name: Optional[str] = None,
    sheet_name: Optional[str] = None,
    file_format: Optional[str] = None,
) -> ValidationReport:
    """Parse an uploaded file and validate its rows. Parse errors propagate."""
    parsed = parse_uploaded_file(
        content,
        file_name=file_name,
        file_format=file_format,
        sheet_name=sheet_name,
    )
    return ImportValidationPipeline(column_mapping, schema).validate_rows(parsed.rows)
