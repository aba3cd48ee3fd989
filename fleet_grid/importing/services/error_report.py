"""Error report generation for import issues."""

from __future__ import annotations

import csv
import io
from typing import Optional

from ..constants import ImportStage
from ..types import CommitReport, ValidationReport

REPORT_HEADERS = ["rowNumber", "stage", "fieldPath", "message"]


def split_error_line(line: str) -> tuple[str, str]:
    """Split ``"path: message"`` back into its parts."""
    path, separator, message = line.partition(": ")
    if not separator:
        return "", line
    return path, message


def generate_error_report(
    validation_report: ValidationReport,
    commit_report: Optional[CommitReport] = None,
) -> str:
    """Return a CSV listing every validation error and commit failure."""
    handle = io.StringIO()
    writer = csv.writer(handle)
    writer.writerow(REPORT_HEADERS)

    for outcome in validation_report.invalid_outcomes():
        for line in outcome.errors:
            field_path, message = split_error_line(line)
            writer.writerow([outcome.row_number, ImportStage.VALIDATE.value, field_path, message])

    if commit_report is not None:
        for outcome in commit_report.failures():
            writer.writerow(
                [
                    outcome.row_number if outcome.row_number is not None else "",
                    ImportStage.COMMIT.value,
                    "",
                    outcome.error or outcome.message or "",
                ]
            )

    return handle.getvalue()
