"""Issue codes and enums shared by the import services."""

from __future__ import annotations

from enum import Enum


class ImportIssueCode(str, Enum):
    MISSING_FILE = "MISSING_FILE"
    INVALID_FILE_FORMAT = "INVALID_FILE_FORMAT"
    UNREADABLE_FILE = "UNREADABLE_FILE"
    SHEET_NOT_FOUND = "SHEET_NOT_FOUND"
    MISSING_HEADER_ROW = "MISSING_HEADER_ROW"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    ROW_LIMIT_EXCEEDED = "ROW_LIMIT_EXCEEDED"
    INVALID_FIELD_VALUE = "INVALID_FIELD_VALUE"
    SUBMIT_FAILED = "SUBMIT_FAILED"
    CANCELLED = "CANCELLED"


class ImportFileFormat(str, Enum):
    CSV = "CSV"
    XLSX = "XLSX"


class ImportStage(str, Enum):
    VALIDATE = "VALIDATE"
    COMMIT = "COMMIT"


class CommitStatus(str, Enum):
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    PARTIAL = "PARTIAL"
    EMPTY = "EMPTY"


# Path used in error messages for violations not tied to one field.
NON_FIELD_PATH = "row"

FILE_EXTENSIONS = {
    ".csv": ImportFileFormat.CSV,
    ".xlsx": ImportFileFormat.XLSX,
    ".xlsm": ImportFileFormat.XLSX,
}
