"""Service layer for spreadsheet import: parse, validate, commit, report."""

from .audit_log import log_import_event
from .commit_service import CancelToken, ImportCommitExecutor, commit_rows_sync
from .error_report import generate_error_report
from .file_parser import detect_file_format, parse_uploaded_file
from .review import build_commit_review_table, build_review_table
from .row_schema import (
    CallableRowSchema,
    FormRowSchema,
    RowSchema,
    SpreadsheetBooleanField,
    as_row_schema,
)
from .row_validator import ImportValidationPipeline, run_validation
from .template_export import export_import_template

__all__ = [
    "log_import_event",
    "CancelToken",
    "ImportCommitExecutor",
    "commit_rows_sync",
    "generate_error_report",
    "detect_file_format",
    "parse_uploaded_file",
    "build_commit_review_table",
    "build_review_table",
    "CallableRowSchema",
    "FormRowSchema",
    "RowSchema",
    "SpreadsheetBooleanField",
    "as_row_schema",
    "ImportValidationPipeline",
    "run_validation",
    "export_import_template",
]
