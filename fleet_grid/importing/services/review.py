"""Review tables over validation and commit results."""

from __future__ import annotations

from typing import Any, Optional

from ...table import ColumnDescriptor, InMemoryKeyValueStore, TableViewEngine
from ...types import KeyValueStore, Notifier
from ..types import CommitReport, ValidationReport

STATUS_VALID = "Valid"
STATUS_INVALID = "Invalid"
STATUS_SUCCEEDED = "Succeeded"
STATUS_FAILED = "Failed"

ERROR_SEPARATOR = "; "

REVIEW_COLUMNS = [
    ColumnDescriptor("row_number", "Row", sortable=True),
    ColumnDescriptor("status", "Status", sortable=True),
    ColumnDescriptor("details", "Details"),
    ColumnDescriptor("errors", "Errors"),
]


def describe_row(data: Optional[dict[str, Any]]) -> str:
    if not data:
        return ""
    return ", ".join(f"{key}: {value}" for key, value in data.items())


def validation_review_records(report: ValidationReport) -> list[dict[str, Any]]:
    return [
        {
            "id": str(outcome.row_number),
            "row_number": outcome.row_number,
            "status": STATUS_VALID if outcome.is_valid else STATUS_INVALID,
            "details": describe_row(outcome.original_row),
            "errors": ERROR_SEPARATOR.join(outcome.errors),
        }
        for outcome in report.outcomes
    ]


def commit_review_records(report: CommitReport) -> list[dict[str, Any]]:
    records = []
    for position, outcome in enumerate(report.outcomes, start=1):
        row_number = outcome.row_number if outcome.row_number is not None else position
        records.append(
            {
                "id": str(position),
                "row_number": row_number,
                "status": STATUS_SUCCEEDED if outcome.success else STATUS_FAILED,
                "details": describe_row(outcome.original_data),
                "errors": outcome.error or "",
            }
        )
    return records


def _review_table(
    records: list[dict[str, Any]],
    *,
    storage_prefix: str,
    title: str,
    store: Optional[KeyValueStore],
    notifier: Optional[Notifier],
) -> TableViewEngine:
    return TableViewEngine(
        records,
        REVIEW_COLUMNS,
        storage_prefix=storage_prefix,
        title=title,
        store=store if store is not None else InMemoryKeyValueStore(),
        notifier=notifier,
    )


def build_review_table(
    validation_report: ValidationReport,
    *,
    storage_prefix: str = "import_review",
    title: str = "Validation",
    store: Optional[KeyValueStore] = None,
    notifier: Optional[Notifier] = None,
) -> TableViewEngine:
    """Browse validation outcomes with the regular table engine."""
    return _review_table(
        validation_review_records(validation_report),
        storage_prefix=storage_prefix,
        title=title,
        store=store,
        notifier=notifier,
    )


def build_commit_review_table(
    commit_report: CommitReport,
    *,
    storage_prefix: str = "import_commit_review",
    title: str = "Import results",
    store: Optional[KeyValueStore] = None,
    notifier: Optional[Notifier] = None,
) -> TableViewEngine:
    return _review_table(
        commit_review_records(commit_report),
        storage_prefix=storage_prefix,
        title=title,
        store=store,
        notifier=notifier,
    )
