"""Typed contracts shared across importing services."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..config_proxy import get_message
from .constants import CommitStatus


@dataclass(frozen=True)
class ParsedImportFile:
    headers: list[str]
    rows: list[dict[str, Any]]
    file_format: str
    file_name: str
    file_size_bytes: int
    sheet_name: Optional[str] = None


@dataclass(frozen=True)
class ImportLimits:
    max_rows: int
    max_file_size_bytes: int


@dataclass
class ImportRowOutcome:
    """Validation result of one raw row. ``row_number`` counts data rows from 1."""

    row_number: int
    original_row: dict[str, Any]
    mapped_data: Optional[dict[str, Any]]
    errors: list[str] = field(default_factory=list)
    is_valid: bool = False


@dataclass
class ValidationReport:
    outcomes: list[ImportRowOutcome] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.outcomes)

    @property
    def valid_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.is_valid)

    @property
    def invalid_count(self) -> int:
        return self.total_rows - self.valid_count

    def valid_outcomes(self) -> list[ImportRowOutcome]:
        return [outcome for outcome in self.outcomes if outcome.is_valid]

    def invalid_outcomes(self) -> list[ImportRowOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.is_valid]

    def valid_rows(self) -> list[dict[str, Any]]:
        """Mapped data of the valid rows, in source order."""
        return [outcome.mapped_data for outcome in self.valid_outcomes()]

    def to_dict(self) -> dict:
        return {
            "total_rows": self.total_rows,
            "valid_rows": self.valid_count,
            "invalid_rows": self.invalid_count,
            "errors": [
                {"row": outcome.row_number, "errors": list(outcome.errors)}
                for outcome in self.invalid_outcomes()
            ],
        }


@dataclass
class CommitOutcome:
    original_data: dict[str, Any]
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None
    record_id: Optional[str] = None
    row_number: Optional[int] = None


@dataclass
class CommitReport:
    outcomes: list[CommitOutcome] = field(default_factory=list)
    cancelled: bool = False

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.success)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    @property
    def status(self) -> CommitStatus:
        if not self.outcomes:
            return CommitStatus.EMPTY
        if self.failed == 0:
            return CommitStatus.SUCCESS
        if self.succeeded == 0:
            return CommitStatus.FAILURE
        return CommitStatus.PARTIAL

    def failures(self) -> list[CommitOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.success]

    def summary_message(self) -> str:
        return f"{self.succeeded} succeeded, {self.failed} failed"

    def user_message(self) -> str:
        """Message for the session-level notification."""
        status = self.status
        if status is CommitStatus.SUCCESS:
            return get_message("import_success")
        if status is CommitStatus.FAILURE:
            return get_message("import_failure")
        if status is CommitStatus.EMPTY:
            return get_message("no_valid_rows")
        return get_message("import_partial", succeeded=self.succeeded, failed=self.failed)

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "total_rows": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "cancelled": self.cancelled,
            "failures": [
                {"row": outcome.row_number, "error": outcome.error}
                for outcome in self.failures()
            ],
        }
