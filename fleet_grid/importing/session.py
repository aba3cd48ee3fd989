"""
Import session state machine.

One session drives a single spreadsheet import from file selection to the
commit report::

    IDLE -> FILE_SELECTED -> VALIDATING -> VALIDATED -> COMMITTING -> COMPLETED

``reset()`` returns to ``IDLE`` from any state and discards everything, as
closing and reopening the import dialog does. There is no way back from
``COMMITTING`` to ``VALIDATED``.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Optional

from ..exceptions import FatalParseError, InvalidSessionTransition, NoValidRowsError
from ..notifications import LoggingNotifier
from ..types import Notifier
from .constants import CommitStatus
from .services.audit_log import log_import_event
from .services.commit_service import CancelToken, ImportCommitExecutor, ProgressCallback
from .services.file_parser import parse_uploaded_file
from .services.row_validator import ImportValidationPipeline
from .types import CommitReport, ParsedImportFile, ValidationReport


class ImportSessionState(str, Enum):
    IDLE = "IDLE"
    FILE_SELECTED = "FILE_SELECTED"
    VALIDATING = "VALIDATING"
    VALIDATED = "VALIDATED"
    COMMITTING = "COMMITTING"
    COMPLETED = "COMPLETED"


_SELECTABLE_STATES = frozenset(
    {
        ImportSessionState.IDLE,
        ImportSessionState.FILE_SELECTED,
        ImportSessionState.VALIDATED,
        ImportSessionState.COMPLETED,
    }
)


class ImportSession:
    def __init__(
        self,
        column_mapping: Mapping[str, str],
        schema: Any,
        *,
        sheet_name: Optional[str] = None,
        file_format: Optional[str] = None,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.pipeline = ImportValidationPipeline(column_mapping, schema)
        self.sheet_name = sheet_name
        self.file_format = file_format
        self.notifier = notifier or LoggingNotifier()
        self.session_id = uuid.uuid4().hex
        self._clear()

    def _clear(self) -> None:
        self.state = ImportSessionState.IDLE
        self.content: Any = None
        self.file_name: Optional[str] = None
        self.parsed_file: Optional[ParsedImportFile] = None
        self.validation_report: Optional[ValidationReport] = None
        self.commit_report: Optional[CommitReport] = None
        self.fatal_error: Optional[FatalParseError] = None

    def _require(self, operation: str, *allowed: ImportSessionState) -> None:
        if self.state not in allowed:
            raise InvalidSessionTransition(self.state.value, operation)

    def _row_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        if self.validation_report is not None:
            counts["total"] = self.validation_report.total_rows
            counts["valid"] = self.validation_report.valid_count
            counts["invalid"] = self.validation_report.invalid_count
        if self.commit_report is not None:
            counts["succeeded"] = self.commit_report.succeeded
            counts["failed"] = self.commit_report.failed
        return counts

    def _log(self, event_name: str, **details: Any) -> None:
        log_import_event(
            event_name,
            session_id=self.session_id,
            file_name=self.file_name,
            state=self.state.value,
            row_counts=self._row_counts(),
            **details,
        )

    @property
    def valid_count(self) -> int:
        return self.validation_report.valid_count if self.validation_report else 0

    @property
    def invalid_count(self) -> int:
        return self.validation_report.invalid_count if self.validation_report else 0

    def select_file(self, content: Any, file_name: Optional[str] = None) -> None:
        """Pick the file to import. Any previous results are discarded."""
        self._require("select a file", *_SELECTABLE_STATES)
        self._clear()
        self.content = content
        self.file_name = file_name or getattr(content, "name", None)
        self.state = ImportSessionState.FILE_SELECTED
        self._log("file_selected")

    def validate(self) -> ValidationReport:
        self._require("validate", ImportSessionState.FILE_SELECTED)
        self.state = ImportSessionState.VALIDATING
        try:
            self.parsed_file = parse_uploaded_file(
                self.content,
                file_name=self.file_name,
                file_format=self.file_format,
                sheet_name=self.sheet_name,
            )
        except FatalParseError as exc:
            self._log("parse_failed", code=str(getattr(exc.code, "value", exc.code)), message=exc.message)
            self._clear()
            self.fatal_error = exc
            self.notifier.error(exc.message)
            raise

        self.validation_report = self.pipeline.validate_rows(self.parsed_file.rows)
        self.state = ImportSessionState.VALIDATED
        self._log("validated")
        return self.validation_report

    async def commit(
        self,
        submit: Callable[[dict[str, Any]], Any],
        *,
        cancel_token: Optional[CancelToken] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> CommitReport:
        """Submit every valid row and return the per-row report."""
        self._require("commit", ImportSessionState.VALIDATED)
        valid_outcomes = self.validation_report.valid_outcomes()
        if not valid_outcomes:
            raise NoValidRowsError("No valid rows to import.")

        self.state = ImportSessionState.COMMITTING
        self._log("commit_started", rows=len(valid_outcomes))
        executor = ImportCommitExecutor(submit, cancel_token=cancel_token, on_progress=on_progress)
        report = await executor.commit(
            [outcome.mapped_data for outcome in valid_outcomes],
            row_numbers=[outcome.row_number for outcome in valid_outcomes],
        )
        self.commit_report = report
        self.state = ImportSessionState.COMPLETED
        self._log("commit_finished", status=report.status.value, cancelled=report.cancelled)
        self._notify(report)
        return report

    def _notify(self, report: CommitReport) -> None:
        message = report.user_message()
        if report.status is CommitStatus.SUCCESS:
            self.notifier.success(message)
        elif report.status is CommitStatus.PARTIAL:
            self.notifier.warning(message)
        else:
            self.notifier.error(message)

    def reset(self) -> None:
        if self.state is not ImportSessionState.IDLE:
            self._log("reset", previous_state=self.state.value)
        self._clear()
