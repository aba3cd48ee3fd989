"""Sequential commit of validated import rows through a host callback."""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Sequence

from asgiref.sync import async_to_sync

from ...config_proxy import get_message
from ...exceptions import CommitError
from ...types import SubmitResult
from ...utils import maybe_await
from ..constants import ImportIssueCode
from ..types import CommitOutcome, CommitReport

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, CommitOutcome], Any]


class CancelToken:
    """Flag checked between submissions; set it to stop a running commit."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


def ensure_success(result: SubmitResult, row_number: int | None = None) -> SubmitResult:
    """Raise ``CommitError`` when a submit result reports failure."""
    if not result.success:
        raise CommitError(
            ImportIssueCode.SUBMIT_FAILED,
            result.error or result.message or "Submission failed.",
            row_number=row_number,
        )
    return result


class ImportCommitExecutor:
    """
    Submits valid rows one at a time and records an outcome for each.

    A failed row never stops the loop, and the report always holds exactly
    one outcome per input row, in input order. Failed rows are not retried.
    """

    def __init__(
        self,
        submit: Callable[[dict[str, Any]], Any],
        *,
        cancel_token: Optional[CancelToken] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.submit = submit
        self.cancel_token = cancel_token
        self.on_progress = on_progress

    async def _submit_one(self, row: dict[str, Any], row_number: int | None) -> CommitOutcome:
        try:
            result = ensure_success(
                SubmitResult.coerce(await maybe_await(self.submit(row))),
                row_number=row_number,
            )
        except CommitError as exc:
            logger.warning("Import row %s rejected: %s", row_number, exc.message)
            return CommitOutcome(
                original_data=row, success=False, error=exc.message, row_number=row_number
            )
        except Exception as exc:
            logger.warning("Import row %s raised during submit: %s", row_number, exc, exc_info=True)
            return CommitOutcome(
                original_data=row, success=False, error=str(exc), row_number=row_number
            )
        return CommitOutcome(
            original_data=row,
            success=True,
            message=result.message,
            record_id=result.id,
            row_number=row_number,
        )

    async def commit(
        self,
        valid_rows: Sequence[dict[str, Any]],
        row_numbers: Optional[Sequence[int]] = None,
    ) -> CommitReport:
        if row_numbers is not None and len(row_numbers) != len(valid_rows):
            raise ValueError("row_numbers must match valid_rows in length.")

        report = CommitReport()
        total = len(valid_rows)
        for index, row in enumerate(valid_rows):
            row_number = row_numbers[index] if row_numbers is not None else index + 1
            if self.cancel_token is not None and self.cancel_token.cancelled:
                report.cancelled = True
                outcome = CommitOutcome(
                    original_data=row,
                    success=False,
                    error=get_message("import_cancelled"),
                    row_number=row_number,
                )
            else:
                outcome = await self._submit_one(row, row_number)
            report.outcomes.append(outcome)
            if self.on_progress is not None:
                self.on_progress(index + 1, total, outcome)

        logger.info("Import commit finished: %s", report.summary_message())
        return report


def commit_rows_sync(
    submit: Callable[[dict[str, Any]], Any],
    valid_rows: Sequence[dict[str, Any]],
    *,
    row_numbers: Optional[Sequence[int]] = None,
    cancel_token: Optional[CancelToken] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> CommitReport:
    """Blocking variant of ``ImportCommitExecutor.commit`` for sync callers."""
    executor = ImportCommitExecutor(submit, cancel_token=cancel_token, on_progress=on_progress)
    return async_to_sync(executor.commit)(valid_rows, row_numbers)
