import asyncio

import pytest
from asgiref.sync import async_to_sync

from fleet_grid.importing.constants import CommitStatus
from fleet_grid.importing.services import CancelToken, ImportCommitExecutor, commit_rows_sync
from fleet_grid.types import SubmitResult

pytestmark = pytest.mark.unit

ROWS = [{"plate": "AB-1"}, {"plate": "AB-2"}, {"plate": "AB-3"}]


class _Recorder:
    def __init__(self, reject=(), raise_on=()):
        self.reject = set(reject)
        self.raise_on = set(raise_on)
        self.submitted = []

    async def __call__(self, row):
        self.submitted.append(row["plate"])
        await asyncio.sleep(0)
        if row["plate"] in self.raise_on:
            raise RuntimeError("connection reset")
        if row["plate"] in self.reject:
            return {"success": False, "error": f"{row['plate']} already exists"}
        return {"success": True, "id": row["plate"].lower()}


def test_failure_does_not_stop_following_rows():
    submit = _Recorder(reject={"AB-2"})

    report = async_to_sync(ImportCommitExecutor(submit).commit)(ROWS, row_numbers=[2, 5, 7])

    assert [outcome.success for outcome in report.outcomes] == [True, False, True]
    assert report.summary_message() == "2 succeeded, 1 failed"
    assert report.status is CommitStatus.PARTIAL
    assert report.cancelled is False
    assert submit.submitted == ["AB-1", "AB-2", "AB-3"]
    assert report.outcomes[1].error == "AB-2 already exists"
    assert report.outcomes[1].row_number == 5
    assert report.outcomes[0].record_id == "ab-1"


def test_outcomes_match_input_order_and_count():
    submit = _Recorder(reject={"AB-1", "AB-3"})

    report = async_to_sync(ImportCommitExecutor(submit).commit)(ROWS)

    assert report.total == len(ROWS)
    assert [outcome.original_data for outcome in report.outcomes] == ROWS
    assert [outcome.row_number for outcome in report.outcomes] == [1, 2, 3]


def test_exceptions_become_failed_outcomes():
    submit = _Recorder(raise_on={"AB-1"})

    report = async_to_sync(ImportCommitExecutor(submit).commit)(ROWS)

    assert report.outcomes[0].success is False
    assert report.outcomes[0].error == "connection reset"
    assert report.succeeded == 2


def test_rows_are_submitted_one_at_a_time():
    in_flight = 0
    peak = 0

    async def submit(row):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.001)
        in_flight -= 1
        return None

    report = async_to_sync(ImportCommitExecutor(submit).commit)(ROWS * 3)

    assert peak == 1
    assert report.status is CommitStatus.SUCCESS


@pytest.mark.parametrize(
    "reject, status",
    [
        (set(), CommitStatus.SUCCESS),
        ({"AB-1", "AB-2", "AB-3"}, CommitStatus.FAILURE),
        ({"AB-3"}, CommitStatus.PARTIAL),
    ],
)
def test_summary_status(reject, status):
    report = commit_rows_sync(_Recorder(reject=reject), ROWS)

    assert report.status is status


def test_empty_commit_is_reported_as_empty():
    report = commit_rows_sync(_Recorder(), [])

    assert report.status is CommitStatus.EMPTY


def test_sync_submit_and_submit_result_values():
    def submit(row):
        return SubmitResult(success=True, message="saved", id="1")

    report = commit_rows_sync(submit, ROWS[:1])

    assert report.outcomes[0].message == "saved"
    assert report.outcomes[0].record_id == "1"


def test_cancel_token_marks_remaining_rows_as_not_submitted():
    token = CancelToken()
    submit = _Recorder()

    def on_progress(done, total, outcome):
        if done == 1:
            token.cancel()

    report = commit_rows_sync(submit, ROWS, cancel_token=token, on_progress=on_progress)

    assert submit.submitted == ["AB-1"]
    assert report.cancelled is True
    assert report.total == 3
    assert [outcome.success for outcome in report.outcomes] == [True, False, False]
    assert report.outcomes[2].error == "Import cancelled before this row was submitted."


def test_progress_reports_every_row():
    seen = []

    commit_rows_sync(_Recorder(), ROWS, on_progress=lambda done, total, _: seen.append((done, total)))

    assert seen == [(1, 3), (2, 3), (3, 3)]


def test_row_numbers_must_match_rows():
    with pytest.raises(ValueError):
        commit_rows_sync(_Recorder(), ROWS, row_numbers=[1])


def test_report_to_dict_lists_failures():
    report = commit_rows_sync(_Recorder(reject={"AB-2"}), ROWS, row_numbers=[3, 4, 8])

    assert report.to_dict() == {
        "status": "PARTIAL",
        "total_rows": 3,
        "succeeded": 2,
        "failed": 1,
        "cancelled": False,
        "failures": [{"row": 4, "error": "AB-2 already exists"}],
    }
