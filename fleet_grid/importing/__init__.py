"""Spreadsheet import: validation pipeline, commit executor and session."""

from .constants import CommitStatus, ImportFileFormat, ImportIssueCode, ImportStage
from .session import ImportSession, ImportSessionState
from .types import (
    CommitOutcome,
    CommitReport,
    ImportRowOutcome,
    ParsedImportFile,
    ValidationReport,
)

__all__ = [
    "CommitStatus",
    "ImportFileFormat",
    "ImportIssueCode",
    "ImportStage",
    "ImportSession",
    "ImportSessionState",
    "CommitOutcome",
    "CommitReport",
    "ImportRowOutcome",
    "ParsedImportFile",
    "ValidationReport",
]
