"""Exception hierarchy shared by the table engine and the import pipeline."""

from __future__ import annotations


class FleetGridError(Exception):
    """Base class for every error raised by fleet-grid."""


class InvalidRecordError(FleetGridError, ValueError):
    """A record handed to the engine has no usable ``id``."""


class DuplicateColumnError(FleetGridError, ValueError):
    """Two column descriptors in the same set share a key."""


class ActionNotAllowedError(FleetGridError):
    """The capability oracle denied a row action."""

    def __init__(self, resource_type: str | None, action: str) -> None:
        super().__init__(f"Action '{action}' is not allowed on '{resource_type}'.")
        self.resource_type = resource_type
        self.action = action


class ImportServiceError(FleetGridError):
    """Typed error used by import services to provide issue code and context."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        row_number: int | None = None,
        field_path: str | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.row_number = row_number
        self.field_path = field_path


class FatalParseError(ImportServiceError):
    """The uploaded file could not be turned into rows; the session is aborted."""


class RowValidationError(ImportServiceError):
    """A schema violation on one row. Collected, never aborts the batch."""


class CommitError(ImportServiceError):
    """The mutation callback reported a failure for one row."""


class InvalidSessionTransition(FleetGridError):
    """An import session operation was called from the wrong state."""

    def __init__(self, current: str, operation: str) -> None:
        super().__init__(f"Cannot {operation} while the import session is {current}.")
        self.current = current
        self.operation = operation


class NoValidRowsError(FleetGridError):
    """Commit was requested but validation produced no valid rows."""


class LayoutReconciliationWarning(UserWarning):
    """Persisted column layout referenced stale or malformed entries."""
