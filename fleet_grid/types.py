"""Contracts between fleet-grid and the host application."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Awaitable, Protocol, Union, runtime_checkable

JSONValue = Union[dict, list, str, int, float, bool, None]


@dataclass(frozen=True)
class SubmitResult:
    """Result of one host mutation (add, update, remove)."""

    success: bool
    message: str | None = None
    error: str | None = None
    id: str | None = None

    @classmethod
    def coerce(cls, value: Any) -> "SubmitResult":
        """
        Normalize whatever a mutation callback returned.

        ``None`` counts as success, mappings are read by key, and any other
        object is read by attribute.
        """
        if isinstance(value, SubmitResult):
            return value
        if value is None:
            return cls(success=True)
        if isinstance(value, Mapping):
            getter = value.get
        else:
            getter = lambda name, default=None: getattr(value, name, default)  # noqa: E731
        record_id = getter("id", None)
        return cls(
            success=bool(getter("success", False)),
            message=getter("message", None),
            error=getter("error", None),
            id=str(record_id) if record_id is not None else None,
        )


MaybeAwaitable = Union[SubmitResult, Mapping, None, Awaitable[Any]]


@runtime_checkable
class KeyValueStore(Protocol):
    """Persistence substrate for column layout preferences."""

    def get(self, key: str) -> JSONValue:
        ...

    def set(self, key: str, value: JSONValue) -> None:
        ...


@runtime_checkable
class CapabilityOracle(Protocol):
    """Answers whether the current user may perform an action on a resource."""

    def can_perform(self, resource_type: str, action: str) -> bool:
        ...


class MutationCallbacks(Protocol):
    """Host-supplied persistence callbacks for one resource type."""

    def add(self, record: Any) -> MaybeAwaitable:
        ...

    def update(self, record: Any) -> MaybeAwaitable:
        ...

    def remove(self, record_id: str) -> MaybeAwaitable:
        ...


@runtime_checkable
class Notifier(Protocol):
    """User-facing notification sink (toasts, flash messages)."""

    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...

    def warning(self, message: str) -> None:
        ...
