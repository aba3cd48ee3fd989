"""
Column layout: visibility and order of a table's columns.

The pure functions (``reconcile``, ``toggle``, ``move``, ``reset``) never
touch storage. ``ColumnLayoutStore`` binds them to a ``KeyValueStore`` and
persists after every mutation under keys derived from a per-table prefix, so
two tables never share preferences.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Sequence, Union

from ..config_proxy import get_setting
from ..types import KeyValueStore
from .columns import ColumnDescriptor, build_column_set
from .storage import get_default_store

logger = logging.getLogger(__name__)


class MoveDirection(str, Enum):
    UP = "up"
    DOWN = "down"


@dataclass(frozen=True)
class ColumnLayoutState:
    visibility: dict[str, bool] = field(default_factory=dict)
    order: tuple[str, ...] = ()

    def is_visible(self, key: str) -> bool:
        return bool(self.visibility.get(key, False))

    def visible_keys(self) -> list[str]:
        return [key for key in self.order if self.is_visible(key)]

    def to_json(self) -> dict[str, Any]:
        return {"visibility": dict(self.visibility), "order": list(self.order)}


PersistedLayout = Union[ColumnLayoutState, Mapping[str, Any], None]


def _default_visibility(columns: Sequence[ColumnDescriptor]) -> dict[str, bool]:
    return {column.key: column.default_visible for column in columns}


def reset(declared_columns: Sequence[ColumnDescriptor]) -> ColumnLayoutState:
    """Pure default layout: declared order, each column's default visibility."""
    columns = build_column_set(declared_columns)
    return ColumnLayoutState(
        visibility=_default_visibility(columns),
        order=tuple(column.key for column in columns),
    )


def reconcile(
    declared_columns: Sequence[ColumnDescriptor],
    persisted: PersistedLayout = None,
) -> ColumnLayoutState:
    """
    Merge a persisted layout into the declared column set.

    Persisted visibility wins for keys that are still declared. The persisted
    order is kept for declared keys; declared keys it does not mention are
    appended in declaration order. Stale and malformed entries are dropped.
    """
    columns = build_column_set(declared_columns)
    declared = [column.key for column in columns]
    declared_set = set(declared)
    visibility = _default_visibility(columns)

    if isinstance(persisted, ColumnLayoutState):
        persisted = persisted.to_json()
    if not isinstance(persisted, Mapping):
        if persisted is not None:
            logger.debug("Ignoring malformed persisted layout %r", persisted)
        persisted = {}

    saved_visibility = persisted.get("visibility")
    if isinstance(saved_visibility, Mapping):
        for key, visible in saved_visibility.items():
            if not isinstance(key, str):
                logger.debug("Ignoring non-string column visibility key %r", key)
                continue
            if key not in declared_set:
                logger.debug("Dropping stale column visibility entry %r", key)
                continue
            if not isinstance(visible, bool):
                logger.debug("Ignoring non-boolean visibility for column %r", key)
                continue
            visibility[key] = visible
    elif saved_visibility is not None:
        logger.debug("Ignoring malformed persisted visibility %r", saved_visibility)

    order: list[str] = []
    saved_order = persisted.get("order")
    if isinstance(saved_order, (list, tuple)):
        for key in saved_order:
            if not isinstance(key, str):
                logger.debug("Ignoring non-string column order entry %r", key)
                continue
            if key in declared_set and key not in order:
                order.append(key)
            elif key not in declared_set:
                logger.debug("Dropping stale column order entry %r", key)
    elif saved_order is not None:
        logger.debug("Ignoring malformed persisted order %r", saved_order)

    order.extend(key for key in declared if key not in order)
    return ColumnLayoutState(visibility=visibility, order=tuple(order))


def toggle(state: ColumnLayoutState, key: str) -> ColumnLayoutState:
    """Flip visibility of ``key``. Unknown keys leave the state unchanged."""
    if key not in state.visibility:
        return state
    visibility = dict(state.visibility)
    visibility[key] = not visibility[key]
    return ColumnLayoutState(visibility=visibility, order=state.order)


def move(
    state: ColumnLayoutState,
    key: str,
    direction: Union[MoveDirection, str],
) -> ColumnLayoutState:
    """Move ``key`` one slot up or down. Moving past either end is a no-op."""
    direction = MoveDirection(direction)
    if key not in state.order:
        return state
    index = state.order.index(key)
    target = index - 1 if direction is MoveDirection.UP else index + 1
    if target < 0 or target >= len(state.order):
        return state
    order = list(state.order)
    order.pop(index)
    order.insert(target, key)
    return ColumnLayoutState(visibility=dict(state.visibility), order=tuple(order))


def storage_keys(prefix: str) -> tuple[str, str]:
    """Return the (visibility, order) storage keys for a table prefix."""
    return (
        f"{prefix}{get_setting('layout.visibility_suffix', '_columnsVisibility')}",
        f"{prefix}{get_setting('layout.order_suffix', '_columnsOrder')}",
    )


class ColumnLayoutStore:
    """Column layout of one table instance, persisted under ``storage_prefix``."""

    def __init__(
        self,
        columns: Sequence[ColumnDescriptor],
        storage_prefix: str,
        store: Optional[KeyValueStore] = None,
    ) -> None:
        self.columns = build_column_set(columns)
        self.storage_prefix = storage_prefix
        self.store = store if store is not None else get_default_store()
        self._state: Optional[ColumnLayoutState] = None

    @property
    def state(self) -> ColumnLayoutState:
        if self._state is None:
            self._state = self.load()
        return self._state

    def load(self) -> ColumnLayoutState:
        """Read persisted preferences and reconcile them with the columns."""
        visibility_key, order_key = storage_keys(self.storage_prefix)
        try:
            persisted = {
                "visibility": self.store.get(visibility_key),
                "order": self.store.get(order_key),
            }
        except Exception as exc:
            logger.warning(
                "Could not read column layout for %s: %s", self.storage_prefix, exc
            )
            persisted = None
        self._state = reconcile(self.columns, persisted)
        return self._state

    def toggle(self, key: str) -> ColumnLayoutState:
        return self._apply(toggle(self.state, key))

    def move(self, key: str, direction: Union[MoveDirection, str]) -> ColumnLayoutState:
        return self._apply(move(self.state, key, direction))

    def reset(self) -> ColumnLayoutState:
        return self._apply(reset(self.columns))

    def is_visible(self, key: str) -> bool:
        return self.state.is_visible(key)

    def visible_keys(self) -> list[str]:
        return self.state.visible_keys()

    def visible_columns(self) -> list[ColumnDescriptor]:
        by_key = {column.key: column for column in self.columns}
        return [by_key[key] for key in self.state.visible_keys() if key in by_key]

    def _apply(self, state: ColumnLayoutState) -> ColumnLayoutState:
        self._state = state
        self._persist(state)
        return state

    def _persist(self, state: ColumnLayoutState) -> None:
        visibility_key, order_key = storage_keys(self.storage_prefix)
        try:
            self.store.set(visibility_key, dict(state.visibility))
            self.store.set(order_key, list(state.order))
        except Exception as exc:
            # Last write wins; the in-memory layout stays authoritative.
            logger.warning(
                "Could not persist column layout for %s: %s", self.storage_prefix, exc
            )
