import pytest

from fleet_grid.exceptions import DuplicateColumnError
from fleet_grid.table import (
    ColumnDescriptor,
    ColumnLayoutState,
    ColumnLayoutStore,
    InMemoryKeyValueStore,
    MoveDirection,
    move,
    reconcile,
    reset,
    storage_keys,
    toggle,
)

pytestmark = pytest.mark.unit


def _columns():
    return [
        ColumnDescriptor("a", "A", sortable=True),
        ColumnDescriptor("b", "B", default_visible=False),
    ]


def test_reconcile_drops_stale_keys_and_appends_new_columns():
    persisted = {
        "order": ["a", "old_removed"],
        "visibility": {"a": True, "old_removed": False},
    }

    state = reconcile(_columns(), persisted)

    assert state.order == ("a", "b")
    assert state.visibility == {"a": True, "b": False}


def test_reconcile_is_idempotent():
    persisted = {"order": ["b", "a", "gone"], "visibility": {"a": False, "gone": True}}
    once = reconcile(_columns(), persisted)

    assert reconcile(_columns(), once) == once
    assert reconcile(_columns(), once.to_json()) == once


def test_reconcile_keeps_persisted_order_and_visibility():
    state = reconcile(_columns(), {"order": ["b", "a"], "visibility": {"b": True}})

    assert state.order == ("b", "a")
    assert state.visible_keys() == ["b", "a"]


def test_reconcile_ignores_malformed_entries():
    state = reconcile(_columns(), {"order": "a,b", "visibility": {"a": "yes"}})

    assert state == reset(_columns())


def test_reconcile_skips_unhashable_order_entries():
    state = reconcile(_columns(), {"order": [["a"], "b", {"x": 1}], "visibility": {"a": False, 3: True}})

    assert state.order == ("b", "a")
    assert state.visibility == {"a": False, "b": False}
    assert reconcile(_columns(), ["a", "b"]) == reset(_columns())


def test_store_survives_corrupted_saved_order():
    store = InMemoryKeyValueStore({"t_columnsOrder": [["a"], "b"], "t_columnsVisibility": {"a": True}})

    layout = ColumnLayoutStore(_columns(), "t", store=store)

    assert layout.state.order == ("b", "a")
    assert layout.visible_keys() == ["a"]


def test_reconcile_without_persisted_state_returns_defaults():
    assert reconcile(_columns(), None) == ColumnLayoutState(
        visibility={"a": True, "b": False}, order=("a", "b")
    )


def test_duplicate_column_keys_are_rejected():
    with pytest.raises(DuplicateColumnError):
        reset([ColumnDescriptor("a", "A"), ColumnDescriptor("a", "Again")])


def test_toggle_flips_only_the_given_column():
    state = toggle(reset(_columns()), "b")

    assert state.visibility == {"a": True, "b": True}
    assert toggle(state, "unknown") is state


def test_move_swaps_neighbours_and_is_noop_at_the_edges():
    state = reset(_columns())

    assert move(state, "b", MoveDirection.UP).order == ("b", "a")
    assert move(state, "a", "down").order == ("b", "a")
    assert move(state, "a", MoveDirection.UP).order == ("a", "b")
    assert move(state, "b", MoveDirection.DOWN).order == ("a", "b")


def test_storage_keys_use_the_table_prefix():
    assert storage_keys("vehicles") == ("vehicles_columnsVisibility", "vehicles_columnsOrder")


def test_store_persists_every_mutation():
    store = InMemoryKeyValueStore()
    layout = ColumnLayoutStore(_columns(), "vehicles", store=store)

    layout.toggle("b")
    layout.move("b", MoveDirection.UP)

    assert store.get("vehicles_columnsVisibility") == {"a": True, "b": True}
    assert store.get("vehicles_columnsOrder") == ["b", "a"]

    reloaded = ColumnLayoutStore(_columns(), "vehicles", store=store)
    assert reloaded.visible_keys() == ["b", "a"]


def test_store_reset_restores_declared_defaults():
    store = InMemoryKeyValueStore(
        {"drivers_columnsVisibility": {"a": False}, "drivers_columnsOrder": ["b", "a"]}
    )
    layout = ColumnLayoutStore(_columns(), "drivers", store=store)
    assert layout.visible_keys() == []

    layout.reset()

    assert layout.visible_keys() == ["a"]
    assert store.get("drivers_columnsOrder") == ["a", "b"]


def test_tables_with_different_prefixes_do_not_share_state():
    store = InMemoryKeyValueStore()
    first = ColumnLayoutStore(_columns(), "first", store=store)
    second = ColumnLayoutStore(_columns(), "second", store=store)

    first.toggle("a")

    assert first.is_visible("a") is False
    assert second.is_visible("a") is True


class _BrokenStore:
    def get(self, key):
        raise RuntimeError("storage unavailable")

    def set(self, key, value):
        raise RuntimeError("storage unavailable")


def test_store_failures_fall_back_to_in_memory_layout():
    layout = ColumnLayoutStore(_columns(), "broken", store=_BrokenStore())

    assert layout.visible_keys() == ["a"]
    layout.toggle("b")
    assert layout.visible_keys() == ["a", "b"]
