import pytest
from django.core.cache import caches
from django.test import override_settings

from fleet_grid.models import ColumnLayoutPreference
from fleet_grid.table import (
    CacheKeyValueStore,
    ColumnDescriptor,
    ColumnLayoutStore,
    InMemoryKeyValueStore,
    ModelKeyValueStore,
    get_default_store,
)

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _clear_cache():
    caches["default"].clear()
    yield
    caches["default"].clear()


def test_in_memory_store_copies_values():
    store = InMemoryKeyValueStore()
    value = {"a": True}

    store.set("key", value)
    value["a"] = False

    assert store.get("key") == {"a": True}
    assert store.get("missing") is None


def test_cache_store_round_trips_json():
    store = CacheKeyValueStore(key_prefix="tests:")

    store.set("vehicles_columnsOrder", ["a", "b"])

    assert store.get("vehicles_columnsOrder") == ["a", "b"]
    assert caches["default"].get("tests:vehicles_columnsOrder") == '["a", "b"]'


def test_cache_store_ignores_unreadable_entries():
    caches["default"].set("tests:broken", "{not json", timeout=None)

    assert CacheKeyValueStore(key_prefix="tests:").get("broken") is None


@pytest.mark.django_db
def test_model_store_upserts_per_owner():
    alice = ModelKeyValueStore(owner_id=1)
    bob = ModelKeyValueStore(owner_id=2)

    alice.set("vehicles_columnsVisibility", {"a": False})
    alice.set("vehicles_columnsVisibility", {"a": True})
    bob.set("vehicles_columnsVisibility", {"a": False})

    assert alice.get("vehicles_columnsVisibility") == {"a": True}
    assert bob.get("vehicles_columnsVisibility") == {"a": False}
    assert ColumnLayoutPreference.objects.count() == 2
    assert ModelKeyValueStore().get("vehicles_columnsVisibility") is None


@pytest.mark.django_db
def test_layout_store_persists_to_database():
    columns = [ColumnDescriptor("a", "A"), ColumnDescriptor("b", "B")]
    layout = ColumnLayoutStore(columns, "drivers", store=ModelKeyValueStore(owner_id="u1"))

    layout.move("b", "up")

    saved = ColumnLayoutPreference.objects.get(owner_id="u1", storage_key="drivers_columnsOrder")
    assert saved.value == ["b", "a"]
    assert str(saved) == "u1:drivers_columnsOrder"


def test_default_store_follows_settings():
    assert isinstance(get_default_store(), CacheKeyValueStore)

    with override_settings(FLEET_GRID={"layout": {"store_backend": "database"}}):
        store = get_default_store(owner_id=5)
        assert isinstance(store, ModelKeyValueStore)
        assert store.owner_id == "5"

    with override_settings(FLEET_GRID={"layout": {"store_backend": "memory"}}):
        assert isinstance(get_default_store(), InMemoryKeyValueStore)

    with override_settings(FLEET_GRID={"layout": {"store_backend": "redis"}}):
        assert isinstance(get_default_store(), CacheKeyValueStore)


def test_cache_store_prefix_is_scoped_by_owner():
    store = get_default_store(owner_id="42")

    assert store.key_prefix == "fleet_grid:layout:42:"
