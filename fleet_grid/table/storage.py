"""Key-value stores used to persist column layout preferences."""

from __future__ import annotations

import copy
import json
import logging
from typing import Any, Optional

from django.core.cache import caches

from ..config_proxy import get_setting
from ..types import JSONValue, KeyValueStore

logger = logging.getLogger(__name__)


class InMemoryKeyValueStore:
    """Process-local store. Values are deep-copied in and out."""

    def __init__(self, initial: Optional[dict[str, Any]] = None) -> None:
        self._data: dict[str, Any] = copy.deepcopy(initial or {})

    def get(self, key: str) -> JSONValue:
        return copy.deepcopy(self._data.get(key))

    def set(self, key: str, value: JSONValue) -> None:
        self._data[key] = copy.deepcopy(value)

    def keys(self) -> list[str]:
        return list(self._data)


class CacheKeyValueStore:
    """Store backed by a Django cache alias. Entries never expire."""

    def __init__(self, alias: Optional[str] = None, key_prefix: str = "fleet_grid:layout:") -> None:
        self.alias = alias or get_setting("layout.cache_alias", "default")
        self.key_prefix = key_prefix

    @property
    def cache(self):
        return caches[self.alias]

    def get(self, key: str) -> JSONValue:
        raw = self.cache.get(f"{self.key_prefix}{key}")
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except (TypeError, ValueError):
            logger.debug("Ignoring unreadable cached layout entry %s", key)
            return None

    def set(self, key: str, value: JSONValue) -> None:
        self.cache.set(f"{self.key_prefix}{key}", json.dumps(value), timeout=None)


class ModelKeyValueStore:
    """
    Store backed by the ``ColumnLayoutPreference`` table.

    ``owner_id`` scopes preferences per user; an empty owner means shared
    preferences for every user of the host.
    """

    def __init__(self, owner_id: Any = "") -> None:
        self.owner_id = "" if owner_id is None else str(owner_id)

    def get(self, key: str) -> JSONValue:
        from ..models import ColumnLayoutPreference

        preference = (
            ColumnLayoutPreference.objects.filter(owner_id=self.owner_id, storage_key=key)
            .only("value")
            .first()
        )
        return None if preference is None else preference.value

    def set(self, key: str, value: JSONValue) -> None:
        from ..models import ColumnLayoutPreference

        ColumnLayoutPreference.objects.update_or_create(
            owner_id=self.owner_id,
            storage_key=key,
            defaults={"value": value},
        )


def get_default_store(owner_id: Any = "") -> KeyValueStore:
    """Build the store named by the ``layout.store_backend`` setting."""
    backend = str(get_setting("layout.store_backend", "cache")).lower()
    if backend == "database":
        return ModelKeyValueStore(owner_id=owner_id)
    if backend == "memory":
        return InMemoryKeyValueStore()
    if backend != "cache":
        logger.warning("Unknown layout store backend %r, using the cache backend", backend)
    owner = "" if owner_id is None else str(owner_id)
    return CacheKeyValueStore(key_prefix=f"fleet_grid:layout:{owner}:")
