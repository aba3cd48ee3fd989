"""
Configuration access for fleet-grid.

Settings are resolved in the following order:
1. Global Django settings (``FLEET_GRID``)
2. Library defaults (``LIBRARY_DEFAULTS``)
"""

from typing import Any, Dict, Optional

from django.conf import settings

from .defaults import LIBRARY_DEFAULTS


class SettingsProxy:
    """
    Proxy for reading fleet-grid settings with dotted keys.

    Values are read on every call so ``override_settings`` in tests and
    runtime changes are picked up without cache invalidation.
    """

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a setting value with hierarchical resolution.

        Args:
            key: Setting key to retrieve (dot notation, e.g. ``"import.max_rows"``)
            default: Default value if setting is not found

        Returns:
            The setting value from the highest priority source
        """
        django_value = self._get_django_setting(key)
        if django_value is not None:
            return django_value

        library_value = self._get_nested_value(LIBRARY_DEFAULTS, key)
        if library_value is not None:
            return library_value

        return default

    def section(self, name: str) -> Dict[str, Any]:
        """Return a whole settings section with host overrides merged in."""
        merged = dict(self._get_nested_value(LIBRARY_DEFAULTS, name) or {})
        overrides = self._get_django_setting(name)
        if isinstance(overrides, dict):
            merged.update(overrides)
        return merged

    def _get_django_setting(self, key: str) -> Any:
        return self._get_nested_value(getattr(settings, "FLEET_GRID", {}), key)

    def _get_nested_value(self, data: Dict[str, Any], key: str) -> Any:
        """
        Get nested value from dictionary using dot notation.

        Args:
            data: Dictionary to search in
            key: Key to retrieve (supports dot notation for nested access)

        Returns:
            The value or None if not found
        """
        if not isinstance(data, dict):
            return None

        current: Any = data
        for k in key.split("."):
            if not isinstance(current, dict) or k not in current:
                return None
            current = current[k]

        return current


_settings_proxy: Optional[SettingsProxy] = None


def get_settings_proxy() -> SettingsProxy:
    """Return the shared settings proxy."""
    global _settings_proxy
    if _settings_proxy is None:
        _settings_proxy = SettingsProxy()
    return _settings_proxy


def get_setting(key: str, default: Any = None) -> Any:
    """Shortcut for ``get_settings_proxy().get(key, default)``."""
    return get_settings_proxy().get(key, default)


def get_message(name: str, **kwargs: Any) -> str:
    """Return a user-facing message from the ``messages`` section, formatted."""
    template = str(get_setting(f"messages.{name}", name))
    return template.format(**kwargs) if kwargs else template
