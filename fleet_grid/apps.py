"""
Django app configuration for the fleet-grid library.

This module configures:
- The Django application holding the column layout preference model
- Library settings validation at startup
"""

import logging

from django.apps import AppConfig as BaseAppConfig

logger = logging.getLogger(__name__)


class AppConfig(BaseAppConfig):
    """Django app configuration for fleet-grid."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "fleet_grid"
    verbose_name = "Fleet Grid"
    label = "fleet_grid"

    def ready(self):
        """Validate settings after Django has loaded."""
        self._validate_configuration()
        logger.debug("fleet-grid initialized")

    def _validate_configuration(self):
        from .config_proxy import get_settings_proxy

        settings = get_settings_proxy()
        options = settings.get("table.items_per_page_options", [])
        if not options or any(
            isinstance(option, bool) or not isinstance(option, int) or option < 1
            for option in options
        ):
            logger.warning(
                "FLEET_GRID table.items_per_page_options should be positive integers, got %r",
                options,
            )

        backend = settings.get("layout.store_backend", "cache")
        if backend not in ("cache", "database", "memory"):
            logger.warning("Unknown FLEET_GRID layout.store_backend %r", backend)
