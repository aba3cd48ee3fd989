"""Persistence for per-table column layout preferences."""

from __future__ import annotations

from django.db import models


class ColumnLayoutPreference(models.Model):
    """One persisted JSON value (visibility map or order list) for a table."""

    owner_id = models.CharField(max_length=128, blank=True, default="")
    storage_key = models.CharField(max_length=255)
    value = models.JSONField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "fleet_grid"
        db_table = "fleet_grid_column_layout_preference"
        constraints = [
            models.UniqueConstraint(
                fields=["owner_id", "storage_key"],
                name="fleet_grid_layout_owner_key_unique",
            )
        ]
        ordering = ["owner_id", "storage_key"]

    def __str__(self) -> str:
        owner = self.owner_id or "*"
        return f"{owner}:{self.storage_key}"
