"""
Default configuration for the fleet-grid library.

Every setting the library reads lives here. Hosts override any subset through
the ``FLEET_GRID`` dict in their Django settings; lookups go through
``fleet_grid.config_proxy``.
"""

from __future__ import annotations

from typing import Any

LIBRARY_VERSION = "0.1.0"
LIBRARY_NAME = "fleet-grid"


# --------------------------------------------------------------------------- #
# Library-wide defaults (grouped by feature area)
# --------------------------------------------------------------------------- #
LIBRARY_DEFAULTS: dict[str, Any] = {
    "table": {
        "items_per_page_options": [10, 25, 50],
        # "record" searches every primitive field, "visible_columns" only the
        # fields shown in the grid.
        "search_scope": "record",
        "export_sheet_name": "Sheet1",
        # Export file name; empty falls back to the table's storage prefix.
        "export_file_name": "",
    },
    "layout": {
        "visibility_suffix": "_columnsVisibility",
        "order_suffix": "_columnsOrder",
        "store_backend": "cache",
        "cache_alias": "default",
    },
    "import": {
        "max_rows": 5000,
        "max_file_size_bytes": 10 * 1024 * 1024,
        "accepted_formats": ["XLSX", "CSV"],
        "template_sheet_name": "Sheet1",
    },
    "messages": {
        "no_data_to_export": "No data to export.",
        "export_success": "Data exported to XLSX.",
        "no_valid_rows": "No valid rows to import.",
        "import_success": "Import completed successfully.",
        "import_failure": "Import failed: no row could be saved.",
        "import_partial": "Import finished with errors: {succeeded} succeeded, {failed} failed.",
        "import_cancelled": "Import cancelled before this row was submitted.",
    },
}
