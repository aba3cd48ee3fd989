"""Generic tabular data engine: search, sort, paginate, column layout, export."""

from .actions import (
    AllowAllOracle,
    DjangoPermissionOracle,
    RowActionSlots,
    TableAction,
    resolve_row_actions,
)
from .columns import ColumnDescriptor, build_column_set
from .engine import PageInfo, TablePage, TableRow, TableViewEngine
from .export import ExportProjection, project_records, to_export_text
from .layout import (
    ColumnLayoutState,
    ColumnLayoutStore,
    MoveDirection,
    move,
    reconcile,
    reset,
    storage_keys,
    toggle,
)
from .sorting import SORT_ASC, SORT_DESC, compare_values, sort_records
from .storage import (
    CacheKeyValueStore,
    InMemoryKeyValueStore,
    ModelKeyValueStore,
    get_default_store,
)

__all__ = [
    "AllowAllOracle",
    "DjangoPermissionOracle",
    "RowActionSlots",
    "TableAction",
    "resolve_row_actions",
    "ColumnDescriptor",
    "build_column_set",
    "PageInfo",
    "TablePage",
    "TableRow",
    "TableViewEngine",
    "ExportProjection",
    "project_records",
    "to_export_text",
    "ColumnLayoutState",
    "ColumnLayoutStore",
    "MoveDirection",
    "move",
    "reconcile",
    "reset",
    "storage_keys",
    "toggle",
    "SORT_ASC",
    "SORT_DESC",
    "compare_values",
    "sort_records",
    "CacheKeyValueStore",
    "InMemoryKeyValueStore",
    "ModelKeyValueStore",
    "get_default_store",
]
