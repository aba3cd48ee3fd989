"""
Generic table view engine.

``TableViewEngine`` turns a list of records into the page a screen renders:
search filter, then sort, then pagination, always in that order. Column
visibility and order come from a ``ColumnLayoutStore`` persisted per table.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Optional, Sequence

from ..config_proxy import get_message, get_setting
from ..exceptions import ActionNotAllowedError
from ..notifications import LoggingNotifier
from ..types import CapabilityOracle, KeyValueStore, MutationCallbacks, Notifier, SubmitResult
from ..utils import coerce_positive_int, maybe_await
from .actions import RowActionSlots, TableAction, is_allowed, resolve_row_actions
from .columns import ColumnDescriptor, build_column_set
from .export import ExportProjection, project_records
from .layout import ColumnLayoutState, ColumnLayoutStore, MoveDirection
from .records import ensure_records, record_id
from .search import SEARCH_SCOPE_VISIBLE_COLUMNS, filter_records
from .sorting import SORT_ASC, sort_records, toggle_direction

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageInfo:
    total_count: int
    page_count: int
    current_page: int
    items_per_page: int

    @property
    def has_next_page(self) -> bool:
        return self.current_page < self.page_count

    @property
    def has_previous_page(self) -> bool:
        return self.current_page > 1


@dataclass(frozen=True)
class TableRow:
    id: str
    record: Any
    cells: dict


@dataclass(frozen=True)
class TablePage:
    columns: List[ColumnDescriptor]
    rows: List[TableRow]
    page_info: PageInfo
    sort_key: Optional[str] = None
    sort_direction: str = SORT_ASC
    actions: RowActionSlots = field(default_factory=RowActionSlots)

    @property
    def is_empty(self) -> bool:
        return not self.rows


class TableViewEngine:
    """
    Search, sort, paginate and project records for one table instance.

    ``storage_prefix`` identifies the table's persisted column layout and
    doubles as the export file name unless ``export_file_name`` or the
    ``table.export_file_name`` setting names one.
    """

    def __init__(
        self,
        records: Iterable[Any],
        columns: Sequence[ColumnDescriptor | dict],
        *,
        storage_prefix: str,
        title: str = "",
        store: Optional[KeyValueStore] = None,
        items_per_page_options: Optional[Sequence[int]] = None,
        custom_filter: Optional[Callable[[Any], bool]] = None,
        resource_type: Optional[str] = None,
        capability_oracle: Optional[CapabilityOracle] = None,
        callbacks: Optional[MutationCallbacks] = None,
        notifier: Optional[Notifier] = None,
        search_scope: Optional[str] = None,
        export_file_name: Optional[str] = None,
    ) -> None:
        self.columns = build_column_set(columns)
        self.title = title
        self.layout = ColumnLayoutStore(self.columns, storage_prefix, store=store)
        self.items_per_page_options = list(
            items_per_page_options or get_setting("table.items_per_page_options", [10, 25, 50])
        )
        self.custom_filter = custom_filter
        self.resource_type = resource_type
        self.capability_oracle = capability_oracle
        self.callbacks = callbacks
        self.notifier = notifier or LoggingNotifier()
        self.search_scope = search_scope or get_setting("table.search_scope", "record")
        self.export_file_name = (
            export_file_name or get_setting("table.export_file_name") or storage_prefix
        )

        self._records: list[Any] = ensure_records(records)
        self.search_term = ""
        self.current_page = 1
        self.items_per_page = coerce_positive_int(self.items_per_page_options[0], 10)
        self.sort_direction = SORT_ASC
        self.sort_key: Optional[str] = next(
            (column.key for column in self.columns if column.sortable), None
        )
        self._ensure_sort_visible()

    # -- data ---------------------------------------------------------------

    @property
    def records(self) -> list[Any]:
        return list(self._records)

    def set_records(self, records: Iterable[Any]) -> None:
        self._records = ensure_records(records)

    # -- search -------------------------------------------------------------

    def set_search_term(self, term: Optional[str]) -> None:
        self.search_term = term or ""
        self.current_page = 1

    def set_custom_filter(self, predicate: Optional[Callable[[Any], bool]]) -> None:
        self.custom_filter = predicate
        self.current_page = 1

    # -- sort ---------------------------------------------------------------

    def set_sort(self, key: str) -> None:
        """Activate ``key`` ascending, or flip the direction if already active."""
        if self.sort_key == key:
            self.sort_direction = toggle_direction(self.sort_direction)
        else:
            self.sort_key = key
            self.sort_direction = SORT_ASC

    def clear_sort(self) -> None:
        self.sort_key = None
        self.sort_direction = SORT_ASC

    def _ensure_sort_visible(self) -> None:
        if self.sort_key is None or self.layout.is_visible(self.sort_key):
            return
        visible = self.layout.visible_keys()
        if visible:
            logger.debug(
                "Sort column %s is hidden, falling back to %s", self.sort_key, visible[0]
            )
            self.sort_key = visible[0]
        else:
            self.clear_sort()

    # -- pagination ---------------------------------------------------------

    @property
    def total_pages(self) -> int:
        return math.ceil(len(self.filtered_records()) / self.items_per_page)

    def set_page(self, page: int) -> None:
        self.current_page = min(max(int(page), 1), max(self.total_pages, 1))

    def set_items_per_page(self, count: int) -> None:
        count = int(count)
        if count < 1:
            raise ValueError("items_per_page must be a positive integer.")
        self.items_per_page = count
        self.current_page = 1

    # -- column layout ------------------------------------------------------

    @property
    def layout_state(self) -> ColumnLayoutState:
        return self.layout.state

    def visible_columns(self) -> list[ColumnDescriptor]:
        return self.layout.visible_columns()

    def toggle_column(self, key: str) -> ColumnLayoutState:
        state = self.layout.toggle(key)
        self._ensure_sort_visible()
        return state

    def move_column(self, key: str, direction: MoveDirection | str) -> ColumnLayoutState:
        state = self.layout.move(key, direction)
        self._ensure_sort_visible()
        return state

    def reset_columns(self) -> ColumnLayoutState:
        state = self.layout.reset()
        self._ensure_sort_visible()
        return state

    # -- projection ---------------------------------------------------------

    def filtered_records(self) -> list[Any]:
        """Records after the search filter and the sort, before pagination."""
        search_columns = (
            self.visible_columns() if self.search_scope == SEARCH_SCOPE_VISIBLE_COLUMNS else None
        )
        filtered = filter_records(
            self._records, self.search_term, self.custom_filter, search_columns
        )
        return sort_records(filtered, self.sort_key, self.sort_direction)

    def current_page_records(self) -> list[Any]:
        filtered = self.filtered_records()
        page_count = math.ceil(len(filtered) / self.items_per_page)
        page = min(self.current_page, max(page_count, 1))
        start = (page - 1) * self.items_per_page
        return filtered[start : start + self.items_per_page]

    def page(self) -> TablePage:
        """Everything a screen needs to render the current page."""
        filtered = self.filtered_records()
        page_count = math.ceil(len(filtered) / self.items_per_page)
        page = min(self.current_page, max(page_count, 1))
        start = (page - 1) * self.items_per_page
        columns = self.visible_columns()
        rows = [
            TableRow(
                id=record_id(record),
                record=record,
                cells={column.key: column.display_value(record) for column in columns},
            )
            for record in filtered[start : start + self.items_per_page]
        ]
        return TablePage(
            columns=columns,
            rows=rows,
            page_info=PageInfo(
                total_count=len(filtered),
                page_count=page_count,
                current_page=page,
                items_per_page=self.items_per_page,
            ),
            sort_key=self.sort_key,
            sort_direction=self.sort_direction,
            actions=self.row_actions(),
        )

    # -- export -------------------------------------------------------------

    def project_for_export(self) -> Optional[ExportProjection]:
        """
        Visible columns of every filtered, sorted record.

        Returns ``None`` and notifies the user when there is nothing to export.
        """
        filtered = self.filtered_records()
        if not filtered:
            self.notifier.warning(get_message("no_data_to_export"))
            return None
        return project_records(filtered, self.visible_columns())

    def export_xlsx(self, sheet_name: Optional[str] = None) -> Optional[bytes]:
        projection = self.project_for_export()
        if projection is None:
            return None
        content = projection.to_xlsx(
            sheet_name=sheet_name or self.title or get_setting("table.export_sheet_name", "Sheet1")
        )
        logger.info(
            "Exported %d rows from table %s", len(projection.rows), self.layout.storage_prefix
        )
        self.notifier.success(get_message("export_success"))
        return content

    def export_filename(self) -> str:
        return f"{self.export_file_name}.xlsx"

    # -- row actions --------------------------------------------------------

    def row_actions(self) -> RowActionSlots:
        return resolve_row_actions(self.capability_oracle, self.resource_type, self.callbacks)

    async def add_record(self, record: Any) -> SubmitResult:
        return await self._run_action(TableAction.ADD, "add", record)

    async def edit_record(self, record: Any) -> SubmitResult:
        return await self._run_action(TableAction.EDIT, "update", record)

    async def delete_record(self, record_id_value: str) -> SubmitResult:
        return await self._run_action(TableAction.DELETE, "remove", str(record_id_value))

    async def _run_action(self, action: TableAction, callback_name: str, payload: Any) -> SubmitResult:
        callback = getattr(self.callbacks, callback_name, None)
        if callback is None or not is_allowed(self.capability_oracle, self.resource_type, action):
            raise ActionNotAllowedError(self.resource_type, action.value)
        result = SubmitResult.coerce(await maybe_await(callback(payload)))
        if result.success:
            if result.message:
                self.notifier.success(result.message)
        else:
            self.notifier.error(result.error or result.message or f"{action.value} failed")
        return result
