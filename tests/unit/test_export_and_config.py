import io
from datetime import date
from decimal import Decimal

import pytest
from django.test import override_settings
from openpyxl import load_workbook

from fleet_grid import __version__
from fleet_grid.config_proxy import get_message, get_setting, get_settings_proxy
from fleet_grid.excel import render_workbook, sheet_title
from fleet_grid.table import ColumnDescriptor, project_records, to_export_text
from fleet_grid.types import SubmitResult
from fleet_grid.utils import coerce_bool, coerce_int, coerce_positive_int

pytestmark = pytest.mark.unit


class _Node:
    def __init__(self, children):
        self.children = children


def test_to_export_text_reduces_rendered_values():
    assert to_export_text("plain") == "plain"
    assert to_export_text(12) == 12
    assert to_export_text(Decimal("1.5")) == 1.5
    assert to_export_text(date(2024, 5, 1)) == date(2024, 5, 1)
    assert to_export_text(["Km ", 1200]) == "Km 1200"
    assert to_export_text(_Node(["a", _Node("b")])) == "ab"
    assert to_export_text(object()) == ""


def test_project_records_uses_render_functions():
    columns = [
        ColumnDescriptor("plate", "Plate"),
        ColumnDescriptor("label", "Label", render=lambda r: f"{r['plate']} ({r['type']})"),
    ]
    records = [{"id": "1", "plate": "AB-1", "type": "van"}]

    projection = project_records(records, columns)

    assert projection.as_rows() == [["Plate", "Label"], ["AB-1", "AB-1 (van)"]]
    assert projection.as_dicts() == [{"Plate": "AB-1", "Label": "AB-1 (van)"}]


def test_render_workbook_keeps_types_and_freezes_header():
    content = render_workbook(
        [["Plate", "Serviced", "Km"], ["AB-1", date(2024, 1, 2), 1500], ["AB-2", None, 10]],
        sheet_name="Fleet: 2024/01",
    )

    sheet = load_workbook(io.BytesIO(content)).active
    assert sheet.title == "Fleet- 2024-01"
    assert sheet.freeze_panes == "A2"
    assert sheet["A1"].font.bold is True
    assert sheet["C2"].value == 1500
    assert sheet["B2"].value.date() == date(2024, 1, 2)


def test_sheet_title_is_truncated_and_never_empty():
    assert sheet_title("x" * 40) == "x" * 31
    assert sheet_title("") == "Sheet1"


def test_settings_fall_back_to_library_defaults():
    assert get_setting("import.max_rows") == 5000
    assert get_setting("does.not.exist", "fallback") == "fallback"


def test_host_settings_override_defaults():
    with override_settings(FLEET_GRID={"import": {"max_rows": 10}}):
        assert get_setting("import.max_rows") == 10
        section = get_settings_proxy().section("import")
        assert section["max_rows"] == 10
        assert section["accepted_formats"] == ["XLSX", "CSV"]


def test_messages_are_formatted():
    assert get_message("import_partial", succeeded=2, failed=1) == (
        "Import finished with errors: 2 succeeded, 1 failed."
    )
    with override_settings(FLEET_GRID={"messages": {"no_data_to_export": "Rien à exporter."}}):
        assert get_message("no_data_to_export") == "Rien à exporter."


def test_submit_result_coercion():
    assert SubmitResult.coerce(None).success is True
    assert SubmitResult.coerce({"success": False, "error": "boom"}).error == "boom"

    class _Response:
        success = True
        id = 9

    assert SubmitResult.coerce(_Response()).id == "9"


def test_coercion_helpers():
    assert coerce_int("12") == 12
    assert coerce_int(True, default=3) == 3
    assert coerce_positive_int("0", 7) == 7
    assert coerce_bool("Oui") is True
    assert coerce_bool("non") is False
    assert coerce_bool("maybe", default=None) is None


def test_version_is_exposed():
    assert __version__ == "0.1.0"
