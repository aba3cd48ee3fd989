import io
from datetime import datetime

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from openpyxl import Workbook

from fleet_grid.exceptions import FatalParseError
from fleet_grid.importing.constants import ImportIssueCode
from fleet_grid.importing.services import detect_file_format, parse_uploaded_file

pytestmark = pytest.mark.unit


def _xlsx(rows_by_sheet):
    workbook = Workbook()
    workbook.remove(workbook.active)
    for title, rows in rows_by_sheet.items():
        sheet = workbook.create_sheet(title)
        for row in rows:
            sheet.append(row)
    output = io.BytesIO()
    workbook.save(output)
    return output.getvalue()


def test_parse_xlsx_first_sheet_keeps_cell_types():
    content = _xlsx(
        {
            "Vehicles": [
                [" Plaque ", "Kilométrage", "Dernière Vidange"],
                ["AB-123", 45000, datetime(2024, 3, 1)],
                [None, None, None],
                ["CD-456", None, None],
            ],
            "Other": [["x"]],
        }
    )

    parsed = parse_uploaded_file(SimpleUploadedFile("vehicles.xlsx", content))

    assert parsed.file_format == "XLSX"
    assert parsed.sheet_name == "Vehicles"
    assert parsed.headers == ["Plaque", "Kilométrage", "Dernière Vidange"]
    assert parsed.rows == [
        {"Plaque": "AB-123", "Kilométrage": 45000, "Dernière Vidange": datetime(2024, 3, 1)},
        {"Plaque": "CD-456"},
    ]


def test_parse_xlsx_named_sheet():
    content = _xlsx({"First": [["a"], [1]], "Drivers": [["Nom"], ["Ali"]]})

    parsed = parse_uploaded_file(content, file_name="drivers.xlsx", sheet_name="Drivers")

    assert parsed.rows == [{"Nom": "Ali"}]


def test_missing_sheet_is_fatal():
    content = _xlsx({"First": [["a"], [1]]})

    with pytest.raises(FatalParseError) as exc_info:
        parse_uploaded_file(content, file_name="data.xlsx", sheet_name="Missing")

    assert exc_info.value.code == ImportIssueCode.SHEET_NOT_FOUND


def test_unreadable_workbook_is_fatal():
    with pytest.raises(FatalParseError) as exc_info:
        parse_uploaded_file(b"definitely not a zip", file_name="data.xlsx")

    assert exc_info.value.code == ImportIssueCode.UNREADABLE_FILE


def test_duplicate_headers_get_suffixes():
    parsed = parse_uploaded_file("Name,Name,\nA,B,ignored\n", file_name="dup.csv")

    assert parsed.headers == ["Name", "Name_1"]
    assert parsed.rows == [{"Name": "A", "Name_1": "B"}]


def test_parse_csv_handles_utf8_sig_and_latin1():
    utf8 = parse_uploaded_file(
        SimpleUploadedFile("utf8.csv", "\ufeffNom,Age\nÉlodie,31\n".encode("utf-8"))
    )
    assert utf8.rows == [{"Nom": "Élodie", "Age": "31"}]

    latin = parse_uploaded_file(
        SimpleUploadedFile("latin.csv", "Nom,Age\nMatériel,2\n".encode("latin-1"))
    )
    assert latin.rows == [{"Nom": "Matériel", "Age": "2"}]


def test_csv_without_header_is_fatal():
    with pytest.raises(FatalParseError) as exc_info:
        parse_uploaded_file(",,\n1,2,3\n", file_name="empty.csv")

    assert exc_info.value.code == ImportIssueCode.MISSING_HEADER_ROW


@pytest.mark.parametrize(
    "kwargs, code",
    [
        ({"max_rows": 1}, ImportIssueCode.ROW_LIMIT_EXCEEDED),
        ({"max_file_size_bytes": 5}, ImportIssueCode.FILE_TOO_LARGE),
    ],
)
def test_limits_are_enforced(kwargs, code):
    with pytest.raises(FatalParseError) as exc_info:
        parse_uploaded_file("a\n1\n2\n", file_name="rows.csv", **kwargs)

    assert exc_info.value.code == code


def test_missing_and_empty_files_are_fatal():
    with pytest.raises(FatalParseError) as missing:
        parse_uploaded_file(None)
    assert missing.value.code == ImportIssueCode.MISSING_FILE

    with pytest.raises(FatalParseError) as empty:
        parse_uploaded_file(b"", file_name="empty.csv")
    assert empty.value.code == ImportIssueCode.UNREADABLE_FILE


def test_mapping_payload_wrapping_a_file():
    upload = SimpleUploadedFile("wrapped.csv", b"a\n1\n")

    parsed = parse_uploaded_file({"name": "wrapped.csv", "file": upload})

    assert parsed.file_name == "wrapped.csv"
    assert parsed.rows == [{"a": "1"}]


def test_format_detection():
    assert detect_file_format("report.XLSX").value == "XLSX"
    assert detect_file_format("whatever.bin", "csv").value == "CSV"
    with pytest.raises(FatalParseError) as exc_info:
        detect_file_format("notes.txt")
    assert exc_info.value.code == ImportIssueCode.INVALID_FILE_FORMAT


class _BrokenUpload:
    name = "broken.csv"

    def read(self):
        raise OSError("connection reset while streaming upload")


def test_read_failure_becomes_a_fatal_parse_error():
    with pytest.raises(FatalParseError) as exc_info:
        parse_uploaded_file(_BrokenUpload())

    assert exc_info.value.code == ImportIssueCode.UNREADABLE_FILE
    assert "connection reset" in exc_info.value.message
