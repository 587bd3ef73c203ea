"""
Tests for SheetsClient and the CSV parsing helpers.

**Purpose**: Verify that the client builds the export URL, turns HTTP
failures into SheetsFetchError, rejects HTML bodies, and that CSV text is
split into header-keyed records the way the dashboard expects.

**Testing philosophy**: Use mocked HTTP responses (no real network calls).
"""

import pytest
import requests
from unittest.mock import Mock, patch

from emergency_dashboard.config.settings import SheetsSettings
from emergency_dashboard.venues.sheets_client import (
    SheetsClient,
    SheetsClientError,
    SheetsFetchError,
    SheetsParseError,
    build_export_url,
    clean_cell,
    parse_csv_records,
    records_from_rows,
    split_csv_lines,
)


INVENTORY_CSV = (
    '"Item-Name","Current-Stock","Item-Status"\n'
    '"Tarpaulin","5","In Stock"\n'
    '"Rope","0","Out of Stock"'
)


@pytest.fixture
def sheets_settings():
    """Settings pointing at a fake host."""
    return SheetsSettings(
        spreadsheet_id="test-sheet-id",
        base_url="https://sheets.test",
        timeout_seconds=15,
    )


def make_response(status_code=200, text="", content_type="text/csv; charset=utf-8"):
    """Build a mock requests.Response."""
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.headers = {"Content-Type": content_type}
    return response


# ============================================================================
# URL building
# ============================================================================

def test_build_export_url_default_host():
    url = build_export_url(
        "https://docs.google.com/spreadsheets/d",
        "11uutE9iZ2BjddbFkeX9cQVFOouphdvyP000vh1lGOo4",
        "Sheet1",
    )
    assert url == (
        "https://docs.google.com/spreadsheets/d/"
        "11uutE9iZ2BjddbFkeX9cQVFOouphdvyP000vh1lGOo4"
        "/gviz/tq?tqx=out:csv&sheet=Sheet1"
    )


def test_build_export_url_encodes_sheet_name():
    url = build_export_url("https://sheets.test/", "abc", "Contacts & Roles")
    assert url == "https://sheets.test/abc/gviz/tq?tqx=out:csv&sheet=Contacts%20%26%20Roles"


# ============================================================================
# CSV splitting
# ============================================================================

@pytest.mark.parametrize("raw, expected", [
    ('"Rope"', "Rope"),
    ('  Rope  ', "Rope"),
    ('" Rope "', "Rope"),
    ('""', ""),
    ('"Rope', "Rope"),
])
def test_clean_cell(raw, expected):
    assert clean_cell(raw) == expected


def test_split_csv_lines_handles_crlf_and_trailing_newline():
    rows = split_csv_lines('"a","b"\r\n"1","2"\r\n')
    assert rows == [["a", "b"], ["1", "2"]]


def test_split_csv_lines_does_not_understand_embedded_commas():
    """Commas inside quoted fields shift columns (known limitation)."""
    rows = split_csv_lines('"name","place"\n"Smith, J","Hall"')
    assert rows[1] == ["Smith", "J", "Hall"]


def test_records_from_rows_keys_are_trimmed_headers():
    records = records_from_rows([[" Item-Name ", "Current-Stock "], ["Rope", "3"]])
    assert records == [{"Item-Name": "Rope", "Current-Stock": "3"}]


def test_records_from_rows_missing_trailing_cells_default_to_empty():
    records = records_from_rows([["a", "b", "c"], ["1"]])
    assert records == [{"a": "1", "b": "", "c": ""}]


def test_records_from_rows_drops_surplus_cells():
    records = records_from_rows([["a"], ["1", "2", "3"]])
    assert records == [{"a": "1"}]


@pytest.mark.parametrize("text", ["", "\n", '"Item-Name","Current-Stock"', '"Item-Name"\n'])
def test_parse_csv_records_fewer_than_two_lines_is_empty(text):
    assert parse_csv_records(text) == []


def test_parse_csv_records_one_record_per_data_row():
    header = ["Event Name", "Date", "Time"]
    lines = [",".join(f'"{h}"' for h in header)]
    lines += [f'"Drill {i}","2025-02-{i:02d}","08:00"' for i in range(1, 8)]

    records = parse_csv_records("\n".join(lines))

    assert len(records) == 7
    assert all(list(r.keys()) == header for r in records)
    assert records[3]["Event Name"] == "Drill 4"


def test_parse_csv_records_inventory_example():
    records = parse_csv_records(INVENTORY_CSV)
    assert records == [
        {"Item-Name": "Tarpaulin", "Current-Stock": "5", "Item-Status": "In Stock"},
        {"Item-Name": "Rope", "Current-Stock": "0", "Item-Status": "Out of Stock"},
    ]


# ============================================================================
# HTTP behavior
# ============================================================================

def test_client_initialization_headers(sheets_settings):
    client = SheetsClient(sheets_settings)
    assert client.session.headers["Accept"] == "text/csv"
    assert "Authorization" not in client.session.headers


@patch("emergency_dashboard.venues.sheets_client.requests.Session.get")
def test_fetch_records_success(mock_get, sheets_settings):
    mock_get.return_value = make_response(text=INVENTORY_CSV)

    client = SheetsClient(sheets_settings)
    records = client.fetch_records("Sheet1")

    mock_get.assert_called_once_with(
        "https://sheets.test/test-sheet-id/gviz/tq?tqx=out:csv&sheet=Sheet1",
        timeout=15,
    )
    assert len(records) == 2
    assert records[0]["Item-Name"] == "Tarpaulin"


@pytest.mark.parametrize("status_code", [400, 403, 404, 500, 503])
@patch("emergency_dashboard.venues.sheets_client.requests.Session.get")
def test_non_success_status_raises_fetch_error(mock_get, status_code, sheets_settings):
    mock_get.return_value = make_response(status_code=status_code, text="nope")

    client = SheetsClient(sheets_settings)

    with pytest.raises(SheetsFetchError, match="Failed to fetch sheet") as exc_info:
        client.get_sheet_csv("Sheet1")
    assert exc_info.value.status_code == status_code


@patch("emergency_dashboard.venues.sheets_client.requests.Session.get")
def test_timeout_raises_fetch_error(mock_get, sheets_settings):
    mock_get.side_effect = requests.Timeout("slow")

    client = SheetsClient(sheets_settings)

    with pytest.raises(SheetsFetchError, match="timed out after 15s"):
        client.get_sheet_csv("Sheet1")


@patch("emergency_dashboard.venues.sheets_client.requests.Session.get")
def test_connection_error_raises_fetch_error(mock_get, sheets_settings):
    mock_get.side_effect = requests.ConnectionError("dns")

    client = SheetsClient(sheets_settings)

    with pytest.raises(SheetsFetchError, match="Failed to connect") as exc_info:
        client.get_sheet_csv("Sheet1")
    assert exc_info.value.status_code is None


@patch("emergency_dashboard.venues.sheets_client.requests.Session.get")
def test_html_body_raises_parse_error(mock_get, sheets_settings):
    mock_get.return_value = make_response(
        text="<html><body>Sign in</body></html>",
        content_type="text/html; charset=utf-8",
    )

    client = SheetsClient(sheets_settings)

    with pytest.raises(SheetsParseError, match="shared publicly"):
        client.fetch_records("Sheet1")


def test_errors_share_base_class():
    assert issubclass(SheetsFetchError, SheetsClientError)
    assert issubclass(SheetsParseError, SheetsClientError)


def test_empty_sheet_name_rejected(sheets_settings):
    client = SheetsClient(sheets_settings)
    with pytest.raises(ValueError, match="sheet_name cannot be empty"):
        client.get_sheet_csv("  ")


def test_context_manager_closes_session(sheets_settings):
    with SheetsClient(sheets_settings) as client:
        client.session = Mock()
    client.session.close.assert_called_once()
