"""
HTTP client for publicly shared spreadsheets.

**Conceptual**: This module is a thin wrapper around the spreadsheet host's
CSV export endpoint. It builds the export URL, performs the GET, and turns
the CSV body into RawRecord dicts (header -> cell). It knows nothing about
inventory, calendars or contacts - mapping rows to dashboard records is
SheetsDataProvider's job.

**Export endpoint**:
    GET {base_url}/{spreadsheet_id}/gviz/tq?tqx=out:csv&sheet={sheet_name}

The sheet must be shared publicly ("anyone with the link"); no credentials are
sent. A non-public sheet answers 200 with the host's HTML sign-in page, which
is reported as SheetsParseError rather than parsed as CSV.

**CSV handling**: Lines are split on newlines and cells on commas, with one
pair of enclosing double quotes and surrounding whitespace stripped per cell.
Commas or escaped quotes inside a quoted field are NOT supported: such a row
silently shifts its columns. The export produces every cell quoted, so plain
text values are fine.
"""

import logging
from typing import List, Optional
from urllib.parse import quote

import requests

from emergency_dashboard.config.settings import SheetsSettings
from emergency_dashboard.data.schemas import RawRecord

logger = logging.getLogger(__name__)


class SheetsClientError(Exception):
    """
    Base exception for spreadsheet client errors.

    Catch this to handle every failure of a sheet fetch; catch the subclasses
    to tell network problems from unusable responses.
    """
    pass


class SheetsFetchError(SheetsClientError):
    """
    Raised when the sheet could not be downloaded.

    Covers non-success HTTP status, timeouts and connection failures.
    `status_code` is None when no response was received.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SheetsParseError(SheetsClientError):
    """
    Raised when the response body is not CSV.

    Typically the host's HTML sign-in page for a sheet that is not shared
    publicly.
    """
    pass


def build_export_url(base_url: str, spreadsheet_id: str, sheet_name: str) -> str:
    """
    Build the CSV export URL for one sheet.

    Example:
        >>> build_export_url("https://docs.google.com/spreadsheets/d", "abc", "Sheet 1")
        'https://docs.google.com/spreadsheets/d/abc/gviz/tq?tqx=out:csv&sheet=Sheet%201'
    """
    return (
        f"{base_url.rstrip('/')}/{spreadsheet_id}"
        f"/gviz/tq?tqx=out:csv&sheet={quote(sheet_name, safe='')}"
    )


def clean_cell(cell: str) -> str:
    """Strip one pair of enclosing double quotes, then surrounding whitespace."""
    if cell.startswith('"'):
        cell = cell[1:]
    if cell.endswith('"'):
        cell = cell[:-1]
    return cell.strip()


def split_csv_lines(text: str) -> List[List[str]]:
    """
    Split CSV text into rows of cleaned cells.

    **Functionally**:
      - Lines are split on "\\n"; a trailing "\\r" is dropped from each line.
      - A single trailing newline at the end of the body does not produce an
        extra empty row.
      - Each line is split on "," and every cell passed through clean_cell().

    Args:
        text: Response body.

    Returns:
        List of rows (lists of cell strings). "" yields [[""]].
    """
    if text.endswith("\n"):
        text = text[:-1]
    lines = [line.rstrip("\r") for line in text.split("\n")]
    return [[clean_cell(cell) for cell in line.split(",")] for line in lines]


def records_from_rows(rows: List[List[str]]) -> List[RawRecord]:
    """
    Turn split rows into header-keyed records.

    **Functionally**:
      - Fewer than 2 rows (no header or no data) -> [].
      - Row 0 is the header; names are trimmed.
      - Every later row is matched to the header by position. Missing
        trailing cells become "", surplus cells are dropped.

    Example:
        >>> records_from_rows([["Name", " Qty "], ["Rope", "3"], ["Tarp"]])
        [{'Name': 'Rope', 'Qty': '3'}, {'Name': 'Tarp', 'Qty': ''}]
    """
    if len(rows) < 2:
        return []

    headers = [h.strip() for h in rows[0]]
    records = []
    for row in rows[1:]:
        records.append({
            header: (row[idx] if idx < len(row) else "")
            for idx, header in enumerate(headers)
        })
    return records


def parse_csv_records(text: str) -> List[RawRecord]:
    """CSV text -> records. Shorthand for records_from_rows(split_csv_lines(text))."""
    return records_from_rows(split_csv_lines(text))


class SheetsClient:
    """
    Thin HTTP client for one publicly shared spreadsheet.

    **Responsibilities**:
      - Construct export URLs for named sheets
      - Make HTTP requests with timeout
      - Translate HTTP failures into SheetsFetchError
      - Reject non-CSV bodies with SheetsParseError
      - Parse CSV into RawRecord lists

    **NOT responsible for**:
      - Mapping records to dashboard entities (SheetsDataProvider)
      - Swallowing errors (also SheetsDataProvider)

    **Example usage**:
        >>> from emergency_dashboard.config.settings import get_settings
        >>> with SheetsClient(get_settings().sheets) as client:
        ...     records = client.fetch_records("Sheet1")
        >>> records[0]["Item-Name"]
        'Tarpaulin'
    """

    def __init__(self, settings: SheetsSettings):
        """
        Initialize the client.

        Args:
            settings: Spreadsheet id, host and timeout.
        """
        self.settings = settings
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "text/csv",
            "User-Agent": "emergency_dashboard/1.0",
        })

    def export_url(self, sheet_name: str) -> str:
        """CSV export URL for `sheet_name` in the configured spreadsheet."""
        return build_export_url(
            self.settings.base_url, self.settings.spreadsheet_id, sheet_name
        )

    def get_sheet_csv(self, sheet_name: str) -> str:
        """
        Download one sheet as CSV text.

        Args:
            sheet_name: Name of the sheet (tab), e.g. "Sheet1".

        Returns:
            Response body as text.

        Raises:
            ValueError: If sheet_name is empty.
            SheetsFetchError: On timeout, connection failure or non-2xx status.
            SheetsParseError: If the host answered with an HTML page.
        """
        if not sheet_name or not sheet_name.strip():
            raise ValueError("sheet_name cannot be empty")

        url = self.export_url(sheet_name)
        logger.debug("Fetching sheet %r from %s", sheet_name, url)

        try:
            response = self.session.get(url, timeout=self.settings.timeout_seconds)
        except requests.Timeout as e:
            raise SheetsFetchError(
                f"Request for sheet '{sheet_name}' timed out after "
                f"{self.settings.timeout_seconds}s."
            ) from e
        except requests.ConnectionError as e:
            raise SheetsFetchError(
                f"Failed to connect to {self.settings.base_url} for sheet '{sheet_name}'."
            ) from e
        except requests.RequestException as e:
            raise SheetsFetchError(f"HTTP request for sheet '{sheet_name}' failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise SheetsFetchError(
                f"Failed to fetch sheet '{sheet_name}' (status {response.status_code}).",
                status_code=response.status_code,
            )

        content_type = response.headers.get("Content-Type", "")
        if "text/html" in content_type:
            raise SheetsParseError(
                f"Sheet '{sheet_name}' returned an HTML page instead of CSV. "
                f"Check that the spreadsheet is shared publicly."
            )

        return response.text

    def fetch_records(self, sheet_name: str) -> List[RawRecord]:
        """
        Download one sheet and parse it into records.

        Returns:
            One RawRecord per data row; [] when the sheet has no data rows.

        Raises:
            SheetsFetchError, SheetsParseError: See get_sheet_csv().
        """
        records = parse_csv_records(self.get_sheet_csv(sheet_name))
        logger.debug("Parsed %d records from sheet %r", len(records), sheet_name)
        return records

    def close(self):
        """Close the HTTP session and release pooled connections."""
        self.session.close()

    def __enter__(self):
        """Enable context manager support (with statement)."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Clean up session when exiting context manager."""
        self.close()
        return False  # Don't suppress exceptions
