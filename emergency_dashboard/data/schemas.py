"""
Domain records and sheet column contracts.

**Conceptual**: This module defines the typed records the dashboard pages
consume (InventoryItem, CalendarEntry, Contact) and the exact spreadsheet
column names each record is read from. The mappers in mappers.py are the only
code that touches raw column names; everything downstream works with fields.

**Schema philosophy**:
  - Sheets are edited by hand, so columns go missing and cells stay blank.
    Mapping never fails on that: absent cells become "" or the field default.
  - check_columns() reports missing/unknown columns so the gap is visible in
    the logs without changing what the page shows.
  - Enumerations are str-valued, so InventoryStatus.IN_STOCK == "In Stock".
    Fields that the sheet passes through unchanged (inventory status,
    calendar priority, contact status) are typed as plain str and may hold
    values outside the enumeration.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List

# One parsed spreadsheet row: trimmed header -> cell value.
RawRecord = Dict[str, str]


class InventoryStatus(str, Enum):
    """Stock level labels used by the inventory sheet."""
    IN_STOCK = "In Stock"
    LOW_STOCK = "Low Stock"
    OUT_OF_STOCK = "Out of Stock"


class Priority(str, Enum):
    """Calendar entry priority."""
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class EntryKind(str, Enum):
    """Whether a calendar entry came from the event or the task columns."""
    EVENT = "Event"
    TASK = "Task"


class ContactStatus(str, Enum):
    """Availability of a contact."""
    ACTIVE = "Active"
    ON_LEAVE = "On Leave"
    EMERGENCY = "Emergency"


class ContactPriority(str, Enum):
    """Contact priority. Anything that is not exactly "Critical" is Support."""
    CRITICAL = "Critical"
    SUPPORT = "Support"


@dataclass
class InventoryItem:
    """
    One supply line on the inventory page.

    Attributes:
        id: "inv-<row index>", unique within one fetch.
        name: Item name.
        description: Free-text description.
        category: Item category (search field).
        location: Storage location (search field).
        stock: Units on hand. Always a non-negative integer.
        unit: Unit label, e.g. "pcs" or "boxes".
        status: Stock label as written in the sheet ("In Stock" by default).
    """
    id: str
    name: str = ""
    description: str = ""
    category: str = ""
    location: str = ""
    stock: int = 0
    unit: str = ""
    status: str = InventoryStatus.IN_STOCK.value


@dataclass
class CalendarEntry:
    """
    One event or task on the calendar page.

    For tasks, `date` holds the full "Date & Time" cell, `time` its second
    whitespace-separated token, and `location` the deadline cell.
    """
    id: str
    kind: EntryKind
    name: str = ""
    date: str = ""
    time: str = ""
    location: str = ""
    notes: str = ""
    priority: str = Priority.MEDIUM.value


@dataclass
class Contact:
    """One row of the emergency contact list."""
    id: str
    name: str = ""
    agency: str = ""
    role: str = ""
    phone: str = ""
    email: str = ""
    status: str = ContactStatus.ACTIVE.value
    priority: ContactPriority = ContactPriority.SUPPORT


# Sheet column names (exact, case-sensitive)

INVENTORY_COLUMNS = {
    "name": "Item-Name",
    "description": "Item-Description",
    "category": "Item-Category",
    "location": "Item-Location",
    "stock": "Current-Stock",
    "unit": "Item-Unit",
    "status": "Item-Status",
}

EVENT_COLUMNS = {
    "name": "Event Name",
    "date": "Date",
    "time": "Time",
    "location": "Location",
    "notes": "Notes",
    "priority": "Priority",
}

TASK_COLUMNS = {
    "name": "Task Name",
    "date_time": "Date & Time",
    "deadline": "Deadline Date & Time",
    "description": "Description",
}

# The calendar sheet carries both column sets side by side.
CALENDAR_COLUMNS = {
    **{f"event_{k}": v for k, v in EVENT_COLUMNS.items()},
    **{f"task_{k}": v for k, v in TASK_COLUMNS.items()},
}

CONTACT_COLUMNS = {
    "name": "Contact Name",
    "agency": "Agency",
    "role": "Role/Title",
    "phone": "Primary Phone",
    "email": "Email",
    "status": "Status Indicator",
    "priority": "Priority",
}


@dataclass
class ColumnReport:
    """
    Outcome of comparing a sheet's header against the expected columns.

    Attributes:
        sheet: Sheet name, for log messages.
        missing: Expected columns absent from the header (sorted).
        unknown: Header columns nobody reads (sorted).
    """
    sheet: str
    missing: List[str] = field(default_factory=list)
    unknown: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when every expected column is present."""
        return not self.missing


def check_columns(
    records: List[RawRecord],
    expected: Iterable[str],
    sheet: str,
) -> ColumnReport:
    """
    Compare the columns present in fetched records with the expected set.

    **Conceptual**: The mappers default silently on a missing column, which
    hides a renamed header on the sheet. This check makes that visible
    (the provider logs the report) without changing mapping results.

    All records from one fetch share the header row, so only the first record
    is inspected. No records means nothing to check.

    Args:
        records: Records from SheetsClient.fetch_records().
        expected: Column names the mapper reads.
        sheet: Sheet name, carried into the report.

    Returns:
        ColumnReport with missing and unknown columns.
    """
    if not records:
        return ColumnReport(sheet=sheet)

    present = set(records[0].keys())
    wanted = set(expected)
    return ColumnReport(
        sheet=sheet,
        missing=sorted(wanted - present),
        # Blank header cells (trailing commas) are not worth reporting
        unknown=sorted(c for c in present - wanted if c),
    )
