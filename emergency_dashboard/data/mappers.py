"""
Row mappers: RawRecord lists -> typed dashboard records.

**Conceptual**: Each page's sheet has its own column layout, so each page gets
its own mapper. The three functions share nothing on purpose: a change to the
contacts sheet must not ripple into inventory parsing.

**Common rules**:
  - Missing or blank cells fall back to "" or the field's documented default.
  - Ids are "<prefix>-<index>" in source order, regenerated on every fetch.
  - Mappers are pure: no I/O, no logging, inputs are not modified.
"""

import re
from typing import List

from emergency_dashboard.data.schemas import (
    CONTACT_COLUMNS,
    EVENT_COLUMNS,
    INVENTORY_COLUMNS,
    TASK_COLUMNS,
    CalendarEntry,
    Contact,
    ContactPriority,
    ContactStatus,
    EntryKind,
    InventoryItem,
    InventoryStatus,
    Priority,
    RawRecord,
)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _cell(record: RawRecord, column: str, default: str = "") -> str:
    """Cell value, or `default` when the column is absent or the cell blank."""
    return record.get(column) or default


def parse_stock(value: str) -> int:
    """
    Parse a stock count cell into a non-negative integer.

    Reads the leading integer, so "12" and "12 pcs" are both 12. Anything
    without a leading integer ("", "abc", "n/a") is 0, and negative counts
    clamp to 0.

    Example:
        >>> parse_stock("12")
        12
        >>> parse_stock("abc")
        0
    """
    match = _LEADING_INT.match(value or "")
    if match is None:
        return 0
    return max(int(match.group(1)), 0)


def map_inventory_records(records: List[RawRecord]) -> List[InventoryItem]:
    """
    Map inventory sheet rows to InventoryItem records.

    Status is passed through as written; a blank cell means "In Stock".

    Args:
        records: Rows of the inventory sheet.

    Returns:
        One InventoryItem per row, ids "inv-0", "inv-1", ...
    """
    cols = INVENTORY_COLUMNS
    return [
        InventoryItem(
            id=f"inv-{idx}",
            name=_cell(row, cols["name"]),
            description=_cell(row, cols["description"]),
            category=_cell(row, cols["category"]),
            location=_cell(row, cols["location"]),
            stock=parse_stock(_cell(row, cols["stock"], "0")),
            unit=_cell(row, cols["unit"]),
            status=_cell(row, cols["status"], InventoryStatus.IN_STOCK.value),
        )
        for idx, row in enumerate(records)
    ]


def task_time(date_time: str) -> str:
    """Second whitespace-separated token of a "Date & Time" cell, or ""."""
    parts = date_time.split()
    return parts[1] if len(parts) > 1 else ""


def map_calendar_records(records: List[RawRecord]) -> List[CalendarEntry]:
    """
    Map calendar sheet rows to events followed by tasks.

    **Conceptual**: The calendar sheet holds two tables side by side: event
    columns (Event Name, Date, Time, ...) and task columns (Task Name,
    Date & Time, ...). The same rows are read twice:

      1. Every row becomes an Event built from the event columns.
      2. Rows with a non-empty "Task Name" become Tasks built from the task
         columns. Task priority is always Medium.

    The result is all events (source order) then all tasks (source order).
    Event and task ids are numbered independently from 0, so "event-0" and
    "task-0" can both exist; ids are unique only within a kind.

    Args:
        records: Rows of the calendar sheet.

    Returns:
        Events then tasks.
    """
    ev = EVENT_COLUMNS
    events = [
        CalendarEntry(
            id=f"event-{idx}",
            kind=EntryKind.EVENT,
            name=_cell(row, ev["name"]),
            date=_cell(row, ev["date"]),
            time=_cell(row, ev["time"]),
            location=_cell(row, ev["location"]),
            notes=_cell(row, ev["notes"]),
            priority=_cell(row, ev["priority"], Priority.MEDIUM.value),
        )
        for idx, row in enumerate(records)
    ]

    tk = TASK_COLUMNS
    task_rows = [row for row in records if _cell(row, tk["name"])]
    tasks = [
        CalendarEntry(
            id=f"task-{idx}",
            kind=EntryKind.TASK,
            name=_cell(row, tk["name"]),
            date=_cell(row, tk["date_time"]),
            time=task_time(_cell(row, tk["date_time"])),
            location=_cell(row, tk["deadline"]),
            notes=_cell(row, tk["description"]),
            priority=Priority.MEDIUM.value,
        )
        for idx, row in enumerate(task_rows)
    ]

    return events + tasks


def coerce_contact_priority(value: str) -> ContactPriority:
    """Exactly "Critical" is Critical; everything else, blank included, is Support."""
    if value == ContactPriority.CRITICAL.value:
        return ContactPriority.CRITICAL
    return ContactPriority.SUPPORT


def map_contact_records(records: List[RawRecord]) -> List[Contact]:
    """
    Map contact sheet rows to Contact records.

    Status is passed through as written (blank means "Active"); priority is
    coerced with coerce_contact_priority().
    """
    cols = CONTACT_COLUMNS
    return [
        Contact(
            id=f"contact-{idx}",
            name=_cell(row, cols["name"]),
            agency=_cell(row, cols["agency"]),
            role=_cell(row, cols["role"]),
            phone=_cell(row, cols["phone"]),
            email=_cell(row, cols["email"]),
            status=_cell(row, cols["status"], ContactStatus.ACTIVE.value),
            priority=coerce_contact_priority(_cell(row, cols["priority"])),
        )
        for idx, row in enumerate(records)
    ]
