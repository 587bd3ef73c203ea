"""
Search, filter and sort derivations for the dashboard pages.

**Conceptual**: A page keeps the full fetched list in its state and derives
what to display from it on every change of the search box or a dropdown. The
derivation is a pure function of (base list, inputs): it returns a new list
and never modifies the base list, so clearing the search restores everything
without refetching.

**Filter semantics**:
  - Search: case-insensitive substring match against a few text fields,
    OR-ed across fields. An empty search term matches everything.
  - Exact filters: {field: value} dropdowns, AND-ed with the search and with
    each other. An empty value ("" or None) means "All" (no constraint).

The page presets at the bottom (derive_*_view) fix the searched fields and
dropdowns each page offers. The *_stats functions compute the summary tiles.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, TypeVar

from emergency_dashboard.data.schemas import (
    CalendarEntry,
    Contact,
    EntryKind,
    InventoryItem,
    InventoryStatus,
)

T = TypeVar("T")

INVENTORY_SEARCH_FIELDS = ("name", "category", "location")
CONTACT_SEARCH_FIELDS = ("name", "agency", "role")

SORT_KEYS = ("name", "stock", "status")


def _text(value: Any) -> str:
    """Field value as plain text (enum members compare by their value)."""
    if isinstance(value, Enum):
        return str(value.value)
    return "" if value is None else str(value)


def matches_search(entity: Any, term: str, fields: Sequence[str]) -> bool:
    """
    Case-insensitive substring match of `term` against any of `fields`.

    Example:
        >>> item = InventoryItem(id="inv-0", name="Tarpaulin", category="Shelter")
        >>> matches_search(item, "shel", ["name", "category"])
        True
    """
    if not term:
        return True
    needle = term.lower()
    return any(needle in _text(getattr(entity, f, "")).lower() for f in fields)


def filter_entities(
    entities: Sequence[T],
    search_term: str = "",
    search_fields: Sequence[str] = (),
    exact: Optional[Dict[str, Optional[str]]] = None,
) -> List[T]:
    """
    Filter entities by a search term and exact-match dropdown values.

    Args:
        entities: Base list held by the view. Not modified.
        search_term: Text typed in the search box.
        search_fields: Entity attributes the search looks at.
        exact: Dropdown filters as {attribute: selected value}. Empty or None
               values are ignored.

    Returns:
        New list with the matching entities, in input order.
    """
    constraints = {k: v for k, v in (exact or {}).items() if v}

    def keep(entity: T) -> bool:
        if not matches_search(entity, search_term, search_fields):
            return False
        return all(
            _text(getattr(entity, attr, "")) == value
            for attr, value in constraints.items()
        )

    return [e for e in entities if keep(e)]


def sort_inventory(items: Sequence[InventoryItem], sort_by: str = "name") -> List[InventoryItem]:
    """
    Sort inventory items for display.

    **Sort keys**:
      - "name": alphabetical, ignoring case.
      - "stock": highest stock first.
      - "status": alphabetical by status label, ignoring case.
      - anything else: input order.

    Returns:
        New sorted list; `items` is not modified.
    """
    if sort_by == "name":
        return sorted(items, key=lambda i: i.name.casefold())
    if sort_by == "stock":
        return sorted(items, key=lambda i: i.stock, reverse=True)
    if sort_by == "status":
        return sorted(items, key=lambda i: _text(i.status).casefold())
    return list(items)


# ---------------------------------------------------------------------------
# Page presets
# ---------------------------------------------------------------------------

def derive_inventory_view(
    items: Sequence[InventoryItem],
    search_term: str = "",
    sort_by: str = "name",
) -> List[InventoryItem]:
    """Inventory page: search name/category/location, then sort."""
    matched = filter_entities(items, search_term, INVENTORY_SEARCH_FIELDS)
    return sort_inventory(matched, sort_by)


def derive_contacts_view(
    contacts: Sequence[Contact],
    search_term: str = "",
    role: Optional[str] = "",
    priority: Optional[str] = "",
) -> List[Contact]:
    """Contacts page: search name/agency/role, exact role and priority dropdowns."""
    return filter_entities(
        contacts,
        search_term,
        CONTACT_SEARCH_FIELDS,
        exact={"role": role, "priority": priority},
    )


def derive_calendar_view(
    entries: Sequence[CalendarEntry],
    selected_date: Optional[str] = None,
) -> List[CalendarEntry]:
    """
    Calendar page: entries whose date contains the selected day.

    `selected_date` is the "YYYY-MM-DD" string of the clicked day. Substring
    matching lets task dates ("2025-02-10 14:00") match their day too.
    None or "" shows every entry.
    """
    if not selected_date:
        return list(entries)
    return [e for e in entries if selected_date in e.date]


# ---------------------------------------------------------------------------
# Summary tiles
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class InventoryStats:
    total: int
    in_stock: int
    low_stock: int
    out_of_stock: int


@dataclass(frozen=True)
class ContactStats:
    total: int
    agencies: int
    phones: int
    emails: int


@dataclass(frozen=True)
class CalendarStats:
    total: int
    events: int
    tasks: int


def inventory_stats(items: Sequence[InventoryItem]) -> InventoryStats:
    """Counts per stock status. Statuses outside the three labels count only in total."""
    def count(status: InventoryStatus) -> int:
        return sum(1 for i in items if i.status == status.value)

    return InventoryStats(
        total=len(items),
        in_stock=count(InventoryStatus.IN_STOCK),
        low_stock=count(InventoryStatus.LOW_STOCK),
        out_of_stock=count(InventoryStatus.OUT_OF_STOCK),
    )


def contact_stats(contacts: Sequence[Contact]) -> ContactStats:
    """Total contacts, distinct agencies, and how many have a phone / an email."""
    return ContactStats(
        total=len(contacts),
        agencies=len({c.agency for c in contacts}),
        phones=sum(1 for c in contacts if c.phone),
        emails=sum(1 for c in contacts if c.email),
    )


def calendar_stats(entries: Sequence[CalendarEntry]) -> CalendarStats:
    events = sum(1 for e in entries if e.kind == EntryKind.EVENT)
    return CalendarStats(
        total=len(entries),
        events=events,
        tasks=len(entries) - events,
    )
