"""
Tests for per-view state: loading flag, cancellation, derived lists.
"""

import asyncio

import pytest

from emergency_dashboard.data.schemas import (
    CalendarEntry,
    Contact,
    ContactPriority,
    EntryKind,
    InventoryItem,
)
from emergency_dashboard.venues.sheets_client import SheetsFetchError
from emergency_dashboard.venues.sheets_data_provider import FetchOutcome
from emergency_dashboard.views.state import (
    CalendarViewState,
    CancellationToken,
    ContactsViewState,
    InventoryViewState,
    ViewState,
)


ITEMS = [
    InventoryItem(id="inv-0", name="Tarpaulin", category="Shelter", stock=5),
    InventoryItem(id="inv-1", name="Rope", category="Rescue", stock=9),
]


def make_loader(result, seen=None, state=None):
    """Coroutine function returning `result`; records the loading flag seen mid-load."""
    async def loader():
        if seen is not None:
            seen.append(state.loading)
        return result
    return loader


def test_load_stores_list_and_clears_loading():
    state = InventoryViewState()
    seen = []

    stored = asyncio.run(state.load(make_loader(ITEMS, seen, state)))

    assert stored is True
    assert seen == [True]
    assert state.loading is False
    assert state.items == ITEMS
    assert state.last_error is None


def test_load_with_cancelled_token_keeps_previous_items():
    state = InventoryViewState(items=[ITEMS[0]])
    token = CancellationToken()

    async def slow_loader():
        token.cancel()  # view closed while the request was in flight
        return ITEMS

    stored = asyncio.run(state.load(slow_loader, token))

    assert stored is False
    assert state.items == [ITEMS[0]]
    assert state.loading is False


def test_load_with_live_token_stores_result():
    state = ViewState()
    token = CancellationToken()

    assert asyncio.run(state.load(make_loader(ITEMS), token)) is True
    assert state.items == ITEMS
    assert token.cancelled is False


def test_load_records_outcome_error():
    state = ContactsViewState(items=[Contact(id="contact-0")])
    error = SheetsFetchError("offline")

    asyncio.run(state.load(make_loader(FetchOutcome(items=[], error=error))))

    assert state.items == []
    assert state.last_error is error


def test_loading_cleared_when_loader_raises():
    state = ViewState()

    async def broken():
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        asyncio.run(state.load(broken))
    assert state.loading is False


def test_inventory_visible_applies_search_and_sort():
    state = InventoryViewState(items=list(ITEMS), sort_by="stock")
    assert [i.id for i in state.visible()] == ["inv-1", "inv-0"]

    state.search_term = "shel"
    assert [i.id for i in state.visible()] == ["inv-0"]
    # Base list untouched
    assert state.items == ITEMS


def test_contacts_visible_uses_dropdowns():
    state = ContactsViewState(items=[
        Contact(id="contact-0", name="Maria", role="Director", priority=ContactPriority.CRITICAL),
        Contact(id="contact-1", name="Jose", role="Chief"),
    ])
    state.priority = "Critical"
    assert [c.id for c in state.visible()] == ["contact-0"]

    state.priority = ""
    state.role = "Chief"
    assert [c.id for c in state.visible()] == ["contact-1"]


def test_calendar_visible_selected_date():
    state = CalendarViewState(items=[
        CalendarEntry(id="event-0", kind=EntryKind.EVENT, date="2025-02-10"),
        CalendarEntry(id="event-1", kind=EntryKind.EVENT, date="2025-02-11"),
    ])
    assert len(state.visible()) == 2

    state.selected_date = "2025-02-11"
    assert [e.id for e in state.visible()] == ["event-1"]
