"""
Per-view local state for the spreadsheet-backed pages.

**Conceptual**: Each page owns a ViewState: the full list it fetched, a
loading flag, and the current search/filter inputs. The displayed list is
always derived from those (see data.filters); the stored list is only
replaced by a completed load.

**Lifetime**: A page starts one load when it mounts and may be left before
the load completes. The page cancels its CancellationToken on unmount;
ViewState.load() checks the token after the fetch returns and drops the
result instead of writing into state nobody displays. The fetch itself is
not interrupted - the HTTP request runs to completion in its worker thread.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar, Union

from emergency_dashboard.data.filters import (
    derive_calendar_view,
    derive_contacts_view,
    derive_inventory_view,
)
from emergency_dashboard.data.schemas import CalendarEntry, Contact, InventoryItem
from emergency_dashboard.venues.sheets_data_provider import FetchOutcome

logger = logging.getLogger(__name__)

T = TypeVar("T")

# A load returns either a plain list (fetch_*_data) or a FetchOutcome (load_*_outcome)
Loader = Callable[[], Awaitable[Union[List[T], FetchOutcome[T]]]]


class CancellationToken:
    """
    Flag shared between a page and its in-flight load.

    Example:
        >>> token = CancellationToken()
        >>> token.cancel()   # page unmounted
        >>> token.cancelled
        True
    """

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self):
        self._cancelled = True


@dataclass
class ViewState(Generic[T]):
    """
    Local state of one page.

    Attributes:
        items: Full fetched list (the base list filters derive from).
        loading: True while a load is in flight.
        last_error: Error reported by the last completed load, when the
                    loader returns a FetchOutcome. Always None for plain lists.
    """
    items: List[T] = field(default_factory=list)
    loading: bool = False
    last_error: Optional[Exception] = None

    async def load(self, loader: Loader, token: Optional[CancellationToken] = None) -> bool:
        """
        Run `loader` and store its result unless `token` was cancelled meanwhile.

        Args:
            loader: Zero-argument coroutine function, e.g. fetch_inventory_data.
            token: Cancellation token owned by the page. None means the load
                   can't be cancelled.

        Returns:
            True if the result was stored, False if it was discarded.
        """
        self.loading = True
        try:
            result = await loader()
        finally:
            self.loading = False

        if token is not None and token.cancelled:
            logger.debug("Discarding load result: view was closed")
            return False

        if isinstance(result, FetchOutcome):
            self.items = result.items
            self.last_error = result.error
        else:
            self.items = list(result)
            self.last_error = None
        return True


@dataclass
class InventoryViewState(ViewState[InventoryItem]):
    """Supply inventory page: search box and sort selector."""
    search_term: str = ""
    sort_by: str = "name"

    def visible(self) -> List[InventoryItem]:
        return derive_inventory_view(self.items, self.search_term, self.sort_by)


@dataclass
class ContactsViewState(ViewState[Contact]):
    """Contacts page: search box plus role and priority dropdowns."""
    search_term: str = ""
    role: str = ""
    priority: str = ""

    def visible(self) -> List[Contact]:
        return derive_contacts_view(self.items, self.search_term, self.role, self.priority)


@dataclass
class CalendarViewState(ViewState[CalendarEntry]):
    """Calendar page: optional selected day."""
    selected_date: Optional[str] = None

    def visible(self) -> List[CalendarEntry]:
        return derive_calendar_view(self.items, self.selected_date)
