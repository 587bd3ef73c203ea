"""
Spreadsheet data provider for the dashboard pages.

**Conceptual**: This module bridges SheetsClient (which returns generic
RawRecord dicts) and the pages (which expect typed InventoryItem,
CalendarEntry and Contact lists). It is also the error boundary: nothing
raised while fetching or parsing a sheet escapes to a page.

**Layered architecture**:
  1. SheetsClient: HTTP layer - export URL, GET, CSV -> RawRecord
  2. SheetsDataProvider (this file): fetch + map + error boundary
  3. views.state.ViewState: page state, filtering, display

**Error boundary**: Any exception during fetch or mapping is logged at ERROR
level and turned into an empty list. A page therefore cannot tell "the fetch
failed" from "the sheet has no rows" by looking at the list alone. load()
additionally returns the captured error in a FetchOutcome for callers that
want to tell the two apart; the public fetch functions return only the items.

**Async**: Pages await fetch_inventory_data() / fetch_calendar_data() /
fetch_contacts_data(). The blocking HTTP call runs in a worker thread
(asyncio.to_thread) so the event loop is never blocked.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, Iterable, List, Optional, TypeVar

from emergency_dashboard.config.settings import SheetsSettings, get_settings
from emergency_dashboard.data.mappers import (
    map_calendar_records,
    map_contact_records,
    map_inventory_records,
)
from emergency_dashboard.data.schemas import (
    CALENDAR_COLUMNS,
    CONTACT_COLUMNS,
    INVENTORY_COLUMNS,
    CalendarEntry,
    Contact,
    InventoryItem,
    RawRecord,
    check_columns,
)
from emergency_dashboard.venues.sheets_client import SheetsClient

logger = logging.getLogger(__name__)

T = TypeVar("T")

@dataclass
class FetchOutcome(Generic[T]):
    """
    Result of one guarded sheet load.

    Attributes:
        items: Mapped records; [] on failure.
        error: The exception that was caught, or None on success.
    """
    items: List[T] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

class SheetsDataProvider:
    """
    Fetches dashboard sheets and maps them to typed records.

    **Data pipeline** (per page):
      1. SheetsClient.fetch_records(sheet) -> List[RawRecord]
      2. check_columns() -> WARNING log if expected columns are missing
      3. mapper(records) -> typed records
      4. Any exception in 1-3 -> ERROR log, empty result

    **Example usage**:
        >>> provider = SheetsDataProvider(get_settings().sheets)
        >>> items = asyncio.run(provider.fetch_inventory())
        >>> provider.close()
    """

    def __init__(self, settings: SheetsSettings, client: Optional[SheetsClient] = None):
        """
        Initialize the provider.

        Args:
            settings: Spreadsheet configuration (sheet names per page).
            client: Optional pre-configured client (for testing/DI).
                    If None, creates a new SheetsClient from settings.
        """
        self.settings = settings
        self.client = client if client is not None else SheetsClient(settings)

    def load(
        self,
        sheet_name: str,
        mapper: Callable[[List[RawRecord]], List[T]],
        expected_columns: Iterable[str] = (),
    ) -> FetchOutcome[T]:
        """
        Fetch one sheet and map it, capturing any failure.

        Args:
            sheet_name: Sheet to read.
            mapper: Pure function from records to typed records.
            expected_columns: Columns the mapper reads (for the schema report).

        Returns:
            FetchOutcome with the mapped items, or [] plus the caught error.
            Never raises.
        """
        try:
            records = self.client.fetch_records(sheet_name)

            report = check_columns(records, expected_columns, sheet_name)
            if not report.ok:
                logger.warning(
                    "Sheet %r is missing columns %s; affected fields use defaults",
                    sheet_name, report.missing,
                )
            if report.unknown:
                logger.debug("Sheet %r has unused columns %s", sheet_name, report.unknown)

            items = mapper(records)
        except Exception as e:
            logger.error("Error fetching sheet %r: %s", sheet_name, e, exc_info=True)
            return FetchOutcome(items=[], error=e)

        logger.info("Loaded %d rows from sheet %r", len(items), sheet_name)
        return FetchOutcome(items=items)

    def load_inventory(self) -> FetchOutcome[InventoryItem]:
        return self.load(
            self.settings.inventory_sheet,
            map_inventory_records,
            INVENTORY_COLUMNS.values(),
        )

    def load_calendar(self) -> FetchOutcome[CalendarEntry]:
        return self.load(
            self.settings.calendar_sheet,
            map_calendar_records,
            CALENDAR_COLUMNS.values(),
        )

    def load_contacts(self) -> FetchOutcome[Contact]:
        return self.load(
            self.settings.contacts_sheet,
            map_contact_records,
            CONTACT_COLUMNS.values(),
        )

    async def fetch_inventory(self) -> List[InventoryItem]:
        """Inventory items, [] on any failure."""
        return (await asyncio.to_thread(self.load_inventory)).items

    async def fetch_calendar(self) -> List[CalendarEntry]:
        """Events then tasks, [] on any failure."""
        return (await asyncio.to_thread(self.load_calendar)).items

    async def fetch_contacts(self) -> List[Contact]:
        """Contacts, [] on any failure."""
        return (await asyncio.to_thread(self.load_contacts)).items

    def close(self):
        """Close the underlying HTTP client."""
        self.client.close()

    def __enter__(self):
        """Enable context manager support (with statement)."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Clean up client when exiting context manager."""
        self.close()
        return False  # Don't suppress exceptions

# ---------------------------------------------------------------------------
# Page-facing functions
# ---------------------------------------------------------------------------

async def _load_with_default_settings(
    loader: Callable[[SheetsDataProvider], FetchOutcome[T]],
) -> FetchOutcome[T]:
    """Run one provider load with the global settings, in a worker thread."""
    try:
        provider = SheetsDataProvider(get_settings().sheets)
    except Exception as e:
        # Bad environment configuration must not break a page either
        logger.error("Could not configure the sheets provider: %s", e, exc_info=True)
        return FetchOutcome(items=[], error=e)

    with provider:
        return await asyncio.to_thread(loader, provider)

async def load_inventory_outcome() -> FetchOutcome[InventoryItem]:
    """Inventory load that also reports the caught error, if any."""
    return await _load_with_default_settings(SheetsDataProvider.load_inventory)

async def load_calendar_outcome() -> FetchOutcome[CalendarEntry]:
    """Calendar load that also reports the caught error, if any."""
    return await _load_with_default_settings(SheetsDataProvider.load_calendar)

async def load_contacts_outcome() -> FetchOutcome[Contact]:
    """Contacts load that also reports the caught error, if any."""
    return await _load_with_default_settings(SheetsDataProvider.load_contacts)

async def fetch_inventory_data() -> List[InventoryItem]:
    """
    Fetch the supply inventory sheet.

    Returns:
        InventoryItem list; [] if the sheet is empty or could not be loaded.
    """
    return (await load_inventory_outcome()).items

async def fetch_calendar_data() -> List[CalendarEntry]:
    """
    Fetch the calendar sheet.

    Returns:
        Events followed by tasks; [] if the sheet is empty or could not be loaded.
    """
    return (await load_calendar_outcome()).items

async def fetch_contacts_data() -> List[Contact]:
    """
    Fetch the contact list sheet.

    Returns:
        Contact list; [] if the sheet is empty or could not be loaded.
    """
    return (await load_contacts_outcome()).items
