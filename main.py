"""
emergency_dashboard – Main entry point.

Loads the three spreadsheet-backed pages once and prints a summary, to check
that the spreadsheet is reachable and its columns are as expected.
"""

import asyncio
import logging

from emergency_dashboard.config.settings import get_settings
from emergency_dashboard.data.filters import calendar_stats, contact_stats, inventory_stats
from emergency_dashboard.utils.logger import setup_logger
from emergency_dashboard.venues.sheets_data_provider import (
    fetch_calendar_data,
    fetch_contacts_data,
    fetch_inventory_data,
)


async def load_all():
    """Fetch the three pages concurrently."""
    return await asyncio.gather(
        fetch_inventory_data(),
        fetch_calendar_data(),
        fetch_contacts_data(),
    )


def main() -> None:
    """Print a one-line summary per page."""
    logger = setup_logger("emergency_dashboard", get_settings().logging)

    inventory, calendar, contacts = asyncio.run(load_all())

    inv = inventory_stats(inventory)
    cal = calendar_stats(calendar)
    con = contact_stats(contacts)
    logger.info(
        "Inventory: %d items (%d in stock, %d low, %d out)",
        inv.total, inv.in_stock, inv.low_stock, inv.out_of_stock,
    )
    logger.info("Calendar: %d events, %d tasks", cal.events, cal.tasks)
    logger.info("Contacts: %d across %d agencies", con.total, con.agencies)
    logging.shutdown()


if __name__ == "__main__":
    main()
