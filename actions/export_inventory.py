#!/usr/bin/env python3
"""
Export the supply inventory sheet to a CSV file.

**Conceptual**: Script counterpart of the inventory page's Download button.
It loads the inventory sheet, applies the same search and sort the page
offers, and writes the result with data.io.write_inventory_csv().

**Usage**:
    # Whole inventory, sorted by name
    python actions/export_inventory.py

    # Only items matching "rope", highest stock first
    python actions/export_inventory.py --search rope --sort stock

    # Custom destination
    python actions/export_inventory.py --output exports/inventory_2025-02.csv

**Exit codes**:
  - 0: File written
  - 1: Configuration error (invalid environment values)
  - 2: The sheet could not be loaded or the file could not be written
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

# Ensure project root is on path for imports
repo_root = Path(__file__).parent.parent
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

from emergency_dashboard.config.settings import get_settings
from emergency_dashboard.data.filters import SORT_KEYS, derive_inventory_view
from emergency_dashboard.data.io import write_inventory_csv
from emergency_dashboard.data.schemas import InventoryItem
from emergency_dashboard.utils.logger import setup_logger
from emergency_dashboard.venues.sheets_data_provider import SheetsDataProvider

logger = logging.getLogger("emergency_dashboard.actions.export_inventory")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).

    Returns:
        Namespace with attributes: search (str), sort (str), output (str).
    """
    parser = argparse.ArgumentParser(
        description="Export the supply inventory sheet to CSV",
    )

    parser.add_argument(
        "--search",
        type=str,
        default="",
        help="Only export items whose name, category or location contains this text",
    )

    parser.add_argument(
        "--sort",
        choices=SORT_KEYS,
        default="name",
        help="Sort order: name (A-Z), stock (highest first) or status (default: name)",
    )

    parser.add_argument(
        "--output",
        type=str,
        default="exports/inventory.csv",
        help="Destination CSV file (default: exports/inventory.csv)",
    )

    return parser.parse_args(argv)


def export_inventory(
    items: List[InventoryItem],
    output: Path,
    search: str = "",
    sort_by: str = "name",
) -> int:
    """
    Filter, sort and write inventory items.

    Returns:
        Number of rows written.
    """
    rows = derive_inventory_view(items, search, sort_by)
    write_inventory_csv(rows, output)
    return len(rows)


def main(argv: Optional[Sequence[str]] = None):
    """
    Main entry point for the script.

    Steps:
      1. Load settings and set up logging.
      2. Load the inventory sheet (errors are reported, not swallowed).
      3. Filter/sort and write the CSV.
    """
    args = parse_args(argv)

    try:
        settings = get_settings()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    setup_logger("emergency_dashboard", settings.logging)

    with SheetsDataProvider(settings.sheets) as provider:
        outcome = provider.load_inventory()

    if outcome.failed:
        print(f"Error: could not load the inventory sheet: {outcome.error}", file=sys.stderr)
        sys.exit(2)

    output = Path(args.output)
    try:
        count = export_inventory(outcome.items, output, args.search, args.sort)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)

    logger.info("Wrote %d of %d items to %s", count, len(outcome.items), output)
    sys.exit(0)


if __name__ == "__main__":
    main()
