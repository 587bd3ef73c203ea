"""
CSV export for dashboard records.

**Conceptual**: The inventory page offers a Download action that saves what
the user is looking at (after search and sort) as a CSV file. Records are
converted to a pandas DataFrame with human-readable column headers that match
the source sheet, so an exported file can be pasted back into the sheet.

**Functionally**:
  - Column order is fixed (INVENTORY_EXPORT_COLUMNS), whatever order the
    dataclass fields are in.
  - Row order is the order passed in; export does not re-sort.
  - Parent directories are created as needed.
"""

from dataclasses import asdict
from pathlib import Path
from typing import Sequence, Union

import pandas as pd

from emergency_dashboard.data.schemas import INVENTORY_COLUMNS, InventoryItem

# Export column order: id first, then the sheet's own columns.
INVENTORY_EXPORT_COLUMNS = ["ID"] + list(INVENTORY_COLUMNS.values())


def inventory_to_frame(items: Sequence[InventoryItem]) -> pd.DataFrame:
    """
    Convert inventory items to a DataFrame with sheet-style headers.

    Returns:
        DataFrame with columns INVENTORY_EXPORT_COLUMNS (empty but with
        columns when `items` is empty).
    """
    rename_map = {"id": "ID", **INVENTORY_COLUMNS}
    if not items:
        return pd.DataFrame(columns=INVENTORY_EXPORT_COLUMNS)

    df = pd.DataFrame([asdict(item) for item in items])
    df = df.rename(columns=rename_map)
    df["Current-Stock"] = df["Current-Stock"].astype(int)
    return df[INVENTORY_EXPORT_COLUMNS]


def write_inventory_csv(items: Sequence[InventoryItem], path: Union[str, Path]) -> Path:
    """
    Write inventory items to a CSV file.

    Args:
        items: Items in display order.
        path: Destination file.

    Returns:
        The path written, as a Path.

    Raises:
        OSError: If the file cannot be written.

    Example:
        >>> write_inventory_csv(derive_inventory_view(items, "rope"), "exports/inventory.csv")
    """
    path = Path(path)
    context = str(path)

    df = inventory_to_frame(items)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        df.to_csv(path, index=False)
    except Exception as e:
        raise OSError(f"{context}: Failed to write CSV. Error: {e}") from e

    return path
