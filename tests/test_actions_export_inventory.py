"""
Tests for the inventory export action.

**Purpose**: Verify argument parsing, the filter/sort/write step, and exit
codes, without network access (the provider is patched).
"""

import sys
from pathlib import Path
from unittest.mock import patch

import pandas as pd
import pytest

# Add project root to path so we can import actions module
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from actions import export_inventory as action
from emergency_dashboard.config.settings import LoggingSettings, Settings, SheetsSettings
from emergency_dashboard.data.schemas import InventoryItem
from emergency_dashboard.venues.sheets_client import SheetsFetchError
from emergency_dashboard.venues.sheets_data_provider import FetchOutcome


ITEMS = [
    InventoryItem(id="inv-0", name="Tarpaulin", category="Shelter", stock=5),
    InventoryItem(id="inv-1", name="Rope", category="Rescue", stock=9),
    InventoryItem(id="inv-2", name="Rescue Boat", category="Water", stock=1),
]


def test_parse_args_defaults():
    args = action.parse_args([])
    assert args.search == ""
    assert args.sort == "name"
    assert args.output == "exports/inventory.csv"


def test_parse_args_rejects_unknown_sort():
    with pytest.raises(SystemExit):
        action.parse_args(["--sort", "colour"])


def test_export_inventory_filters_and_sorts(tmp_path):
    output = tmp_path / "inventory.csv"

    count = action.export_inventory(ITEMS, output, search="rescue", sort_by="stock")

    assert count == 2
    df = pd.read_csv(output)
    assert df["ID"].tolist() == ["inv-1", "inv-2"]


@pytest.fixture
def settings():
    return Settings(sheets=SheetsSettings(), logging=LoggingSettings())


def run_main(argv, settings, outcome):
    with patch.object(action, "get_settings", return_value=settings), \
         patch.object(action, "setup_logger"), \
         patch.object(action, "SheetsDataProvider") as provider_cls:
        provider = provider_cls.return_value.__enter__.return_value
        provider.load_inventory.return_value = outcome
        with pytest.raises(SystemExit) as exc_info:
            action.main(argv)
    return exc_info.value.code


def test_main_writes_file(tmp_path, settings):
    output = tmp_path / "out.csv"

    code = run_main(["--output", str(output)], settings, FetchOutcome(items=ITEMS))

    assert code == 0
    assert pd.read_csv(output)["Item-Name"].tolist() == ["Rescue Boat", "Rope", "Tarpaulin"]


def test_main_exits_2_when_sheet_fails(tmp_path, settings):
    output = tmp_path / "out.csv"

    code = run_main(
        ["--output", str(output)],
        settings,
        FetchOutcome(items=[], error=SheetsFetchError("offline")),
    )

    assert code == 2
    assert not output.exists()


def test_main_exits_1_on_bad_configuration():
    with patch.object(action, "get_settings", side_effect=ValueError("bad timeout")):
        with pytest.raises(SystemExit) as exc_info:
            action.main([])
    assert exc_info.value.code == 1
