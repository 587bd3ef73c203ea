"""
Configuration settings for the dashboard data layer.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). All settings are validated
at construction, so a bad timeout or an empty spreadsheet id fails at startup
rather than on the first page load.

**What is configurable?**
  - Which spreadsheet is read and which sheet backs each page.
  - Where the spreadsheet host lives and how long to wait for it.
  - Log level and (optionally) a directory for rotating log files.

Defaults match the production dashboard, so an empty environment works.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (dev/local environments)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


DEFAULT_SPREADSHEET_ID = "11uutE9iZ2BjddbFkeX9cQVFOouphdvyP000vh1lGOo4"
DEFAULT_SHEETS_BASE_URL = "https://docs.google.com/spreadsheets/d"


@dataclass(frozen=True)
class SheetsSettings:
    """
    Configuration for the public spreadsheet data source.

    **Conceptual**: Every spreadsheet-backed page reads one named sheet
    (tab) of a single publicly shared spreadsheet. The sheet is exported as
    CSV by the host, so no credentials are involved, only an id, a base URL
    and a sheet name per page.

    Attributes:
        spreadsheet_id: Id of the shared spreadsheet (the long token in its URL).
        base_url: Spreadsheet host prefix, without trailing slash.
                  Defaults to "https://docs.google.com/spreadsheets/d".
        timeout_seconds: HTTP request timeout in seconds (default 30).
        inventory_sheet: Sheet backing the supply inventory page ("Sheet1").
        calendar_sheet: Sheet backing the calendar page ("Sheet2").
        contacts_sheet: Sheet backing the contacts page ("Sheet3").
    """
    spreadsheet_id: str = DEFAULT_SPREADSHEET_ID
    base_url: str = DEFAULT_SHEETS_BASE_URL
    timeout_seconds: int = 30
    inventory_sheet: str = "Sheet1"
    calendar_sheet: str = "Sheet2"
    contacts_sheet: str = "Sheet3"

    def __post_init__(self):
        """Validate settings after initialization."""
        if not self.spreadsheet_id:
            raise ValueError(
                "SHEETS_SPREADSHEET_ID is empty. "
                "Unset it to use the default spreadsheet or provide a valid id."
            )
        if not self.base_url:
            raise ValueError(
                "SHEETS_BASE_URL is empty. "
                "Unset it to use the default host or provide a valid URL."
            )
        if self.timeout_seconds <= 0:
            raise ValueError(
                f"timeout_seconds must be positive, got: {self.timeout_seconds}"
            )
        for field_name in ("inventory_sheet", "calendar_sheet", "contacts_sheet"):
            if not getattr(self, field_name):
                raise ValueError(f"{field_name} cannot be empty")

    @classmethod
    def from_env(cls) -> "SheetsSettings":
        """
        Load spreadsheet settings from environment variables.

        **Environment variables** (all optional):
          - SHEETS_SPREADSHEET_ID: Spreadsheet id.
          - SHEETS_BASE_URL: Spreadsheet host prefix.
          - SHEETS_TIMEOUT_SECONDS: HTTP timeout in seconds (default 30).
          - SHEETS_INVENTORY_SHEET / SHEETS_CALENDAR_SHEET / SHEETS_CONTACTS_SHEET:
            Sheet names per page (default Sheet1 / Sheet2 / Sheet3).

        Returns:
            SheetsSettings object with values loaded from environment.

        Raises:
            ValueError: If SHEETS_TIMEOUT_SECONDS is not an integer, or any
                        value fails validation.

        Usage example:
            >>> # In .env file:
            >>> # SHEETS_TIMEOUT_SECONDS=10
            >>>
            >>> settings = SheetsSettings.from_env()
            >>> print(settings.timeout_seconds)  # 10
        """
        timeout_str = os.getenv("SHEETS_TIMEOUT_SECONDS", "30")

        try:
            timeout_seconds = int(timeout_str)
        except ValueError:
            raise ValueError(
                f"SHEETS_TIMEOUT_SECONDS must be an integer, got: {timeout_str}"
            )

        return cls(
            spreadsheet_id=os.getenv("SHEETS_SPREADSHEET_ID", DEFAULT_SPREADSHEET_ID),
            base_url=os.getenv("SHEETS_BASE_URL", DEFAULT_SHEETS_BASE_URL).rstrip("/"),
            timeout_seconds=timeout_seconds,
            inventory_sheet=os.getenv("SHEETS_INVENTORY_SHEET", "Sheet1"),
            calendar_sheet=os.getenv("SHEETS_CALENDAR_SHEET", "Sheet2"),
            contacts_sheet=os.getenv("SHEETS_CONTACTS_SHEET", "Sheet3"),
        )


@dataclass(frozen=True)
class LoggingSettings:
    """
    Configuration for application logging.

    Attributes:
        level: Numeric logging level (logging.INFO by default).
        log_dir: Directory for the rotating log file. None means console only.
    """
    level: int = logging.INFO
    log_dir: Optional[Path] = None

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        """
        Load logging settings from environment variables.

        **Environment variables** (all optional):
          - LOG_LEVEL: Level name such as DEBUG, INFO, WARNING (default INFO).
          - LOG_DIR: Directory for app.log. Unset disables file logging.

        Raises:
            ValueError: If LOG_LEVEL is not a known level name.
        """
        level_name = os.getenv("LOG_LEVEL", "INFO").strip().upper()
        level = logging.getLevelName(level_name)
        if not isinstance(level, int):
            raise ValueError(
                f"LOG_LEVEL must be a logging level name (DEBUG, INFO, ...), got: {level_name}"
            )

        log_dir_str = os.getenv("LOG_DIR")
        log_dir = Path(log_dir_str) if log_dir_str else None

        return cls(level=level, log_dir=log_dir)


@dataclass(frozen=True)
class Settings:
    """
    Global settings for the dashboard data layer.

    **Conceptual**: Top-level object aggregating subsystem settings. It is the
    single entrypoint for configuration; tests build their own Settings
    instead of touching the environment.

    Attributes:
        sheets: Spreadsheet data source settings.
        logging: Logging settings.
    """
    sheets: SheetsSettings
    logging: LoggingSettings

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Load global settings from environment variables.

        Raises:
            ValueError: If any subsystem setting is invalid.
        """
        return cls(
            sheets=SheetsSettings.from_env(),
            logging=LoggingSettings.from_env(),
        )


# Lazily loaded singleton. Tests can inject Settings objects instead.
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton.

    **Conceptual**: Settings are loaded from the environment on first call,
    then cached for reuse. Use reset_settings() in tests to force a reload.

    Returns:
        Global Settings singleton.

    Raises:
        ValueError: If the environment holds invalid values.

    Usage example:
        >>> from emergency_dashboard.config.settings import get_settings
        >>> settings = get_settings()
        >>> print(settings.sheets.inventory_sheet)  # "Sheet1"
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    **Testing pattern**:
      ```python
      def test_something(monkeypatch):
          reset_settings()
          monkeypatch.setenv("SHEETS_TIMEOUT_SECONDS", "5")
          assert get_settings().sheets.timeout_seconds == 5
      ```
    """
    global _default_settings
    _default_settings = None
