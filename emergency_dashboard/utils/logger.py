"""
Logging setup for scripts and the dashboard bootstrap.

**Conceptual**: Library modules only ever call logging.getLogger(__name__)
and emit records. Handlers are attached once, at the entrypoint (main.py or
an action script), by setup_logger(). Tests never call it; pytest's caplog
captures records directly.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from emergency_dashboard.config.settings import LoggingSettings

LOG_FILE_NAME = "app.log"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
LOG_FILE_BACKUP_COUNT = 3


def setup_logger(
    name: Optional[str] = None,
    settings: Optional[LoggingSettings] = None,
) -> logging.Logger:
    """
    Configure a logger with console output and an optional rotating log file.

    **Functionally**:
      - Console handler on stdout with a bare "%(message)s" format.
      - If settings.log_dir is set, a RotatingFileHandler writing
        <log_dir>/app.log with timestamps, logger name and level.
      - Calling it again for a logger that already has handlers is a no-op.

    Args:
        name: Logger name. None configures the root logger.
        settings: Logging settings. Defaults to LoggingSettings() (INFO,
                  console only).

    Returns:
        The configured logger.

    Example:
        >>> from emergency_dashboard.config.settings import get_settings
        >>> logger = setup_logger(settings=get_settings().logging)
        >>> logger.info("Dashboard data layer ready")
    """
    settings = settings if settings is not None else LoggingSettings()

    logger = logging.getLogger(name)
    logger.setLevel(settings.level)

    # Prevent adding handlers multiple times if logger is already set up
    if logger.handlers:
        return logger

    console_format = logging.Formatter("%(message)s")
    file_format = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(settings.level)
    console_handler.setFormatter(console_format)
    logger.addHandler(console_handler)

    if settings.log_dir is not None:
        settings.log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            settings.log_dir / LOG_FILE_NAME,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUP_COUNT,
            encoding="utf-8",
        )
        file_handler.setLevel(settings.level)
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger
