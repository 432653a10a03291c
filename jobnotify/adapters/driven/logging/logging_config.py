"""Console logging setup for the notifier."""

import logging
import os

__all__ = ["configure_logs", "LOG_LEVEL_ENV"]

LOG_LEVEL_ENV = "NOTIFY_LOG_LEVEL"
DEFAULT_APP_LEVEL = "DEBUG"


def configure_logs(level: int | str | None = None) -> None:
    """Configure console logging.

    Sets up:
    - Root logger at INFO level.
    - Framework loggers (aiohttp, asyncio) at WARNING level.
    - Application loggers (jobnotify) at ``level``.
    - Format with timestamp, level, module, and line number.

    Args:
        level: Application log level (number or name). When omitted it is
            read from NOTIFY_LOG_LEVEL, DEBUG if unset. Unknown names fall
            back to DEBUG.
    """
    if level is None:
        level = os.getenv(LOG_LEVEL_ENV, DEFAULT_APP_LEVEL)
    if isinstance(level, str):
        level = level.strip().upper()

    log_format = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d - %(message)s"
    date_format = "%d/%m/%y %H:%M:%S"

    formatter = logging.Formatter(log_format, date_format)
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    # Root logger
    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(handler)

    # Suppress verbose framework loggers
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    # Application loggers
    app_logger = logging.getLogger("jobnotify")
    try:
        app_logger.setLevel(level)
    except ValueError:
        app_logger.setLevel(DEFAULT_APP_LEVEL)
        app_logger.warning(f"Unknown log level '{level}', using {DEFAULT_APP_LEVEL}")
