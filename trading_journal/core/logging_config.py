"""
Process-wide logging setup.

One stdout handler on the root logger, one line format everywhere:
    2024-03-21 10:00:00.123 | INFO    | trading_journal.services.trade_service:create_trade:109 - message
"""
import logging
import sys
from typing import Optional, Union

from trading_journal.core.config import settings

LOG_FORMAT = "%(asctime)s.%(msecs)03d | %(levelname)-7s | %(name)s:%(funcName)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers and the floor applied to each
QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "uvicorn.error": logging.INFO,
    "sqlalchemy.engine": logging.WARNING,
    "aiosqlite": logging.WARNING,
}

UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


def resolve_level(level: Union[int, str, None]) -> int:
    """Accept a level number or name; unknown names fall back to INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level or settings.LOG_LEVEL).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: Optional[Union[int, str]] = None) -> logging.Logger:
    level = resolve_level(level)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    # Re-running (uvicorn --reload, tests) must not stack handlers
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    for name, floor in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(floor)

    # uvicorn installs its own handlers; route its records through ours only
    for name in UVICORN_LOGGERS:
        uvicorn_logger = logging.getLogger(name)
        uvicorn_logger.handlers = [handler]
        uvicorn_logger.propagate = False

    logging.getLogger(__name__).info(f"Logging configured at {logging.getLevelName(level)}")
    return root_logger
