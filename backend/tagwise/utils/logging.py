from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tagwise.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Client libraries that log every round trip at INFO
_CHATTY_LOGGERS = ("httpx", "httpcore", "hpack", "openai")


def setup_logging(settings: Settings) -> None:
    """Configure root logging to stdout at the configured level."""
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT, stream=sys.stdout)

    for name in ("uvicorn", "uvicorn.access", "fastapi"):
        logging.getLogger(name).setLevel(logging.INFO)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger("tagwise").debug("Logging configured at %s", logging.getLevelName(level))


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name)
