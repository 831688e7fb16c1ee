from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger import jsonlogger

LOG_FORMAT_ENV = "DEX_BROWSER_LOG_FORMAT"

# Callbacks log structured context through `extra=`; the JSON formatter keeps it
JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(message)s"
PLAIN_FIELDS = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _formatter_for(mode: str) -> logging.Formatter:
    if mode == "plain":
        return logging.Formatter(PLAIN_FIELDS)
    return jsonlogger.JsonFormatter(JSON_FIELDS)


def configure_logging(
        level: int = logging.INFO,
        force_format: Optional[str] = None,
) -> None:
    """
    Install a single stderr handler on the root logger.

    `force_format` ("json" or "plain") wins over DEX_BROWSER_LOG_FORMAT; with
    neither set the output is JSON lines. Calling this again replaces the
    handler, so app reloads do not double every record.
    """
    mode = (force_format or os.getenv(LOG_FORMAT_ENV, "json")).lower()

    handler = logging.StreamHandler()
    handler.setFormatter(_formatter_for(mode))

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)
