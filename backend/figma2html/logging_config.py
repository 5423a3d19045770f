"""Log handlers for the figma2html service.

Two named loggers are configured at app start:
    api         one line per incoming HTTP request (api.log)
    figma2html  parent of every figma2html.* module logger (figma2html.log)

Both write to a file under LOG_DIR and echo to the console.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path

LOG_DIR = Path(os.getenv("LOG_DIR", str(Path(__file__).parent.parent / "logs")))
LOG_DIR.mkdir(exist_ok=True)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

_FILE_FORMAT = "%(asctime)s [%(name)s] [%(levelname)s] %(message)s"
_CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"

_configured: set[str] = set()


def setup_logger(name: str, filename: str) -> logging.Logger:
    """Attach a file handler (LOG_DIR/filename) and a console handler to ``name``.

    Idempotent: repeated calls return the already configured logger.
    Records stop at this logger, so a parent configured here is not
    duplicated through the root logger.
    """
    logger = logging.getLogger(name)
    if name in _configured:
        return logger

    logger.setLevel(LOG_LEVEL)
    logger.propagate = False

    for handler, fmt in (
        (logging.FileHandler(LOG_DIR / filename, encoding="utf-8"), _FILE_FORMAT),
        (logging.StreamHandler(), _CONSOLE_FORMAT),
    ):
        handler.setLevel(LOG_LEVEL)
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)

    _configured.add(name)
    return logger


def get_api_logger() -> logging.Logger:
    return setup_logger("api", "api.log")


def get_service_logger() -> logging.Logger:
    """Parent logger for extraction, Figma clients, LLM and storage."""
    return setup_logger("figma2html", "figma2html.log")
