"""
Logging setup for applications embedding und_core.

The library itself only emits records through ``und_core.*`` loggers; call
:func:`setup_logging` (or :func:`setup_logging_from_config`) from the host
application to actually see them.

Two output formats:
  - **human** – single-line text, warnings and errors coloured on a terminal
  - **json**  – newline-delimited JSON for log aggregators

Usage:
    from und_core.logging_config import setup_logging
    setup_logging(level="DEBUG", fmt="json", log_file="und.log")
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from und_core.config import LoggingConfig

PACKAGE_LOGGER = "und_core"


# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class _JSONFormatter(logging.Formatter):
    """One JSON object per record, including any ``extra=`` fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                log_obj[key] = value
        if record.exc_info and record.exc_info[1]:
            log_obj["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_obj, default=str)


class _HumanFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL logger: message``; warnings and errors coloured on a TTY."""

    _LEVEL_COLOUR = {
        logging.WARNING: "33",
        logging.ERROR: "31",
        logging.CRITICAL: "1;31",
    }

    def __init__(self, colour: bool = False):
        super().__init__("%(asctime)s %(levelname)-7s %(name)s: %(message)s", datefmt="%H:%M:%S")
        self.colour = colour

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        code = self._LEVEL_COLOUR.get(record.levelno)
        if self.colour and code:
            return f"\033[{code}m{line}\033[0m"
        return line


def setup_logging(
    level: str = "INFO",
    fmt: str = "human",
    log_file: Optional[str] = None,
    logger_name: str = PACKAGE_LOGGER,
) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to *logger_name*.

    Parameters
    ----------
    level : str
        One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
    fmt : str
        ``"human"`` for single-line text output, ``"json"`` for
        newline-delimited JSON.
    log_file : str, optional
        If provided, logs are *also* written to this file (always JSON).
    logger_name : str
        Logger to configure; defaults to the ``und_core`` package logger.
        Pass ``""`` to configure the root logger.
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid duplicate handlers when called twice
    logger.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    if fmt == "json":
        console.setFormatter(_JSONFormatter())
    else:
        console.setFormatter(_HumanFormatter(colour=sys.stderr.isatty()))
    logger.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = logging.FileHandler(str(path))
        fh.setFormatter(_JSONFormatter())
        logger.addHandler(fh)

    return logger


def setup_logging_from_config(cfg: LoggingConfig) -> logging.Logger:
    """Apply a :class:`~und_core.config.LoggingConfig` section."""
    return setup_logging(level=cfg.level, fmt=cfg.format, log_file=cfg.file)
