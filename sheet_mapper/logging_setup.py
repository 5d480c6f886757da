"""
Logging for Sheet Mapper.

Modules log through ``get_logger("<module>")``, which hangs every logger
under the ``sheet_mapper`` namespace.  ``configure_logging`` attaches the
console handler (and optionally a file handler) to that namespace; the
first ``TabularReader`` built in a process triggers it.  Later readers may
pass a different level, which is applied to the existing handlers instead
of stacking new ones.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

NAMESPACE = "sheet_mapper"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-28s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Marks handlers installed here so user handlers are left alone
_OWNED = "_sheet_mapper_handler"


def _owned_handlers(logger: logging.Logger) -> list[logging.Handler]:
    return [h for h in logger.handlers if getattr(h, _OWNED, False)]


def _install(logger: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    setattr(handler, _OWNED, True)
    logger.addHandler(handler)


def configure_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """Attach handlers to the ``sheet_mapper`` logger and return it.

    The console handler is added once.  A ``log_file`` adds a
    ``FileHandler`` unless one for the same path is already attached.
    """
    logger = logging.getLogger(NAMESPACE)
    logger.setLevel(level)
    logger.propagate = False

    owned = _owned_handlers(logger)
    for handler in owned:
        handler.setLevel(level)

    consoles = [h for h in owned if not isinstance(h, logging.FileHandler)]
    if not consoles:
        _install(logger, logging.StreamHandler(sys.stdout), level)

    if log_file:
        files = {h.baseFilename for h in owned if isinstance(h, logging.FileHandler)}
        if os.path.abspath(log_file) not in files:
            _install(logger, logging.FileHandler(log_file, encoding="utf-8"), level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Return ``sheet_mapper.<name>``."""
    return logging.getLogger(f"{NAMESPACE}.{name}")
