"""Logging for the ``personal_ledger`` package.

Modules ask for ``get_logger("personal_ledger.<module>")`` and never attach
handlers. The CLI calls :func:`configure_logging` once with the level and
destination resolved by :mod:`personal_ledger.config`.

While the terminal UI runs it owns the screen, so records go to
``PERSONAL_LEDGER_LOG_FILE`` when one is configured and to stderr otherwise.
"""

from __future__ import annotations

import logging
import sys
from typing import IO

ROOT_LOGGER = "personal_ledger"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_CONFIGURED = False


def _build_handler(log_file: str | None, stream: IO[str] | None) -> logging.Handler:
    if log_file:
        return logging.FileHandler(log_file, encoding="utf-8")
    return logging.StreamHandler(stream if stream is not None else sys.stderr)


def configure_logging(
    level: int = logging.WARNING,
    *,
    log_file: str | None = None,
    stream: IO[str] | None = None,
    fmt: str = DEFAULT_FORMAT,
) -> None:
    """Attach the single package handler; later calls are no-ops.

    ``stream`` is only used when no ``log_file`` is given.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    root = logging.getLogger(ROOT_LOGGER)
    for h in [h for h in root.handlers if isinstance(h, logging.NullHandler)]:
        root.removeHandler(h)

    handler = _build_handler(log_file, stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False

    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    # Stay silent until the CLI configures output.
    if not _CONFIGURED and not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger", "ROOT_LOGGER"]
