"""Environment-driven settings.

Values are read from the process environment after the CLI has loaded a local
``.env`` (``python-dotenv``, without overriding variables that are already
set). Nothing here is cached; call :func:`load_settings` once at startup and
pass the result down.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

DATE_FORMAT = "%d/%m/%y"
"""Day/month/two-digit-year layout used by forms, the table and ``LastSaveDate``."""

DEFAULT_LOG_LEVEL = logging.WARNING


@dataclass(frozen=True, slots=True)
class LedgerSettings:
    log_level: int = DEFAULT_LOG_LEVEL
    log_file: str | None = None
    default_file: str = ""


def _env_str(name: str) -> str | None:
    val = os.getenv(name)
    if val is None or not val.strip():
        return None
    return val.strip()


def parse_log_level(raw: int | str | None) -> int:
    """Map ``20``, ``"20"`` or ``"info"`` to a level; unknown names give the default."""

    if isinstance(raw, int):
        return raw
    if raw is None:
        return DEFAULT_LOG_LEVEL
    name = raw.strip().upper()
    if name.isdigit():
        return int(name)
    level = logging.getLevelNamesMapping().get(name)
    return level if level is not None else DEFAULT_LOG_LEVEL


def load_settings() -> LedgerSettings:
    """Build :class:`LedgerSettings` from ``PERSONAL_LEDGER_*`` variables."""

    return LedgerSettings(
        log_level=parse_log_level(_env_str("PERSONAL_LEDGER_LOG_LEVEL")),
        log_file=_env_str("PERSONAL_LEDGER_LOG_FILE"),
        default_file=_env_str("PERSONAL_LEDGER_DEFAULT_FILE") or "",
    )


__all__ = ["DATE_FORMAT", "LedgerSettings", "load_settings", "parse_log_level"]
