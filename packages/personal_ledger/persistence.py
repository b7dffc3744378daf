"""JSON persistence for the ledger.

File layout::

    {
      "Operations": [
        {"Date": "2024-03-15T00:00:00Z", "Description": "Rent", "Debit": 0, "Credit": 1200.5}
      ],
      "LastSaveDate": "15/03/24"
    }

Writes are atomic: the document goes to a ``.tmp`` sibling first and is then
``os.replace``d into place with ``0644`` permissions. A failed load never
returns a partial ledger; callers keep their current one.
"""

from __future__ import annotations

import contextlib
import json
import os
from decimal import Decimal
from os import PathLike
from pathlib import Path

import pydantic

from .logging_setup import get_logger
from .models import LedgerFile, OperationRecord
from .store import Ledger

_logger = get_logger("personal_ledger.persistence")

FILE_MODE = 0o644


class LedgerPersistenceError(Exception):
    """Base class for ledger file I/O failures."""


class LedgerFileNotFoundError(LedgerPersistenceError):
    """The requested ledger file does not exist."""


class LedgerReadError(LedgerPersistenceError):
    """The ledger file exists but could not be read."""


class LedgerWriteError(LedgerPersistenceError):
    """The ledger could not be encoded or written."""


class LedgerFormatError(LedgerPersistenceError):
    """The ledger file is not valid JSON or does not match the schema."""


def _number_text(d: Decimal) -> str:
    """Exact JSON number for an amount: ``1200.5``, ``0``, never an exponent."""

    s = format(d, "f")
    if "." in s:
        s = s.rstrip("0").rstrip(".")
    return s


def _encode(value: object, depth: int = 0) -> str:
    # Same layout as ``json.dumps(indent=2)``, but Decimals are written
    # digit for digit instead of going through float.
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise ValueError(f"cannot encode amount {value}")
        return _number_text(value)
    pad = "  " * (depth + 1)
    close = "  " * depth
    if isinstance(value, dict):
        if not value:
            return "{}"
        members = [
            f"{pad}{json.dumps(k, ensure_ascii=False)}: {_encode(v, depth + 1)}"
            for k, v in value.items()
        ]
        return "{\n" + ",\n".join(members) + "\n" + close + "}"
    if isinstance(value, list):
        if not value:
            return "[]"
        items = [pad + _encode(v, depth + 1) for v in value]
        return "[\n" + ",\n".join(items) + "\n" + close + "]"
    return json.dumps(value, ensure_ascii=False)


def dumps_ledger(ledger: Ledger) -> str:
    """Encode ``ledger`` as the pretty-printed (2-space) JSON document."""

    doc = LedgerFile(
        operations=[OperationRecord.from_operation(op) for op in ledger.all()],
        last_save_date=ledger.last_save_date,
    )
    return _encode(doc.model_dump(by_alias=True))


def loads_ledger(text: str) -> Ledger:
    """Decode a JSON document into a new :class:`Ledger`.

    Raises :class:`LedgerFormatError` on malformed JSON, schema mismatches, or
    records that break the operation invariants.
    """

    try:
        raw = json.loads(text, parse_float=Decimal, parse_int=Decimal)
    except json.JSONDecodeError as e:
        raise LedgerFormatError(f"error decoding data: {e}") from e
    if not isinstance(raw, dict):
        raise LedgerFormatError("error decoding data: top-level value must be an object")
    try:
        doc = LedgerFile.model_validate(raw)
        ops = [rec.to_operation() for rec in doc.operations]
    except (pydantic.ValidationError, ValueError) as e:
        raise LedgerFormatError(f"error decoding data: {e}") from e
    return Ledger(ops, last_save_date=doc.last_save_date)


def save_ledger(ledger: Ledger, path: str | PathLike[str]) -> None:
    """Write ``ledger`` to ``path`` atomically.

    Raises :class:`LedgerWriteError` on any encoding or filesystem failure.
    """

    p = Path(path)
    tmp = p.with_name(p.name + ".tmp")
    try:
        data = dumps_ledger(ledger)
    except (TypeError, ValueError) as e:
        raise LedgerWriteError(f"error encoding data: {e}") from e

    try:
        tmp.write_text(data, encoding="utf-8")
        os.chmod(tmp, FILE_MODE)
        os.replace(tmp, p)
    except OSError as e:
        with contextlib.suppress(OSError):
            tmp.unlink()
        raise LedgerWriteError(f"error writing file: {e}") from e

    _logger.info(
        "ledger:saved path=%s operations=%d last_save_date=%s",
        os.fspath(p),
        len(ledger),
        ledger.last_save_date,
    )


def load_ledger(path: str | PathLike[str]) -> Ledger:
    """Read and decode the ledger stored at ``path``.

    Raises
    ------
    LedgerFileNotFoundError
        ``path`` does not exist.
    LedgerReadError
        Any other filesystem or decoding failure while reading.
    LedgerFormatError
        The content is not a valid ledger document.
    """

    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise LedgerFileNotFoundError(f"file not found: {os.fspath(p)}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise LedgerReadError(f"error reading file: {e}") from e

    ledger = loads_ledger(text)
    _logger.info("ledger:loaded path=%s operations=%d", os.fspath(p), len(ledger))
    return ledger


__all__ = [
    "FILE_MODE",
    "LedgerPersistenceError",
    "LedgerFileNotFoundError",
    "LedgerReadError",
    "LedgerWriteError",
    "LedgerFormatError",
    "dumps_ledger",
    "loads_ledger",
    "save_ledger",
    "load_ledger",
]
