"""The in-memory operation store (the ledger).

A :class:`Ledger` keeps its operations sorted ascending by date after every
insertion. Sorting is stable, so operations sharing a date stay in insertion
order. Entries are addressed positionally by the UI; each one also carries a
stable integer id, assigned at insertion and never persisted, which lets a
pending deletion confirm that the row it captured still holds the same entry.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable
from dataclasses import dataclass

from .logging_setup import get_logger
from .models import Operation

_logger = get_logger("personal_ledger.store")


class OutOfRange(IndexError):
    """Raised when an index does not address an entry of the ledger."""


@dataclass(frozen=True, slots=True)
class _Entry:
    entry_id: int
    op: Operation


class Ledger:
    """Ordered collection of operations plus the date of the last save."""

    def __init__(
        self,
        operations: Iterable[Operation] = (),
        *,
        last_save_date: str = "",
    ) -> None:
        self._ids = itertools.count(1)
        self._entries: list[_Entry] = [_Entry(next(self._ids), op) for op in operations]
        self._sort()
        self.last_save_date = last_save_date

    def _sort(self) -> None:
        # list.sort is stable; ties keep insertion order.
        self._entries.sort(key=lambda e: e.op.date)

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._entries):
            raise OutOfRange(f"index {index} out of range for ledger of {len(self._entries)}")

    # ---- queries -------------------------------------------------------------

    def all(self) -> tuple[Operation, ...]:
        """Operations in display order (ascending date)."""

        return tuple(e.op for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> Operation:
        self._check_index(index)
        return self._entries[index].op

    def entry_id_at(self, index: int) -> int:
        self._check_index(index)
        return self._entries[index].entry_id

    def index_of(self, entry_id: int) -> int | None:
        for i, e in enumerate(self._entries):
            if e.entry_id == entry_id:
                return i
        return None

    # ---- mutation ------------------------------------------------------------

    def insert(self, op: Operation) -> int:
        """Add ``op`` and re-sort. Returns the new entry's id.

        No deduplication: identical operations are kept as distinct entries.
        """

        entry = _Entry(next(self._ids), op)
        self._entries.append(entry)
        self._sort()
        _logger.debug(
            "ledger:insert id=%d date=%s count=%d", entry.entry_id, op.date, len(self._entries)
        )
        return entry.entry_id

    def delete_at(self, index: int) -> Operation:
        """Remove and return the operation at ``index``.

        Raises :class:`OutOfRange` (leaving the ledger untouched) when ``index``
        is outside ``[0, len)``.
        """

        self._check_index(index)
        entry = self._entries.pop(index)
        _logger.debug(
            "ledger:delete id=%d index=%d count=%d", entry.entry_id, index, len(self._entries)
        )
        return entry.op

    # ---- comparison ----------------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ledger):
            return NotImplemented
        return self.all() == other.all() and self.last_save_date == other.last_save_date

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:  # pragma: no cover - trivial repr
        return f"Ledger(operations={len(self)}, last_save_date={self.last_save_date!r})"


__all__ = ["Ledger", "OutOfRange"]
