"""Delete-with-confirmation as an explicit state machine.

States::

    BROWSING --request(valid row)--> PENDING_CONFIRMATION
    PENDING_CONFIRMATION --confirm()--> APPLIED   (then back to BROWSING)
    PENDING_CONFIRMATION --cancel()---> CANCELLED (then back to BROWSING)

Rows are table rows: row ``0`` is the header, row ``i + 1`` is ledger entry
``i``. The machine does no I/O; the shell asks the user and then calls
``confirm`` or ``cancel``.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from ..logging_setup import get_logger
from ..models import Operation
from ..store import Ledger, OutOfRange
from ..table import describe_operation

_logger = get_logger("personal_ledger.workflows.deletion")


class DeletionState(StrEnum):
    BROWSING = "browsing"
    PENDING_CONFIRMATION = "pending_confirmation"
    APPLIED = "applied"
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class InvalidSelection:
    """No row, the header row, or a row that holds no entry was selected."""

    selected_row: int | None

    @property
    def message(self) -> str:
        if self.selected_row == 0:
            return "The header row cannot be deleted."
        return "Select a valid operation row to delete."


@dataclass(frozen=True, slots=True)
class PendingDeletion:
    """Captured target of a delete intent awaiting the user's answer."""

    index: int
    entry_id: int
    snapshot: Operation

    @property
    def row(self) -> int:
        return self.index + 1

    @property
    def prompt(self) -> str:
        return "Delete the following operation?\n\n" + describe_operation(self.snapshot)


@dataclass(frozen=True, slots=True)
class DeletionApplied:
    deleted: Operation
    next_row: int | None
    """Row to select afterwards, or ``None`` when the ledger is now empty."""

    message: str = "Operation deleted."


@dataclass(frozen=True, slots=True)
class DeletionCancelled:
    selected_row: int


class DeletionWorkflow:
    """Drive one deletion at a time against a ledger."""

    def __init__(self, ledger: Ledger) -> None:
        self.ledger = ledger
        self.state = DeletionState.BROWSING
        self.pending: PendingDeletion | None = None

    def request(self, selected_row: int | None) -> PendingDeletion | InvalidSelection:
        """Register a delete intent for ``selected_row``."""

        if self.state is DeletionState.PENDING_CONFIRMATION:
            raise RuntimeError("a deletion is already awaiting confirmation")
        self.state = DeletionState.BROWSING

        if selected_row is None or not 1 <= selected_row <= len(self.ledger):
            _logger.debug("delete:invalid_selection row=%s", selected_row)
            return InvalidSelection(selected_row)

        index = selected_row - 1
        self.pending = PendingDeletion(
            index=index,
            entry_id=self.ledger.entry_id_at(index),
            snapshot=self.ledger[index],
        )
        self.state = DeletionState.PENDING_CONFIRMATION
        return self.pending

    def _take_pending(self) -> PendingDeletion:
        if self.state is not DeletionState.PENDING_CONFIRMATION or self.pending is None:
            raise RuntimeError("no deletion is awaiting confirmation")
        pending, self.pending = self.pending, None
        self.state = DeletionState.BROWSING
        return pending

    def _resolve_index(self, pending: PendingDeletion) -> int:
        # Trust the captured position only while it still holds the captured entry.
        if (
            pending.index < len(self.ledger)
            and self.ledger.entry_id_at(pending.index) == pending.entry_id
        ):
            return pending.index
        index = self.ledger.index_of(pending.entry_id)
        if index is None:
            raise OutOfRange(f"entry {pending.entry_id} is no longer in the ledger")
        return index

    def confirm(self) -> DeletionApplied:
        """Apply the pending deletion and compute the next selection."""

        pending = self._take_pending()
        index = self._resolve_index(pending)
        deleted = self.ledger.delete_at(index)

        remaining = len(self.ledger)
        if remaining == 0:
            next_row = None
        else:
            next_row = min(index + 1, remaining)

        self.state = DeletionState.APPLIED
        _logger.info("delete:applied index=%d remaining=%d", index, remaining)
        return DeletionApplied(deleted=deleted, next_row=next_row)

    def cancel(self) -> DeletionCancelled:
        """Drop the pending deletion without touching the ledger."""

        pending = self._take_pending()
        self.state = DeletionState.CANCELLED
        return DeletionCancelled(selected_row=pending.row)


__all__ = [
    "DeletionState",
    "DeletionWorkflow",
    "InvalidSelection",
    "PendingDeletion",
    "DeletionApplied",
    "DeletionCancelled",
]
