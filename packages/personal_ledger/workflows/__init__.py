"""Interactive workflows composed from the ledger core and a :class:`Shell`."""

from .deletion import (
    DeletionApplied,
    DeletionCancelled,
    DeletionState,
    DeletionWorkflow,
    InvalidSelection,
    PendingDeletion,
)
from .files import load_flow, save_flow

__all__ = [
    "DeletionApplied",
    "DeletionCancelled",
    "DeletionState",
    "DeletionWorkflow",
    "InvalidSelection",
    "PendingDeletion",
    "load_flow",
    "save_flow",
]
