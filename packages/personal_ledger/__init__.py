"""Public interface for the ``personal_ledger`` package.

Symbol re-exports only; no runtime logic lives here.
"""

from .balance import current_balance, running_balances
from .models import Operation, ValidationError, ValidationErrorKind
from .persistence import (
    LedgerFileNotFoundError,
    LedgerFormatError,
    LedgerPersistenceError,
    LedgerReadError,
    LedgerWriteError,
    load_ledger,
    save_ledger,
)
from .store import Ledger, OutOfRange
from .validation import parse_operation

__all__ = [
    # Core
    "Ledger",
    "OutOfRange",
    "parse_operation",
    "running_balances",
    "current_balance",
    # Persistence
    "save_ledger",
    "load_ledger",
    "LedgerPersistenceError",
    "LedgerFileNotFoundError",
    "LedgerReadError",
    "LedgerWriteError",
    "LedgerFormatError",
    # Models / types
    "Operation",
    "ValidationError",
    "ValidationErrorKind",
]
