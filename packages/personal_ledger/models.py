"""Data models for ``personal_ledger``.

Two families live here:

- Domain values used by the application: :class:`Operation` (one dated debit
  or credit entry) and :class:`ValidationError` (a structured rejection
  produced by form parsing).
- DTOs describing the JSON ledger file (:class:`OperationRecord`,
  :class:`LedgerFile`). They are validated with Pydantic on load and shaped
  with serializers on save so the on-disk keys stay ``Operations``, ``Date``,
  ``Description``, ``Debit``, ``Credit`` and ``LastSaveDate``.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Context, Decimal, localcontext
from enum import StrEnum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, Strict, field_serializer, field_validator

ZERO = Decimal(0)

# Sums, differences and quantization of amounts must not round.
EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


def exact_arithmetic():
    """Context manager for unrounded amount arithmetic (see :data:`EXACT`)."""

    return localcontext(EXACT)


# ---------------------------------------------------------------------------
# Domain values
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Operation:
    """A single ledger entry.

    ``debit`` and ``credit`` are mutually exclusive: at most one of them is
    nonzero and the other is exactly ``0``. Instances are immutable; the only
    way to change the ledger is to insert a new operation or delete one.
    """

    date: dt.date
    description: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO

    def __post_init__(self) -> None:
        if not self.description.strip():
            raise ValueError("Operation.description must be non-empty")
        for name in ("debit", "credit"):
            val = getattr(self, name)
            if not isinstance(val, Decimal) or not val.is_finite() or val < 0:
                raise ValueError(f"Operation.{name} must be a finite non-negative Decimal")
        if self.debit != 0 and self.credit != 0:
            raise ValueError("Operation cannot carry both a debit and a credit")

    @property
    def amount(self) -> Decimal:
        """Signed effect on the balance (credit minus debit)."""

        with exact_arithmetic():
            return self.credit - self.debit


class ValidationErrorKind(StrEnum):
    EMPTY_DESCRIPTION = "empty_description"
    INVALID_DATE = "invalid_date"
    INVALID_DEBIT = "invalid_debit"
    INVALID_CREDIT = "invalid_credit"
    BOTH_DEBIT_AND_CREDIT = "both_debit_and_credit"
    NEITHER_DEBIT_NOR_CREDIT = "neither_debit_nor_credit"


_MESSAGES: dict[ValidationErrorKind, str] = {
    ValidationErrorKind.EMPTY_DESCRIPTION: "The description cannot be empty.",
    ValidationErrorKind.INVALID_DATE: "Invalid date format. Use DD/MM/YY.",
    ValidationErrorKind.INVALID_DEBIT: "Invalid or negative debit value.",
    ValidationErrorKind.INVALID_CREDIT: "Invalid or negative credit value.",
    ValidationErrorKind.BOTH_DEBIT_AND_CREDIT: "Enter a debit OR a credit, not both.",
    ValidationErrorKind.NEITHER_DEBIT_NOR_CREDIT: "Enter a debit or a credit.",
}


@dataclass(frozen=True, slots=True)
class ValidationError:
    """Why a submitted operation form was rejected.

    This is a return value, not an exception: form parsing hands it back to
    the caller, which shows :attr:`message` to the user.
    """

    kind: ValidationErrorKind

    @property
    def message(self) -> str:
        return _MESSAGES[self.kind]


# ---------------------------------------------------------------------------
# On-disk ledger file
# ---------------------------------------------------------------------------

# Amounts arrive as Decimal (the loader parses JSON numbers with
# ``parse_float``/``parse_int=Decimal``); strings or booleans are rejected.
# They are dumped as Decimal too and written as exact JSON numbers.
StrictDecimal = Annotated[Decimal, Strict()]
StrictStr = Annotated[str, Strict()]


class OperationRecord(BaseModel):
    """One element of the ``Operations`` array."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    date: dt.datetime = Field(alias="Date")
    description: StrictStr = Field(default="", alias="Description")
    debit: StrictDecimal = Field(default=ZERO, alias="Debit")
    credit: StrictDecimal = Field(default=ZERO, alias="Credit")

    @field_serializer("date")
    def _ser_date(self, v: dt.datetime) -> str:
        # Only the calendar date is meaningful; the time is pinned to midnight UTC.
        return f"{v.date().isoformat()}T00:00:00Z"

    @classmethod
    def from_operation(cls, op: Operation) -> OperationRecord:
        return cls(
            date=dt.datetime(op.date.year, op.date.month, op.date.day, tzinfo=dt.UTC),
            description=op.description,
            debit=op.debit,
            credit=op.credit,
        )

    def to_operation(self) -> Operation:
        """Convert to a domain :class:`Operation` (raises ``ValueError`` when invalid)."""

        return Operation(
            date=self.date.date(),
            description=self.description,
            debit=self.debit,
            credit=self.credit,
        )


class LedgerFile(BaseModel):
    """Top-level schema of a saved ledger."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    operations: list[OperationRecord] = Field(default_factory=list, alias="Operations")
    last_save_date: StrictStr = Field(default="", alias="LastSaveDate")

    @field_validator("operations", mode="before")
    @classmethod
    def _null_operations(cls, v: object) -> object:
        # An empty ledger saved by older builds may carry ``null`` here.
        return [] if v is None else v


__all__ = [
    "Operation",
    "ValidationError",
    "ValidationErrorKind",
    "OperationRecord",
    "LedgerFile",
    "ZERO",
    "exact_arithmetic",
]
