"""Form parsing: raw text fields to a validated :class:`Operation`.

``parse_operation`` is pure and never raises for bad input; it returns a
:class:`~personal_ledger.models.ValidationError` describing the first failing
rule. Rules are checked in a fixed order so the message a user sees is
deterministic:

1. description (trimmed) must be non-empty
2. date must be ``DD/MM/YY``
3. debit, when given, must be a non-negative decimal
4. credit, when given, must be a non-negative decimal
5. debit and credit are mutually exclusive
6. one of debit or credit is required
"""

from __future__ import annotations

import datetime as dt
import re
from decimal import Decimal, InvalidOperation

from .config import DATE_FORMAT
from .logging_setup import get_logger
from .models import ZERO, Operation, ValidationError, ValidationErrorKind

_logger = get_logger("personal_ledger.validation")

# strptime accepts single-digit fields; the ledger format does not.
_DATE_RE = re.compile(r"^\d{2}/\d{2}/\d{2}$")

# Same ceiling as a double (~1.8e308); digits below 1e-1000 are refused.
MAX_AMOUNT_ADJUSTED = 308
MIN_AMOUNT_EXPONENT = -1000


def parse_ledger_date(text: str) -> dt.date | None:
    """Parse ``DD/MM/YY`` into a date, or return ``None`` when invalid.

    Two-digit years follow the POSIX pivot: 69-99 map to 19xx, 00-68 to 20xx.
    """

    s = text.strip()
    if not _DATE_RE.fullmatch(s):
        return None
    try:
        return dt.datetime.strptime(s, DATE_FORMAT).date()
    except ValueError:
        return None


def format_ledger_date(d: dt.date) -> str:
    return d.strftime(DATE_FORMAT)


def parse_amount(text: str) -> Decimal | None:
    """Parse a non-negative finite decimal; ``None`` when invalid.

    Amounts must be below ``10**309`` and use at most ``-MIN_AMOUNT_EXPONENT``
    decimal places, which keeps their fixed-point text bounded.
    """

    try:
        d = Decimal(text.strip())
    except InvalidOperation:
        return None
    if not d.is_finite() or d < 0:
        return None
    if d.adjusted() > MAX_AMOUNT_ADJUSTED or d.as_tuple().exponent < MIN_AMOUNT_EXPONENT:
        return None
    # Normalise "-0" so it compares and prints as plain zero.
    return d + ZERO if d == 0 else d


def _reject(kind: ValidationErrorKind) -> ValidationError:
    _logger.debug("operation rejected kind=%s", kind.value)
    return ValidationError(kind)


def parse_operation(
    date_text: str,
    description_text: str,
    debit_text: str,
    credit_text: str,
) -> Operation | ValidationError:
    """Turn raw form text into an :class:`Operation` or a rejection reason."""

    description = description_text.strip()
    debit_s = debit_text.strip()
    credit_s = credit_text.strip()

    if not description:
        return _reject(ValidationErrorKind.EMPTY_DESCRIPTION)

    date = parse_ledger_date(date_text)
    if date is None:
        return _reject(ValidationErrorKind.INVALID_DATE)

    debit = ZERO
    if debit_s:
        parsed = parse_amount(debit_s)
        if parsed is None:
            return _reject(ValidationErrorKind.INVALID_DEBIT)
        debit = parsed

    credit = ZERO
    if credit_s:
        parsed = parse_amount(credit_s)
        if parsed is None:
            return _reject(ValidationErrorKind.INVALID_CREDIT)
        credit = parsed

    if debit_s and credit_s:
        return _reject(ValidationErrorKind.BOTH_DEBIT_AND_CREDIT)
    if not debit_s and not credit_s:
        return _reject(ValidationErrorKind.NEITHER_DEBIT_NOR_CREDIT)

    return Operation(date=date, description=description, debit=debit, credit=credit)


__all__ = ["parse_operation", "parse_ledger_date", "format_ledger_date", "parse_amount"]
