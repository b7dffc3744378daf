"""Running-balance projection over a sorted operation sequence."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from .models import ZERO, Operation, exact_arithmetic


def running_balances(ops: Iterable[Operation]) -> list[Decimal]:
    """Return one cumulative credit-minus-debit total per operation.

    ``balance[i] = balance[i-1] + ops[i].credit - ops[i].debit`` with an
    implicit starting balance of zero. Recomputed from scratch on every call.
    """

    out: list[Decimal] = []
    total = ZERO
    with exact_arithmetic():
        for op in ops:
            total = total + op.credit - op.debit
            out.append(total)
    return out


def current_balance(ops: Iterable[Operation]) -> Decimal:
    """Balance after the last operation, or zero for an empty ledger."""

    balances = running_balances(ops)
    return balances[-1] if balances else ZERO


__all__ = ["running_balances", "current_balance"]
