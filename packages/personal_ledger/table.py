"""Table projection of the ledger for display.

Row 0 is the header; row ``i + 1`` shows operation ``i`` with its running
balance. All cells are strings, amounts with exactly two decimal places.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from .balance import running_balances
from .models import Operation, exact_arithmetic
from .validation import format_ledger_date

CENT = Decimal("0.01")

HEADERS: tuple[str, ...] = ("Date", "Description", "Debit", "Credit", "Balance")

# Alignment per column: True means right-aligned.
RIGHT_ALIGNED: tuple[bool, ...] = (True, False, True, True, True)


def format_amount(d: Decimal) -> str:
    with exact_arithmetic():
        q = d.quantize(CENT, rounding=ROUND_HALF_UP)
        # Avoid rendering "-0.00" for tiny negative balances.
        if q == 0:
            q = abs(q)
        return f"{q:.2f}"


def build_table(ops: Sequence[Operation]) -> list[tuple[str, ...]]:
    """Return the header row followed by one formatted row per operation."""

    rows: list[tuple[str, ...]] = [HEADERS]
    for op, bal in zip(ops, running_balances(ops), strict=True):
        rows.append(
            (
                format_ledger_date(op.date),
                op.description,
                format_amount(op.debit),
                format_amount(op.credit),
                format_amount(bal),
            )
        )
    return rows


def render_lines(rows: Sequence[Sequence[str]]) -> list[str]:
    """Lay out ``rows`` as fixed-width text lines (header first)."""

    if not rows:
        return []
    widths = [max(len(r[c]) for r in rows) for c in range(len(rows[0]))]
    lines: list[str] = []
    for r in rows:
        cells = [
            cell.rjust(w) if RIGHT_ALIGNED[c] else cell.ljust(w)
            for c, (cell, w) in enumerate(zip(r, widths, strict=True))
        ]
        lines.append(" | ".join(cells).rstrip())
    return lines


def describe_operation(op: Operation) -> str:
    """Multi-line summary used in confirmation prompts."""

    return (
        f"Date: {format_ledger_date(op.date)}\n"
        f"Description: {op.description}\n"
        f"Debit: {format_amount(op.debit)}\n"
        f"Credit: {format_amount(op.credit)}"
    )


__all__ = ["HEADERS", "build_table", "render_lines", "format_amount", "describe_operation"]
