"""Application root: owns the live ledger and dispatches menu actions.

``LedgerApp`` is shell-agnostic. Every handler reads ``self.ledger`` at call
time, so a successful load (which swaps the instance) is seen by the next
action without any module-level state.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Callable

from .balance import current_balance
from .config import LedgerSettings
from .logging_setup import get_logger
from .models import ValidationError
from .shell import NO, YES, FormField, MenuItem, Shell
from .store import Ledger
from .table import build_table, format_amount
from .validation import parse_operation
from .workflows.deletion import DeletionWorkflow, InvalidSelection
from .workflows.files import load_flow, save_flow

_logger = get_logger("personal_ledger.app")

MENU_TITLE = "Main menu"
LIST_TITLE = "Operations"
ADD_TITLE = "Add an operation"

MENU_ITEMS: tuple[MenuItem, ...] = (
    MenuItem("1", "Enter operations", "Add a new operation"),
    MenuItem("2", "List operations", "Show all operations"),
    MenuItem("3", "Load accounts", "Load data from a file"),
    MenuItem("4", "Save accounts", "Save data to a file"),
    MenuItem("5", "Delete a line", "Remove an operation from the list"),
    MenuItem("6", "Current balance", "Show the current balance"),
    MenuItem("7", "Quit", "Leave the application"),
)
QUIT_KEY = "7"

OPERATION_LABELS: tuple[str, ...] = ("Date (DD/MM/YY)", "Description", "Debit", "Credit")


class LedgerApp:
    def __init__(
        self,
        shell: Shell,
        *,
        ledger: Ledger | None = None,
        settings: LedgerSettings | None = None,
        today: Callable[[], dt.date] = dt.date.today,
    ) -> None:
        self.shell = shell
        self.ledger = ledger if ledger is not None else Ledger()
        self.default_file = settings.default_file if settings is not None else ""
        self._today = today
        self._handlers: dict[str, Callable[[], None]] = {
            "1": self.enter_operations,
            "2": self.list_operations,
            "3": self.load,
            "4": self.save,
            "5": self.delete_line,
            "6": self.show_current_balance,
        }

    def run(self) -> int:
        """Loop on the main menu until the user quits. Returns the exit status."""

        while True:
            key = self.shell.select_menu(MENU_TITLE, MENU_ITEMS)
            if key is None or key == QUIT_KEY:
                _logger.info("app:quit operations=%d", len(self.ledger))
                return 0
            handler = self._handlers.get(key)
            if handler is None:
                _logger.debug("app:unknown_menu_key key=%r", key)
                continue
            handler()

    # ---- menu actions ----------------------------------------------------------

    def enter_operations(self) -> None:
        answer = self.shell.choose(
            "Show list?",
            "Do you want to see the existing operations before entering a new one?",
            [YES, NO],
        )
        if answer is None:
            return
        if answer == YES:
            self.list_operations()
        self._operation_form()

    def _operation_form(self) -> None:
        values = ["", "", "", ""]
        while True:
            fields = [FormField(lbl, val) for lbl, val in zip(OPERATION_LABELS, values, strict=True)]
            submitted = self.shell.prompt_form(ADD_TITLE, fields)
            if submitted is None:
                return
            result = parse_operation(*submitted)
            if isinstance(result, ValidationError):
                self.shell.notify("Validation error", result.message)
                # Keep what was typed so the user can fix the offending field.
                values = list(submitted)
                continue
            self.ledger.insert(result)
            _logger.info("app:operation_added date=%s", result.date)
            self.shell.notify("Success", "Operation saved!")
            values = ["", "", "", ""]

    def list_operations(self) -> None:
        """Browse the table; a delete intent runs the confirmation workflow."""

        workflow = DeletionWorkflow(self.ledger)
        selected: int | None = 1 if len(self.ledger) else None
        while True:
            result = self.shell.browse(
                LIST_TITLE, build_table(self.ledger.all()), selected_row=selected
            )
            if result.action == "back":
                return

            outcome = workflow.request(result.row)
            if isinstance(outcome, InvalidSelection):
                self.shell.notify("Action not possible", outcome.message)
                selected = result.row
                continue

            answer = self.shell.choose("Confirm deletion", outcome.prompt, [YES, NO])
            if answer == YES:
                applied = workflow.confirm()
                self.shell.notify("Success", applied.message)
                selected = applied.next_row
            else:
                selected = workflow.cancel().selected_row

    def delete_line(self) -> None:
        self.list_operations()

    def load(self) -> None:
        self.ledger = load_flow(self.shell, self.ledger, default_file=self.default_file)

    def save(self) -> None:
        save_flow(self.shell, self.ledger, today=self._today(), default_file=self.default_file)

    def show_current_balance(self) -> None:
        balance = current_balance(self.ledger.all())
        self.shell.notify("Current balance", f"Current balance: {format_amount(balance)}")


__all__ = ["LedgerApp", "MENU_ITEMS", "OPERATION_LABELS", "QUIT_KEY"]
