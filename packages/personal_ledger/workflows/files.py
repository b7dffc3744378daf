"""Confirm-then-load and confirm-then-save flows.

Both flows validate their form, ask for confirmation, run the persistence
call, and report the outcome through the shell. Neither ever raises for user
or I/O errors; the live ledger is only touched on success.
"""

from __future__ import annotations

import datetime as dt

from ..logging_setup import get_logger
from ..persistence import (
    LedgerFileNotFoundError,
    LedgerPersistenceError,
    load_ledger,
    save_ledger,
)
from ..shell import NO, YES, FormField, Shell
from ..store import Ledger
from ..validation import format_ledger_date, parse_ledger_date

_logger = get_logger("personal_ledger.workflows.files")

LOAD_TITLE = "Load accounts"
SAVE_TITLE = "Save accounts"
FILE_LABEL = "File name:"
SAVE_DATE_LABEL = "Today's date (DD/MM/YY):"


def load_flow(shell: Shell, current: Ledger, *, default_file: str = "") -> Ledger:
    """Ask for a file and return the ledger to keep using.

    Returns the freshly loaded ledger on success; ``current`` (unchanged) when
    the user cancels or loading fails.
    """

    values = shell.prompt_form(LOAD_TITLE, [FormField(FILE_LABEL, default_file)])
    if values is None:
        return current
    file_name = values[0].strip()
    if not file_name:
        shell.notify("Error", "Please enter a file name.")
        return current

    answer = shell.choose(
        "Confirm load",
        f"Load data from '{file_name}'? Unsaved data will be lost.",
        [YES, NO],
    )
    if answer != YES:
        return current

    try:
        loaded = load_ledger(file_name)
    except LedgerFileNotFoundError:
        _logger.warning("ledger:load_not_found path=%s", file_name)
        shell.notify("Load error", f"File '{file_name}' not found.")
        return current
    except LedgerPersistenceError as e:
        _logger.warning("ledger:load_failed path=%s error=%s", file_name, e)
        shell.notify("Load error", f"Error loading file: {e}")
        return current

    shell.notify("Success", f"Data loaded successfully from '{file_name}'.")
    return loaded


def save_flow(
    shell: Shell,
    ledger: Ledger,
    *,
    today: dt.date | None = None,
    default_file: str = "",
) -> bool:
    """Ask for the save date and file, then write ``ledger``.

    ``ledger.last_save_date`` is updated only once the file has been written.
    Returns ``True`` when the ledger was saved.
    """

    today = today or dt.date.today()
    values = shell.prompt_form(
        SAVE_TITLE,
        [FormField(SAVE_DATE_LABEL, format_ledger_date(today)), FormField(FILE_LABEL, default_file)],
    )
    if values is None:
        return False
    save_date, file_name = (v.strip() for v in values)

    if not save_date:
        shell.notify("Error", "Please enter today's date.")
        return False
    if parse_ledger_date(save_date) is None:
        shell.notify("Error", "Invalid format for today's date. Use DD/MM/YY.")
        return False
    if not file_name:
        shell.notify("Error", "Please enter a file name.")
        return False

    answer = shell.choose("Confirm save", f"Save data to '{file_name}'?", [YES, NO])
    if answer != YES:
        return False

    snapshot = Ledger(ledger.all(), last_save_date=save_date)
    try:
        save_ledger(snapshot, file_name)
    except LedgerPersistenceError as e:
        _logger.warning("ledger:save_failed path=%s error=%s", file_name, e)
        shell.notify("Save error", f"Error saving file: {e}")
        return False

    ledger.last_save_date = save_date
    shell.notify("Success", f"Data saved successfully to '{file_name}'.")
    return True


__all__ = ["load_flow", "save_flow", "FILE_LABEL", "SAVE_DATE_LABEL"]
