import datetime as dt
from pathlib import Path

import pytest

import personal_ledger.workflows.files as files_mod
from personal_ledger.persistence import LedgerWriteError, load_ledger, save_ledger
from personal_ledger.shell import NO, YES
from personal_ledger.store import Ledger
from personal_ledger.workflows.files import load_flow, save_flow
from tests.helpers.factories import make_op
from tests.helpers.scripted_shell import ScriptedShell

TODAY = dt.date(2024, 3, 21)


def _ledger() -> Ledger:
    return Ledger([make_op("15/03/24", "Rent", credit="1200.50")])


# ---- load ----------------------------------------------------------------------


def test_load_replaces_ledger_on_confirm(tmp_path: Path):
    stored = Ledger([make_op("01/01/24", "Saved", debit="5")], last_save_date="02/01/24")
    path = tmp_path / "a.json"
    save_ledger(stored, path)

    current = _ledger()
    shell = ScriptedShell(forms=[[str(path)]], choices=[YES])
    result = load_flow(shell, current)

    assert result == stored
    assert result is not current
    assert shell.notices[-1][0] == "Success"
    assert "Unsaved data will be lost" in shell.questions[0][1]


def test_load_missing_file_keeps_current_with_tailored_message():
    current = _ledger()
    shell = ScriptedShell(forms=[["missing.json"]], choices=[YES])
    assert load_flow(shell, current) is current
    assert shell.messages == ["File 'missing.json' not found."]


def test_load_malformed_file_reports_underlying_error(tmp_path: Path):
    path = tmp_path / "bad.json"
    path.write_text("{oops", encoding="utf-8")
    current = _ledger()
    shell = ScriptedShell(forms=[[str(path)]], choices=[YES])
    assert load_flow(shell, current) is current
    assert shell.messages[0].startswith("Error loading file: error decoding data")


@pytest.mark.parametrize("answer", [NO, None])
def test_load_declined_does_nothing(answer):
    current = _ledger()
    shell = ScriptedShell(forms=[["whatever.json"]], choices=[answer])
    assert load_flow(shell, current) is current
    assert shell.notices == []


def test_load_empty_file_name_is_rejected_before_confirmation():
    shell = ScriptedShell(forms=[["   "]])
    current = _ledger()
    assert load_flow(shell, current) is current
    assert shell.messages == ["Please enter a file name."]
    assert shell.questions == []


def test_load_form_is_prefilled_with_default_file():
    shell = ScriptedShell(forms=[None])
    load_flow(shell, _ledger(), default_file="accounts.json")
    assert shell.form_calls[0][1][0].default == "accounts.json"


# ---- save ----------------------------------------------------------------------


def test_save_writes_file_and_records_save_date():
    ledger = _ledger()
    shell = ScriptedShell(forms=[["21/03/24", "accounts.json"]], choices=[YES])

    assert save_flow(shell, ledger, today=TODAY) is True
    assert ledger.last_save_date == "21/03/24"
    assert load_ledger("accounts.json") == ledger
    assert shell.messages[-1] == "Data saved successfully to 'accounts.json'."


def test_save_form_prefills_today():
    shell = ScriptedShell(forms=[None])
    save_flow(shell, _ledger(), today=TODAY)
    fields = shell.form_calls[0][1]
    assert [f.default for f in fields] == ["21/03/24", ""]


@pytest.mark.parametrize(
    ("values", "message"),
    [
        (["", "a.json"], "Please enter today's date."),
        (["2024-03-21", "a.json"], "Invalid format for today's date. Use DD/MM/YY."),
        (["21/03/24", "  "], "Please enter a file name."),
    ],
)
def test_save_form_validation(values, message):
    ledger = _ledger()
    shell = ScriptedShell(forms=[values])
    assert save_flow(shell, ledger, today=TODAY) is False
    assert shell.messages == [message]
    assert ledger.last_save_date == ""
    assert not Path("a.json").exists()


def test_save_declined_writes_nothing():
    ledger = _ledger()
    shell = ScriptedShell(forms=[["21/03/24", "a.json"]], choices=[NO])
    assert save_flow(shell, ledger, today=TODAY) is False
    assert not Path("a.json").exists()
    assert ledger.last_save_date == ""


def test_save_failure_keeps_previous_save_date(monkeypatch: pytest.MonkeyPatch):
    def _fail(ledger, path):
        raise LedgerWriteError("error writing file: read-only")

    monkeypatch.setattr(files_mod, "save_ledger", _fail)
    ledger = _ledger()
    ledger.last_save_date = "01/03/24"
    shell = ScriptedShell(forms=[["21/03/24", "a.json"]], choices=[YES])

    assert save_flow(shell, ledger, today=TODAY) is False
    assert ledger.last_save_date == "01/03/24"
    assert shell.notices == [("Save error", "Error saving file: error writing file: read-only")]
