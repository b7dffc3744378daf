import json
import os
import stat
from decimal import Decimal
from pathlib import Path

import pytest

import personal_ledger.persistence as persistence_mod
from personal_ledger.persistence import (
    LedgerFileNotFoundError,
    LedgerFormatError,
    LedgerPersistenceError,
    LedgerReadError,
    LedgerWriteError,
    load_ledger,
    save_ledger,
)
from personal_ledger.store import Ledger
from tests.helpers.factories import make_op


def _sample() -> Ledger:
    return Ledger(
        [
            make_op("15/03/24", "Rent", credit="1200.50"),
            make_op("01/03/24", "Coffee", debit="3.2"),
            make_op("15/03/24", "Rent", credit="1200.50"),
            make_op("20/03/24", "Refund", credit="0.1"),
        ],
        last_save_date="21/03/24",
    )


@pytest.mark.parametrize("ledger", [Ledger(), Ledger(last_save_date="01/01/24"), _sample()])
def test_save_then_load_round_trips(tmp_path: Path, ledger: Ledger):
    path = tmp_path / "accounts.json"
    save_ledger(ledger, path)
    assert load_ledger(path) == ledger


def test_file_layout_matches_documented_format(tmp_path: Path):
    path = tmp_path / "accounts.json"
    ledger = Ledger([make_op("15/03/24", "Rent", credit="1200.50")], last_save_date="16/03/24")
    save_ledger(ledger, path)

    text = path.read_text(encoding="utf-8")
    assert text.startswith('{\n  "Operations": [\n    {')
    assert json.loads(text) == {
        "Operations": [
            {
                "Date": "2024-03-15T00:00:00Z",
                "Description": "Rent",
                "Debit": 0,
                "Credit": 1200.5,
            }
        ],
        "LastSaveDate": "16/03/24",
    }


@pytest.mark.parametrize(
    ("amount", "written"),
    [
        ("0.10000000000000000001", "0.10000000000000000001"),
        ("1e-400", "0." + "0" * 399 + "1"),
        ("123456789012345678901234567890.50", "123456789012345678901234567890.5"),
        ("1e30", "1" + "0" * 30),
    ],
)
def test_amounts_are_written_digit_for_digit(tmp_path: Path, amount: str, written: str):
    path = tmp_path / "accounts.json"
    ledger = Ledger([make_op("15/03/24", "Precise", debit=amount)])
    save_ledger(ledger, path)

    reloaded = load_ledger(path)
    assert reloaded == ledger
    assert reloaded.all()[0].debit == Decimal(amount)
    text = path.read_text(encoding="utf-8")
    assert f'"Debit": {written},\n' in text
    assert '"Credit": 0\n' in text


def test_saved_file_permissions_and_no_temp_left(tmp_path: Path):
    path = tmp_path / "accounts.json"
    save_ledger(_sample(), path)
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o644
    assert sorted(p.name for p in tmp_path.iterdir()) == ["accounts.json"]


def test_save_overwrites_existing_file(tmp_path: Path):
    path = tmp_path / "accounts.json"
    save_ledger(_sample(), path)
    save_ledger(Ledger(), path)
    assert load_ledger(path) == Ledger()


def test_load_missing_file_is_not_found(tmp_path: Path):
    with pytest.raises(LedgerFileNotFoundError):
        load_ledger(tmp_path / "missing.json")


def test_load_directory_is_read_error(tmp_path: Path):
    with pytest.raises(LedgerReadError) as ei:
        load_ledger(tmp_path)
    assert not isinstance(ei.value, LedgerFileNotFoundError)


def test_save_into_missing_directory_is_write_error(tmp_path: Path):
    with pytest.raises(LedgerWriteError):
        save_ledger(_sample(), tmp_path / "nope" / "accounts.json")


def test_failed_replace_cleans_up_temp_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    def _boom(src, dst):
        raise OSError("disk full")

    monkeypatch.setattr(persistence_mod.os, "replace", _boom)
    path = tmp_path / "accounts.json"
    with pytest.raises(LedgerWriteError, match="disk full"):
        save_ledger(_sample(), path)
    assert list(tmp_path.iterdir()) == []


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        "[]",
        '{"Operations": [{"Description": "x", "Debit": 1, "Credit": 0}]}',
        '{"Operations": [{"Date": "2024-01-01T00:00:00Z", "Description": "x", "Debit": "1"}]}',
        '{"Operations": [{"Date": "2024-01-01T00:00:00Z", "Description": "x", '
        '"Debit": 1, "Credit": 2}]}',
        '{"Operations": [{"Date": "2024-01-01T00:00:00Z", "Description": "", "Debit": 1}]}',
        '{"Operations": [{"Date": "2024-01-01T00:00:00Z", "Description": "x", "Debit": -1}]}',
        '{"Operations": [], "LastSaveDate": 5}',
    ],
)
def test_load_rejects_malformed_documents(tmp_path: Path, content: str):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(LedgerFormatError):
        load_ledger(path)


def test_load_accepts_null_operations_and_sorts(tmp_path: Path):
    path = tmp_path / "a.json"
    path.write_text('{"Operations": null, "LastSaveDate": "01/01/24"}', encoding="utf-8")
    assert load_ledger(path) == Ledger(last_save_date="01/01/24")

    path.write_text(
        json.dumps(
            {
                "Operations": [
                    {"Date": "2024-02-01T00:00:00Z", "Description": "b", "Debit": 0, "Credit": 2},
                    {"Date": "2024-01-01T10:30:00+02:00", "Description": "a", "Debit": 1.25},
                ],
                "LastSaveDate": "",
                "Extra": True,
            }
        ),
        encoding="utf-8",
    )
    ledger = load_ledger(path)
    assert [op.description for op in ledger.all()] == ["a", "b"]
    assert ledger.all()[0].debit == Decimal("1.25")
    assert ledger.all()[0].credit == 0


def test_error_taxonomy_shares_a_base():
    for cls in (LedgerFileNotFoundError, LedgerReadError, LedgerWriteError, LedgerFormatError):
        assert issubclass(cls, LedgerPersistenceError)
