import json
from decimal import Decimal

import pytest

from finance_core.exceptions import ParseError, PersistenceError
from finance_core.gateway import STORAGE_KEY, PersistenceGateway
from finance_core.ledger import Ledger
from finance_core.models import LedgerState
from finance_core.storage import JSONStorage


def _populated_state():
    ledger = Ledger()
    ledger.add_transaction("Salary", 5000, "income", "2024-01-01", "January pay")
    ledger.add_transaction("Food", "12.5", "expense", "2024-01-02")
    ledger.set_budget(800)
    return ledger.state


def test_load_without_saved_blob_returns_empty_state(gateway):
    state, error = gateway.load()

    assert state == LedgerState.empty()
    assert error is None


def test_save_then_load_round_trip(gateway, storage):
    original = _populated_state()

    gateway.save(original)
    restored, error = gateway.load()

    assert error is None
    assert restored == original
    assert (storage.base_path / STORAGE_KEY).exists()
    assert not (storage.base_path / (STORAGE_KEY + ".tmp")).exists()


def test_saved_layout_matches_browser_format(gateway, storage):
    gateway.save(_populated_state())

    document = json.loads((storage.base_path / STORAGE_KEY).read_text(encoding="utf-8"))

    assert document["budget"] == 800
    first = document["transactions"][0]
    assert first == {
        "id": first["id"],
        "category": "Food",
        "amount": 12.5,
        "type": "expense",
        "date": "2024-01-02",
        "description": "",
        "deleted": False,
    }


def test_corrupt_blob_falls_back_to_empty_state(gateway, storage):
    (storage.base_path / STORAGE_KEY).write_text("{oops", encoding="utf-8")

    state, error = gateway.load()

    assert state == LedgerState.empty()
    assert isinstance(error, PersistenceError)


def test_invalid_shape_falls_back_to_empty_state(gateway, storage):
    (storage.base_path / STORAGE_KEY).write_text(
        json.dumps({"transactions": [{"id": "1", "amount": -3}]}), encoding="utf-8"
    )

    state, error = gateway.load()

    assert state == LedgerState.empty()
    assert isinstance(error, PersistenceError)


def test_save_failure_raises_persistence_error(tmp_path):
    storage = JSONStorage(tmp_path)
    gateway = PersistenceGateway(storage, key="missing-dir/state.json")

    with pytest.raises(PersistenceError):
        gateway.save(LedgerState.empty())


def test_export_import_round_trip(gateway):
    original = _populated_state()

    blob = gateway.export_state(original)

    assert isinstance(blob, bytes)
    assert gateway.import_state(blob) == original


def test_import_normalises_deleted_flag_and_accepts_browser_ids(gateway):
    blob = json.dumps({
        "transactions": [
            {
                "id": "1704067200000",
                "category": "Food",
                "amount": 42,
                "type": "expense",
                "date": "2024-01-01",
                "description": "groceries",
                "deleted": True,
            }
        ],
        "budget": 300,
    })

    state = gateway.import_state(blob)

    assert state.budget == Decimal("300.00")
    assert state.transactions[0].id == "1704067200000"
    assert state.transactions[0].to_dict()["deleted"] is False


def test_import_defaults_missing_fields(gateway):
    state = gateway.import_state("{}")

    assert state == LedgerState.empty()


def test_import_invalid_budget_becomes_zero(gateway):
    assert gateway.import_state('{"budget": "lots"}').budget == 0


@pytest.mark.parametrize(
    "blob",
    [
        "{not valid json",
        "[]",
        '"text"',
        '{"transactions": {}}',
        '{"transactions": [1]}',
        '{"transactions": [{"category": "Food", "amount": 1, "type": "expense", "date": "2024-01-01"}]}',
        '{"transactions": [{"id": "1", "category": "Food", "amount": 0, "type": "expense", "date": "2024-01-01"}]}',
        '{"transactions": [{"id": "1", "category": "Food", "amount": 0.004, "type": "expense", "date": "2024-01-01"}]}',
        '{"transactions": [{"id": "1", "category": "Food", "amount": 1e30, "type": "expense", "date": "2024-01-01"}]}',
        b"\xff\xfe",
        None,
    ],
)
def test_import_rejects_malformed_payloads(gateway, blob):
    with pytest.raises(ParseError):
        gateway.import_state(blob)


def test_import_rejects_duplicate_ids(gateway):
    row = {"id": "1", "category": "Food", "amount": 1, "type": "expense", "date": "2024-01-01"}

    with pytest.raises(ParseError):
        gateway.import_state(json.dumps({"transactions": [row, row]}))


def test_export_import_round_trip_at_largest_amount(gateway):
    ledger = Ledger()
    ledger.add_transaction("Salary", "9999999999999.99", "income", "2024-01-01")
    ledger.add_transaction("Food", "0.01", "expense", "2024-01-02")
    ledger.set_budget("9999999999999.99")
    original = ledger.state

    restored = gateway.import_state(gateway.export_state(original))

    assert restored == original
    assert restored.transactions[1].amount == Decimal("9999999999999.99")


def test_load_ignores_out_of_range_budget(gateway, storage):
    (storage.base_path / STORAGE_KEY).write_text(
        '{"transactions": [], "budget": 1e30}', encoding="utf-8"
    )

    state, error = gateway.load()

    assert error is None
    assert state.budget == 0


def test_load_falls_back_on_out_of_range_amount(gateway, storage):
    (storage.base_path / STORAGE_KEY).write_text(
        json.dumps({
            "transactions": [
                {"id": "1", "category": "Food", "amount": 1e30, "type": "expense", "date": "2024-01-01"}
            ],
            "budget": 0,
        }),
        encoding="utf-8",
    )

    state, error = gateway.load()

    assert state == LedgerState.empty()
    assert isinstance(error, PersistenceError)
