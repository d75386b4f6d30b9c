from datetime import date
from decimal import Decimal

import pytest

from finance_core.exceptions import ValidationError
from finance_core.ledger import Ledger
from finance_core.models import LedgerState, Transaction


def test_add_transaction_prepends_and_normalises(ledger):
    first = ledger.add_transaction("Salary", 5000, "income", "2024-01-01")
    second = ledger.add_transaction(" Food ", "200.456", "Expense", "2024-01-02", "lunch")

    assert ledger.transactions == (second, first)
    assert second.category == "Food"
    assert second.amount == Decimal("200.46")
    assert second.type == "expense"
    assert second.date == date(2024, 1, 2)
    assert second.description == "lunch"
    assert first.description == ""


def test_ids_are_unique_and_increasing(ledger):
    ids = [
        ledger.add_transaction("Food", 1, "expense", "2024-01-01").id
        for _ in range(50)
    ]

    assert len(set(ids)) == 50
    assert [int(value) for value in ids] == sorted(int(value) for value in ids)


@pytest.mark.parametrize(
    "category, amount, txn_type, txn_date",
    [
        ("", 100, "expense", "2024-01-01"),
        (None, 100, "expense", "2024-01-01"),
        ("Food", 0, "expense", "2024-01-01"),
        ("Food", -5, "expense", "2024-01-01"),
        ("Food", "abc", "expense", "2024-01-01"),
        ("Food", None, "expense", "2024-01-01"),
        ("Food", "NaN", "expense", "2024-01-01"),
        ("Food", "Infinity", "expense", "2024-01-01"),
        ("Food", "0.004", "expense", "2024-01-01"),
        ("Food", "1e30", "expense", "2024-01-01"),
        ("Food", "10000000000000", "expense", "2024-01-01"),
        ("Food", 100, "", "2024-01-01"),
        ("Food", 100, "transfer", "2024-01-01"),
        ("Food", 100, "expense", ""),
        ("Food", 100, "expense", None),
        ("Food", 100, "expense", "2024-02-30"),
    ],
)
def test_add_transaction_rejects_invalid_input(ledger, category, amount, txn_type, txn_date):
    ledger.add_transaction("Salary", 10, "income", "2024-01-01")
    before = ledger.state

    with pytest.raises(ValidationError):
        ledger.add_transaction(category, amount, txn_type, txn_date)

    assert ledger.state == before


def test_add_then_delete_restores_sequence(ledger):
    ledger.add_transaction("Salary", 10, "income", "2024-01-01")
    ledger.add_transaction("Food", 3, "expense", "2024-01-02")
    before = ledger.transactions

    added = ledger.add_transaction("Transport", 7.5, "expense", "2024-01-03")
    assert ledger.delete_transaction(added.id) is True

    assert ledger.transactions == before


def test_delete_unknown_id_is_noop(ledger):
    ledger.add_transaction("Food", 3, "expense", "2024-01-02")
    before = ledger.transactions

    assert ledger.delete_transaction("missing") is False
    assert ledger.transactions == before


def test_edit_transaction_is_lookup_only(ledger):
    added = ledger.add_transaction("Food", 3, "expense", "2024-01-02")

    assert ledger.edit_transaction(added.id) == added
    assert ledger.edit_transaction("missing") is None
    assert len(ledger) == 1


def test_set_budget(ledger):
    assert ledger.set_budget("1000") == Decimal("1000.00")
    assert ledger.budget == Decimal("1000.00")

    for bad in (0, -1, "abc", None, "0.004", "1e30"):
        with pytest.raises(ValidationError):
            ledger.set_budget(bad)
    assert ledger.budget == Decimal("1000.00")


def test_clear_all(ledger):
    ledger.add_transaction("Food", 3, "expense", "2024-01-02")
    ledger.set_budget(50)

    ledger.clear_all()

    assert ledger.transactions == ()
    assert ledger.budget == 0


def test_replace_state_defaults(ledger):
    ledger.add_transaction("Food", 3, "expense", "2024-01-02")
    ledger.set_budget(50)

    ledger.replace_state()
    assert ledger.transactions == ()
    assert ledger.budget == 0

    ledger.replace_state([], "not a number")
    assert ledger.budget == 0

    ledger.replace_state([], -10)
    assert ledger.budget == 0


def test_new_ids_stay_above_restored_ids():
    restored = LedgerState(
        transactions=(
            Transaction(
                id=str(10**30),
                category="Food",
                amount=Decimal("1.00"),
                type="expense",
                date=date(2024, 1, 1),
            ),
        ),
    )

    ledger = Ledger(restored)
    added = ledger.add_transaction("Food", 1, "expense", "2024-01-03")

    assert int(added.id) == 10**30 + 1


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1E+2", Decimal("100.00")),
        ("0.005", Decimal("0.01")),
        ("9999999999999.99", Decimal("9999999999999.99")),
    ],
)
def test_add_transaction_amount_boundaries(ledger, raw, expected):
    added = ledger.add_transaction("Food", raw, "expense", "2024-01-01")

    assert added.amount == expected
    assert added.amount > 0
