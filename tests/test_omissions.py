"""Tests for omitted-amount resolution and balance validation."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from beanbalance.domain.amount import Amount
from beanbalance.domain.errors import (
    AmbiguousOmissionError,
    MultipleOmissionsError,
    NoPriceAvailableError,
    UnbalancedTransactionError,
)
from beanbalance.domain.models import Posting, Price, Transaction
from beanbalance.domain.omissions import resolve_transaction, transaction_residual
from beanbalance.domain.prices import PriceIndex

DATE = dt.date(2024, 1, 15)


def _amount(number: str, currency: str) -> Amount:
    return Amount(Decimal(number), currency)


def _txn(*postings: Posting, description: str = "Test") -> Transaction:
    return Transaction(date=DATE, postings=postings, description=description)


def test_balanced_transaction_is_returned_unchanged() -> None:
    txn = _txn(
        Posting("Expenses:Food", _amount("12.30", "EUR")),
        Posting("Expenses:Drinks", _amount("2.70", "EUR")),
        Posting("Assets:Cash", _amount("-15", "EUR")),
    )

    assert resolve_transaction(txn) is txn


def test_single_omission_negates_the_rest() -> None:
    txn = _txn(
        Posting("Expenses:Food", _amount("12.30", "EUR")),
        Posting("Assets:Cash"),
        Posting("Expenses:Drinks", _amount("2.70", "EUR")),
    )

    resolved = resolve_transaction(txn)

    assert resolved.postings[1] == Posting("Assets:Cash", _amount("-15.00", "EUR"))
    assert transaction_residual(resolved.postings).is_zero()
    assert txn.postings[1].amount is None


def test_omission_is_inferred_from_exchange_weights() -> None:
    txn = _txn(
        Posting("Assets:Bank", _amount("-50", "USD"), _amount("0.9", "EUR")),
        Posting("Assets:EuroAccount"),
    )

    resolved = resolve_transaction(txn)

    assert resolved.postings[1].amount == _amount("45", "EUR")


def test_two_omissions_always_fail() -> None:
    txn = _txn(
        Posting("Assets:Cash", _amount("10", "USD")),
        Posting("Expenses:Food"),
        Posting("Expenses:Misc"),
    )

    with pytest.raises(MultipleOmissionsError) as excinfo:
        resolve_transaction(txn)

    assert excinfo.value.kind == "multiple_omissions"
    assert excinfo.value.accounts == ["Expenses:Food", "Expenses:Misc"]


def test_two_omissions_fail_even_without_other_postings() -> None:
    with pytest.raises(MultipleOmissionsError):
        resolve_transaction(_txn(Posting("Expenses:Food"), Posting("Assets:Cash")))


def test_unbalanced_transaction_reports_residual() -> None:
    txn = _txn(
        Posting("Assets:Bank", _amount("10", "USD")),
        Posting("Expenses:Food", _amount("-9", "USD")),
        description="Off by one",
    )

    with pytest.raises(UnbalancedTransactionError) as excinfo:
        resolve_transaction(txn)

    assert excinfo.value.residual.as_dict() == {"USD": Decimal("1")}
    assert "2024-01-15" in str(excinfo.value)
    assert "Off by one" in str(excinfo.value)


def test_omission_with_mixed_currencies_is_ambiguous() -> None:
    txn = _txn(
        Posting("Assets:Bank", _amount("10", "USD")),
        Posting("Assets:Euro", _amount("-5", "EUR")),
        Posting("Expenses:Fees"),
    )

    with pytest.raises(AmbiguousOmissionError) as excinfo:
        resolve_transaction(txn)

    assert excinfo.value.kind == "ambiguous_omission"


def test_omitted_posting_with_its_own_price_is_ambiguous() -> None:
    txn = _txn(
        Posting("Assets:Bank", _amount("-45", "EUR")),
        Posting("Assets:Dollars", None, _amount("0.9", "EUR")),
    )

    with pytest.raises(AmbiguousOmissionError):
        resolve_transaction(txn)


def test_omission_when_rest_already_balances_is_filled_with_zero() -> None:
    txn = _txn(
        Posting("Assets:Bank", _amount("5", "USD")),
        Posting("Assets:Cash", _amount("-5", "USD")),
        Posting("Expenses:Nothing"),
    )

    resolved = resolve_transaction(txn)

    assert resolved.postings[2] == Posting("Expenses:Nothing", _amount("0", "USD"))


def test_zero_fill_needs_a_single_currency() -> None:
    txn = _txn(
        Posting("Assets:Bank", _amount("5", "USD")),
        Posting("Assets:Cash", _amount("-5", "USD")),
        Posting("Assets:Euro", _amount("3", "EUR")),
        Posting("Assets:EuroCash", _amount("-3", "EUR")),
        Posting("Expenses:Nothing"),
    )

    with pytest.raises(AmbiguousOmissionError):
        resolve_transaction(txn)


def test_lone_omitted_posting_is_ambiguous() -> None:
    with pytest.raises(AmbiguousOmissionError):
        resolve_transaction(_txn(Posting("Expenses:Nothing")))


def test_two_currencies_without_any_price_never_silently_balance() -> None:
    txn = _txn(
        Posting("Assets:Dollar", _amount("1.00", "USD")),
        Posting("Assets:Zloty", _amount("-4.00", "PLN")),
    )

    with pytest.raises(NoPriceAvailableError):
        resolve_transaction(txn, PriceIndex())
    with pytest.raises(NoPriceAvailableError):
        resolve_transaction(txn)


def test_two_currencies_reconcile_through_price_directive() -> None:
    txn = _txn(
        Posting("Assets:Dollar", _amount("1.00", "USD")),
        Posting("Assets:Zloty", _amount("-4.00", "PLN")),
    )
    prices = PriceIndex([Price(dt.date(2024, 1, 1), "USD", "PLN", Decimal("4.00"))])

    assert resolve_transaction(txn, prices) is txn


def test_two_currencies_at_a_different_rate_are_unbalanced() -> None:
    txn = _txn(
        Posting("Assets:Dollar", _amount("1.00", "USD")),
        Posting("Assets:Zloty", _amount("-4.00", "PLN")),
    )
    prices = PriceIndex([Price(dt.date(2024, 1, 1), "USD", "PLN", Decimal("3.90"))])

    with pytest.raises(UnbalancedTransactionError):
        resolve_transaction(txn, prices)


def test_price_dated_after_transaction_is_not_used() -> None:
    txn = _txn(
        Posting("Assets:Dollar", _amount("1.00", "USD")),
        Posting("Assets:Zloty", _amount("-4.00", "PLN")),
    )
    prices = PriceIndex([Price(dt.date(2024, 2, 1), "USD", "PLN", Decimal("4.00"))])

    with pytest.raises(NoPriceAvailableError):
        resolve_transaction(txn, prices)
