"""Tests for building and merging ledgers from text."""

from __future__ import annotations

import datetime as dt
from decimal import Decimal

import pytest

from beanbalance.domain.amount import Amount
from beanbalance.domain.errors import (
    AmbiguousOmissionError,
    LedgerError,
    LedgerParseError,
    MultipleOmissionsError,
    NoPriceAvailableError,
    UnbalancedTransactionError,
)
from beanbalance.domain.ledger import Ledger
from beanbalance.domain.models import Posting, Price, Transaction
from beanbalance.domain.prices import PriceIndex

GROCERIES = """
2024-03-05 * "Grocer" "Weekly shop" #food
  receipt: "r-1"
  Expenses:Food  42.50 EUR
  Assets:Euro
"""

EXCHANGE = """
2024-01-02 * "Exchange"
  Assets:Dollar  1.00 USD
  Assets:Zloty  -4.00 PLN
"""


def test_from_text_resolves_omitted_amount_and_keeps_metadata() -> None:
    ledger = Ledger.from_text(GROCERIES)

    assert len(ledger) == 1
    txn = ledger.transactions[0]
    assert txn.date == dt.date(2024, 3, 5)
    assert txn.payee == "Grocer"
    assert txn.description == "Weekly shop"
    assert txn.status == "*"
    assert txn.tags == frozenset({"food"})
    assert txn.meta == {"receipt": "r-1"}
    assert txn.line_number == 2
    assert txn.postings[1].account == "Assets:Euro"
    assert txn.postings[1].amount == Amount(Decimal("-42.50"), "EUR")


def test_from_text_collects_price_directives() -> None:
    ledger = Ledger.from_text(
        """
2024-01-01 price USD 4.00 PLN
2024-01-01 price EUR 1.10 USD
"""
    )

    assert list(ledger.prices) == [
        Price(dt.date(2024, 1, 1), "USD", "PLN", Decimal("4.00")),
        Price(dt.date(2024, 1, 1), "EUR", "USD", Decimal("1.10")),
    ]
    assert len(ledger) == 0


def test_from_text_ignores_other_directives() -> None:
    ledger = Ledger.from_text(
        """
2024-01-01 open Assets:Bank USD
2024-01-01 open Equity:Opening
2024-01-01 * "Opening"
  Assets:Bank  100 USD
  Equity:Opening  -100 USD
2024-01-31 balance Assets:Bank  100 USD
"""
    )

    assert len(ledger) == 1


def test_cost_annotation_is_used_as_price() -> None:
    ledger = Ledger.from_text(
        """
2024-02-01 * "Buy shares"
  Assets:Broker  10 ACME {150 USD}
  Assets:Bank  -1500 USD
"""
    )

    posting = ledger.transactions[0].postings[0]
    assert posting.price == Amount(Decimal("150"), "USD")
    assert posting.is_exchange


def test_total_price_annotation_becomes_per_unit() -> None:
    ledger = Ledger.from_text(
        """
2024-01-02 * "Buy EUR"
  Assets:Bank  -50 USD @@ 45 EUR
  Assets:EuroAccount  45 EUR
"""
    )

    assert ledger.transactions[0].postings[0].price == Amount(Decimal("0.9"), "EUR")


def test_parse_error_wraps_parser_errors_verbatim() -> None:
    with pytest.raises(LedgerParseError) as excinfo:
        Ledger.from_text("this is not valid beancount\n")

    assert excinfo.value.kind == "parse"
    assert excinfo.value.errors
    assert isinstance(excinfo.value, LedgerError)


def test_two_omitted_amounts_fail_construction() -> None:
    with pytest.raises(MultipleOmissionsError):
        Ledger.from_text(
            """
2024-01-01 * "Two omitted"
  Assets:Bank  10 USD
  Expenses:Food
  Expenses:Misc
"""
        )


def test_unbalanced_transaction_fails_whole_ledger() -> None:
    text = (
        GROCERIES
        + """
2024-03-06 * "Typo"
  Expenses:Food  10.00 EUR
  Assets:Euro  -1.00 EUR
"""
    )

    with pytest.raises(UnbalancedTransactionError):
        Ledger.from_text(text)


def test_mixed_currency_omission_fails_construction() -> None:
    with pytest.raises(AmbiguousOmissionError):
        Ledger.from_text(
            """
2024-01-01 * "Mixed"
  Assets:Bank  10 USD
  Assets:Euro  -5 EUR
  Expenses:Fees
"""
        )


def test_exchange_without_price_fails_and_succeeds_with_directive() -> None:
    with pytest.raises(NoPriceAvailableError):
        Ledger.from_text(EXCHANGE)

    ledger = Ledger.from_text("2024-01-01 price USD 4.00 PLN\n" + EXCHANGE)
    assert len(ledger) == 1


def test_extra_prices_reconcile_without_being_stored() -> None:
    extra = PriceIndex([Price(dt.date(2024, 1, 1), "USD", "PLN", Decimal("4"))])

    ledger = Ledger.from_text(EXCHANGE, prices=extra)

    assert len(ledger) == 1
    assert len(ledger.prices) == 0


def test_merge_concatenates_without_mutating_inputs() -> None:
    first = Ledger.from_text("2024-01-01 price USD 4.00 PLN\n")
    second = Ledger.from_text(GROCERIES + "\n2024-04-01 price EUR 1.10 USD\n")

    merged = Ledger.merge([first, second])

    assert merged.transactions == second.transactions
    assert [price.base for price in merged.prices] == ["USD", "EUR"]
    assert len(first.prices) == 1
    assert len(second.prices) == 1
    assert len(first) == 0


def test_price_index_includes_implied_prices() -> None:
    ledger = Ledger.from_text(
        """
2024-01-02 * "Buy EUR"
  Assets:Bank  -50 USD @ 0.9 EUR
  Assets:EuroAccount  45 EUR
"""
    )

    assert len(ledger.price_index(include_implied=False)) == 0
    index = ledger.price_index()
    assert index.rate("EUR", "USD", dt.date(2024, 1, 2)) == Decimal(1) / Decimal("0.9")


def test_transaction_without_postings_is_a_parse_error() -> None:
    with pytest.raises(LedgerParseError) as excinfo:
        Ledger.from_text(
            """
2024-01-01 * "Empty"

2024-01-02 * "Transfer"
  Assets:A  1 USD
  Assets:B  -1 USD
"""
        )

    assert [error.message for error in excinfo.value.errors] == ["Transaction has no postings"]


def test_records_default_to_empty_read_only_meta() -> None:
    posting = Posting("Assets:Cash")
    txn = Transaction(date=dt.date(2024, 1, 1), postings=(posting,))

    assert posting.meta == {}
    assert txn.meta == {}
    with pytest.raises(TypeError):
        txn.meta["key"] = "value"  # type: ignore[index]
