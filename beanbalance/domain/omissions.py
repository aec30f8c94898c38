"""Omitted-amount resolution and balance validation for transactions.

A posting's weight is its amount, or its amount converted through its own
price when it is an exchange posting. A resolved transaction's weights sum
to zero.
"""

from __future__ import annotations

from decimal import Decimal

from beanbalance.domain.amount import Amount, MultiAmount
from beanbalance.domain.errors import (
    AmbiguousOmissionError,
    MultipleOmissionsError,
    NoPriceAvailableError,
    UnbalancedTransactionError,
)
from beanbalance.domain.models import Posting, Transaction
from beanbalance.domain.prices import PriceIndex


def transaction_residual(postings: tuple[Posting, ...] | list[Posting]) -> MultiAmount:
    """Sum of the weights of every posting that has an amount."""
    residual = MultiAmount()
    for posting in postings:
        if posting.amount is not None:
            residual.add(posting.weight())
    return residual


def _reconciles_through_prices(transaction: Transaction, residual: MultiAmount, prices: PriceIndex) -> bool:
    """Check whether a multi-currency residual nets to zero at the index's rates.

    Each residual currency is tried as the common currency. Raises
    NoPriceAvailableError when no currency could be converted at all.
    """
    first_error: NoPriceAvailableError | None = None
    converted_any = False
    for target in residual.currencies():
        try:
            total = residual.value_in(target, transaction.date, prices)
        except NoPriceAvailableError as exc:
            if first_error is None:
                first_error = exc
            continue
        converted_any = True
        if total == 0:
            return True

    if not converted_any and first_error is not None:
        raise first_error
    return False


def _fill(transaction: Transaction, target: Posting, inferred: Amount) -> tuple[Posting, ...]:
    return tuple(posting.with_amount(inferred) if posting is target else posting for posting in transaction.postings)


def check_balanced(transaction: Transaction, prices: PriceIndex | None = None) -> None:
    """Raise UnbalancedTransactionError unless every posting weight sums to zero."""
    residual = transaction_residual(transaction.postings)
    if residual.is_zero():
        return
    if len(residual) > 1 and prices is not None and _reconciles_through_prices(transaction, residual, prices):
        return
    if len(residual) > 1 and prices is None:
        currencies = residual.currencies()
        raise NoPriceAvailableError(currencies[0], currencies[1], transaction.date)
    raise UnbalancedTransactionError(transaction, residual)


def resolve_transaction(transaction: Transaction, prices: PriceIndex | None = None) -> Transaction:
    """
    Fill in the omitted amount of a transaction, or validate a complete one.

    Returns:
        The transaction itself when nothing was omitted, otherwise a copy whose
        omitted posting carries the inferred amount.

    Raises:
        MultipleOmissionsError: more than one posting lacks an amount.
        AmbiguousOmissionError: the omitted amount cannot be inferred.
        UnbalancedTransactionError: the postings do not sum to zero.
        NoPriceAvailableError: reconciling currencies needs a missing price.
    """
    omitted = transaction.omitted_postings()

    if len(omitted) > 1:
        raise MultipleOmissionsError(transaction, [posting.account for posting in omitted])

    if not omitted:
        check_balanced(transaction, prices)
        return transaction

    target = omitted[0]
    if target.price is not None:
        raise AmbiguousOmissionError(transaction, f"omitted posting to {target.account} carries a price")

    residual = transaction_residual(transaction.postings)
    if residual.is_zero():
        # The rest balances on its own; the fill is zero in their single currency
        currencies = {posting.weight().currency for posting in transaction.postings if posting is not target}
        if len(currencies) != 1:
            raise AmbiguousOmissionError(transaction, "remaining postings balance across several currencies")
        inferred = Amount(Decimal(0), currencies.pop())
        return transaction.with_postings(_fill(transaction, target, inferred))
    if len(residual) > 1:
        raise AmbiguousOmissionError(
            transaction,
            f"remaining postings span currencies {', '.join(residual.currencies())}",
        )

    inferred = -residual.amounts()[0]
    return transaction.with_postings(_fill(transaction, target, inferred))
