"""Currency trading accounts.

Adds postings to a trading account so that the value of the trading account
equals currency gains and losses over time:

- income and expenses in a foreign currency are frozen at their main-currency
  value on the transaction date;
- exchanges between two asset accounts are mirrored in the trading account.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from types import MappingProxyType

from beanbalance.domain.amount import Amount
from beanbalance.domain.ledger import Ledger
from beanbalance.domain.models import Posting, Transaction
from beanbalance.domain.prices import PriceIndex
from beanbalance.runtime import get_logger, get_settings

logger = get_logger(__name__)

GENERATED_META = MappingProxyType({"generated": "trading"})

AccountPredicate = Callable[[str], bool]


def _generated(account: str, amount: Amount) -> Posting:
    return Posting(account=account, amount=amount, meta=GENERATED_META)


def _freeze_foreign_postings(
    transaction: Transaction,
    matches: AccountPredicate,
    main_currency: str,
    decimal_places: int,
    prices: PriceIndex,
    trading_account: str,
) -> Transaction:
    postings: list[Posting] = []
    generated: list[Posting] = []
    quantum = Decimal(1).scaleb(-decimal_places)

    for posting in transaction.postings:
        amount = posting.amount
        if amount is None or posting.price is not None or amount.currency == main_currency:
            postings.append(posting)
            continue
        if not matches(posting.account):
            postings.append(posting)
            continue

        converted = prices.convert(amount, main_currency, transaction.date)
        main_amount = Amount(converted.number.quantize(quantum, rounding=ROUND_HALF_UP), main_currency)
        postings.append(Posting(account=posting.account, amount=main_amount, meta=posting.meta))
        generated.append(_generated(trading_account, -main_amount))
        generated.append(_generated(trading_account, amount))

    if not generated:
        return transaction
    return transaction.with_postings(postings + generated)


def _mirror_asset_exchange(
    transaction: Transaction,
    is_asset_account: AccountPredicate,
    trading_account: str,
) -> Transaction:
    if len(transaction.postings) != 2:
        return transaction

    first, second = transaction.postings
    if not is_asset_account(first.account) or not is_asset_account(second.account):
        return transaction
    if first.amount is None or second.amount is None:
        return transaction
    if first.amount.currency == second.amount.currency:
        return transaction

    # The trading legs replace any price, keeping each currency balanced on its own
    return transaction.with_postings(
        [
            replace(first, price=None),
            replace(second, price=None),
            _generated(trading_account, -first.amount),
            _generated(trading_account, -second.amount),
        ]
    )


def handle_foreign_currencies(
    ledger: Ledger,
    *,
    main_currency: str | None = None,
    prices: PriceIndex | None = None,
    is_asset_account: AccountPredicate | None = None,
    is_income_account: AccountPredicate | None = None,
    is_expense_account: AccountPredicate | None = None,
    decimal_places: int | None = None,
    trading_account: str | None = None,
) -> Ledger:
    """
    Return a new ledger with currency trading-account postings added.

    Unset arguments fall back to the runtime settings; ``prices`` defaults to
    the ledger's directives plus the rates implied by its exchange postings.

    Raises:
        NoPriceAvailableError: a foreign amount cannot be valued in the main currency.
        ValueError: no main currency was given or configured.
    """
    settings = get_settings()
    main_currency = main_currency or settings.main_currency
    if not main_currency:
        raise ValueError("A main currency is required to track currency gains")

    prices = prices if prices is not None else ledger.price_index(include_implied=True)
    is_asset_account = is_asset_account or settings.is_asset_account
    is_income_account = is_income_account or settings.is_income_account
    is_expense_account = is_expense_account or settings.is_expense_account
    places = settings.decimal_places if decimal_places is None else decimal_places
    account = trading_account or settings.trading_account

    transactions: list[Transaction] = []
    for transaction in ledger.transactions:
        transaction = _freeze_foreign_postings(transaction, is_income_account, main_currency, places, prices, account)
        transaction = _mirror_asset_exchange(transaction, is_asset_account, account)
        transaction = _freeze_foreign_postings(transaction, is_expense_account, main_currency, places, prices, account)
        transactions.append(transaction)

    logger.debug("Added trading postings in %s to %d transaction(s)", main_currency, len(transactions))
    return Ledger(transactions=tuple(transactions), prices=ledger.prices.copy())
