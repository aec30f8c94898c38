"""Simplified ledger: single-currency postings carrying their transaction's metadata.

Exchange postings (an amount with a price in another currency) are resolved
per transaction. The price-currency side of the exchange is already carried
by the offsetting postings of the transaction, so only the posting's own
amount is kept and its price is recorded as an implied price directive.
Every remaining leg becomes one simplified posting; zero legs are dropped.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterator
from dataclasses import dataclass, field

from beanbalance.domain.amount import Amount
from beanbalance.domain.ledger import Ledger
from beanbalance.domain.models import Transaction
from beanbalance.domain.omissions import resolve_transaction
from beanbalance.domain.prices import PriceIndex, implied_prices
from beanbalance.runtime import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class SimplifiedPosting:
    date: dt.date
    account: str
    amount: Amount
    description: str = ""
    payee: str | None = None
    status: str | None = None
    tags: frozenset[str] = frozenset()


@dataclass(frozen=True)
class SimplifiedTransaction:
    date: dt.date
    postings: tuple[SimplifiedPosting, ...]
    description: str = ""
    payee: str | None = None
    status: str | None = None
    tags: frozenset[str] = frozenset()


@dataclass(frozen=True)
class SimplifiedLedger:
    transactions: tuple[SimplifiedTransaction, ...] = ()
    prices: PriceIndex = field(default_factory=PriceIndex)

    @classmethod
    def from_ledger(cls, ledger: Ledger) -> SimplifiedLedger:
        return simplify(ledger)

    @classmethod
    def from_text(cls, text: str) -> SimplifiedLedger:
        """Parse ledger text, validate it and simplify it in one step."""
        return simplify(Ledger.from_text(text))

    def postings(self) -> Iterator[SimplifiedPosting]:
        for transaction in self.transactions:
            yield from transaction.postings

    def __iter__(self) -> Iterator[SimplifiedTransaction]:
        return iter(self.transactions)

    def __len__(self) -> int:
        return len(self.transactions)


def simplify_transaction(transaction: Transaction, prices: PriceIndex | None = None) -> SimplifiedTransaction:
    """Resolve one transaction and turn each non-zero posting into a single-currency leg."""
    resolved = resolve_transaction(transaction, prices)

    postings = tuple(
        SimplifiedPosting(
            date=resolved.date,
            account=posting.account,
            amount=posting.amount,
            description=resolved.description,
            payee=resolved.payee,
            status=resolved.status,
            tags=resolved.tags,
        )
        for posting in resolved.postings
        if posting.amount is not None and not posting.amount.is_zero()
    )
    return SimplifiedTransaction(
        date=resolved.date,
        postings=postings,
        description=resolved.description,
        payee=resolved.payee,
        status=resolved.status,
        tags=resolved.tags,
    )


def simplify(ledger: Ledger) -> SimplifiedLedger:
    """
    Simplify a whole ledger.

    Any transaction that fails resolution aborts the operation; no partial
    ledger is returned. The result's price index holds the ledger's
    directives followed by the prices implied by its exchange postings.
    """
    transactions: list[SimplifiedTransaction] = []
    for transaction in ledger.transactions:
        simplified = simplify_transaction(transaction, ledger.prices)
        if simplified.postings:
            transactions.append(simplified)

    implied = implied_prices(ledger.transactions)
    prices = ledger.prices.copy()
    for price in implied:
        prices.insert(price)

    logger.debug(
        "Simplified %d transaction(s) into %d, %d implied price(s)",
        len(ledger.transactions),
        len(transactions),
        len(implied),
    )
    return SimplifiedLedger(transactions=tuple(transactions), prices=prices)
