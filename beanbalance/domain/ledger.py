"""The ledger aggregate: validated transactions plus price directives."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from beanbalance.domain.models import Price, Transaction
from beanbalance.domain.omissions import resolve_transaction
from beanbalance.domain.prices import PriceIndex, implied_prices
from beanbalance.runtime import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Ledger:
    """Ordered, omission-resolved transactions plus the ledger's price directives.

    Build one with ``from_text``, ``from_entries`` or ``merge``; the plain
    constructor trusts its transactions to be resolved already.
    """

    transactions: tuple[Transaction, ...] = ()
    prices: PriceIndex = field(default_factory=PriceIndex)

    def __post_init__(self) -> None:
        if not isinstance(self.transactions, tuple):
            object.__setattr__(self, "transactions", tuple(self.transactions))

    @classmethod
    def from_entries(
        cls,
        transactions: Iterable[Transaction],
        prices: Iterable[Price] | PriceIndex = (),
        *,
        extra_prices: PriceIndex | None = None,
    ) -> Ledger:
        """
        Validate structured records and build a ledger.

        Args:
            transactions: Transactions in ledger order, possibly with one omitted
                amount each.
            prices: The ledger's own price directives.
            extra_prices: Directives from elsewhere (e.g. another ledger) used
                only to reconcile multi-currency transactions; not stored.
        """
        index = prices.copy() if isinstance(prices, PriceIndex) else PriceIndex(prices)
        lookup = index if extra_prices is None else PriceIndex.union([index, extra_prices])

        resolved = tuple(resolve_transaction(transaction, lookup) for transaction in transactions)
        logger.debug("Validated %d transaction(s) against %d price(s)", len(resolved), len(lookup))
        return cls(transactions=resolved, prices=index)

    @classmethod
    def from_text(cls, text: str, prices: PriceIndex | None = None) -> Ledger:
        """Parse ledger text and validate every transaction.

        Raises LedgerParseError when the parser rejects the text, or any of the
        validation errors raised by ``resolve_transaction``.
        """
        # Imported here so the domain layer does not load the parser eagerly
        from beanbalance.ledger_reader.parser import parse

        parsed = parse(text)
        return cls.from_entries(parsed.transactions, parsed.prices, extra_prices=prices)

    @classmethod
    def merge(cls, ledgers: Sequence[Ledger]) -> Ledger:
        """Concatenate transactions and union price directives, in the given order."""
        transactions: list[Transaction] = []
        for ledger in ledgers:
            transactions.extend(ledger.transactions)
        prices = PriceIndex.union(ledger.prices for ledger in ledgers)
        return cls(transactions=tuple(transactions), prices=prices)

    def price_index(self, include_implied: bool = True) -> PriceIndex:
        """Price directives, plus the rates implied by exchange postings if requested."""
        index = self.prices.copy()
        if include_implied:
            for price in implied_prices(self.transactions):
                index.insert(price)
        return index

    def __iter__(self) -> Iterator[Transaction]:
        return iter(self.transactions)

    def __len__(self) -> int:
        return len(self.transactions)
