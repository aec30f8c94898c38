"""Exchange-rate directives indexed by currency pair and date."""

from __future__ import annotations

import bisect
import datetime as dt
import math
from collections.abc import Iterable, Iterator
from decimal import Decimal

from beanbalance.domain.amount import Amount
from beanbalance.domain.errors import NoPriceAvailableError
from beanbalance.domain.models import Price, Transaction

ONE = Decimal("1")

# (date, insertion sequence, rate); the sequence makes later same-day entries sort last
_RateEntry = tuple[dt.date, int, Decimal]


class PriceIndex:
    """Price directives queryable by currency pair and "as of" date.

    Directives are kept in insertion order. Lookups use the most recent rate
    dated on or before the requested date, taking the reverse pair inverted
    when it is more recent; among directives for one pair sharing a date, the
    one inserted last wins.
    """

    def __init__(self, prices: Iterable[Price] = ()) -> None:
        self._prices: list[Price] = []
        self._rates: dict[tuple[str, str], list[_RateEntry]] = {}
        for price in prices:
            self.insert(price)

    @classmethod
    def from_prices(cls, prices: Iterable[Price]) -> PriceIndex:
        return cls(prices)

    @classmethod
    def union(cls, indexes: Iterable[PriceIndex]) -> PriceIndex:
        """New index holding every directive of ``indexes``, in order."""
        merged = cls()
        for index in indexes:
            for price in index:
                merged.insert(price)
        return merged

    def insert(self, price: Price) -> None:
        seq = len(self._prices)
        self._prices.append(price)
        entries = self._rates.setdefault((price.base, price.quote), [])
        bisect.insort(entries, (price.date, seq, price.rate))

    def _latest(self, base: str, quote: str, as_of: dt.date) -> _RateEntry | None:
        entries = self._rates.get((base, quote))
        if not entries:
            return None
        idx = bisect.bisect_right(entries, (as_of, math.inf))
        if idx == 0:
            return None
        return entries[idx - 1]

    def rate(self, base: str, quote: str, as_of: dt.date) -> Decimal:
        """Units of ``quote`` per unit of ``base`` as of ``as_of``."""
        if base == quote:
            return ONE

        direct = self._latest(base, quote, as_of)
        inverse = self._latest(quote, base, as_of)
        if inverse is not None and inverse[2] == 0:
            inverse = None

        # The more recently dated quote wins; on the same date the direct pair does
        if direct is not None and (inverse is None or direct[0] >= inverse[0]):
            return direct[2]
        if inverse is not None:
            return ONE / inverse[2]

        known_pair = (base, quote) in self._rates or (quote, base) in self._rates
        raise NoPriceAvailableError(base, quote, as_of, known_pair=known_pair)

    def convert(self, amount: Amount, target_currency: str, as_of: dt.date) -> Amount:
        if amount.currency == target_currency:
            return amount
        return Amount(amount.number * self.rate(amount.currency, target_currency, as_of), target_currency)

    def pairs(self) -> list[tuple[str, str]]:
        return list(self._rates)

    def copy(self) -> PriceIndex:
        return PriceIndex(self._prices)

    def __iter__(self) -> Iterator[Price]:
        return iter(list(self._prices))

    def __len__(self) -> int:
        return len(self._prices)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PriceIndex):
            return NotImplemented
        return self._prices == other._prices

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"PriceIndex({len(self._prices)} price(s), {len(self._rates)} pair(s))"


def implied_prices(transactions: Iterable[Transaction]) -> list[Price]:
    """Prices recorded by exchange postings, one per posting, dated with the transaction."""
    result: list[Price] = []
    for transaction in transactions:
        for posting in transaction.exchange_postings():
            assert posting.amount is not None and posting.price is not None
            result.append(
                Price(
                    date=transaction.date,
                    base=posting.amount.currency,
                    quote=posting.price.currency,
                    rate=posting.price.number,
                )
            )
    return result
