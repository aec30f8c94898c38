"""Currency-tagged decimal quantities and multi-currency aggregates."""

from __future__ import annotations

import datetime as dt
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import TYPE_CHECKING

from beanbalance.domain.errors import CurrencyMismatchError

if TYPE_CHECKING:
    from beanbalance.domain.prices import PriceIndex

ZERO = Decimal("0")


@dataclass(frozen=True)
class Amount:
    """An exact quantity of one currency."""

    number: Decimal
    currency: str

    def __post_init__(self) -> None:
        if not isinstance(self.number, Decimal):
            # Build through str() so floats never leak binary rounding in
            object.__setattr__(self, "number", Decimal(str(self.number)))

    def _check_currency(self, other: Amount) -> None:
        if other.currency != self.currency:
            raise CurrencyMismatchError(self.currency, other.currency)

    def __add__(self, other: Amount) -> Amount:
        self._check_currency(other)
        return Amount(self.number + other.number, self.currency)

    def __sub__(self, other: Amount) -> Amount:
        self._check_currency(other)
        return Amount(self.number - other.number, self.currency)

    def __neg__(self) -> Amount:
        return Amount(-self.number, self.currency)

    def scale(self, factor: Decimal) -> Amount:
        return Amount(self.number * factor, self.currency)

    def is_zero(self) -> bool:
        return self.number == ZERO

    def __str__(self) -> str:
        return f"{self.number} {self.currency}"


def add(a: Amount, b: Amount) -> Amount:
    return a + b


def negate(a: Amount) -> Amount:
    return -a


def is_zero(a: Amount) -> bool:
    return a.is_zero()


class MultiAmount:
    """Balance in one or more currencies.

    Entries are kept in currency-insertion order and an entry is removed as
    soon as its quantity reaches zero, so an empty mapping means zero.
    """

    __slots__ = ("_quantities",)

    def __init__(self, amounts: Iterable[Amount] = ()) -> None:
        self._quantities: dict[str, Decimal] = {}
        for amount in amounts:
            self.add(amount)

    def add(self, amount: Amount) -> MultiAmount:
        """Merge an amount into its currency entry, pruning it if it nets to zero."""
        total = self._quantities.get(amount.currency, ZERO) + amount.number
        if total == ZERO:
            self._quantities.pop(amount.currency, None)
        else:
            self._quantities[amount.currency] = total
        return self

    def subtract(self, amount: Amount) -> MultiAmount:
        return self.add(-amount)

    def __iadd__(self, other: Amount | MultiAmount) -> MultiAmount:
        if isinstance(other, MultiAmount):
            for amount in other.amounts():
                self.add(amount)
        else:
            self.add(other)
        return self

    def __isub__(self, other: Amount | MultiAmount) -> MultiAmount:
        if isinstance(other, MultiAmount):
            for amount in other.amounts():
                self.subtract(amount)
        else:
            self.subtract(other)
        return self

    def __add__(self, other: Amount | MultiAmount) -> MultiAmount:
        result = self.copy()
        result += other
        return result

    def __sub__(self, other: Amount | MultiAmount) -> MultiAmount:
        result = self.copy()
        result -= other
        return result

    def __neg__(self) -> MultiAmount:
        return MultiAmount(-amount for amount in self.amounts())

    def is_zero(self) -> bool:
        return not self._quantities

    def copy(self) -> MultiAmount:
        result = MultiAmount()
        result._quantities = dict(self._quantities)
        return result

    def currencies(self) -> list[str]:
        return list(self._quantities)

    def quantity(self, currency: str) -> Decimal:
        """Quantity held in ``currency``; zero when there is no entry."""
        return self._quantities.get(currency, ZERO)

    def amounts(self) -> list[Amount]:
        return [Amount(number, currency) for currency, number in self._quantities.items()]

    def as_dict(self) -> dict[str, Decimal]:
        return dict(self._quantities)

    def value_in(self, currency: str, as_of: dt.date, prices: PriceIndex) -> Decimal:
        """Total value converted to ``currency`` at the rates known on ``as_of``."""
        result = ZERO
        for amount in self.amounts():
            if amount.currency == currency:
                result += amount.number
            else:
                result += prices.convert(amount, currency, as_of).number
        return result

    def value_in_rounded(self, currency: str, decimal_places: int, as_of: dt.date, prices: PriceIndex) -> Decimal:
        value = self.value_in(currency, as_of, prices)
        return value.quantize(Decimal(1).scaleb(-decimal_places), rounding=ROUND_HALF_UP)

    def __len__(self) -> int:
        return len(self._quantities)

    def __iter__(self) -> Iterator[str]:
        return iter(self._quantities)

    def __contains__(self, currency: object) -> bool:
        return currency in self._quantities

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiAmount):
            return NotImplemented
        return self._quantities == other._quantities

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join(str(amount) for amount in self.amounts())
        return f"MultiAmount([{inner}])"

    def __str__(self) -> str:
        return "\n".join(str(amount) for amount in self.amounts())
