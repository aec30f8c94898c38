"""Ledger records detached from any parser's value types."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from decimal import Decimal
from types import MappingProxyType
from typing import Any

from beanbalance.domain.amount import Amount

FLAG_CLEARED = "*"

_EMPTY_META: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True)
class Price:
    """One unit of ``base`` is worth ``rate`` units of ``quote`` on ``date``."""

    date: dt.date
    base: str
    quote: str
    rate: Decimal


@dataclass(frozen=True)
class Posting:
    """One account line of a transaction.

    ``amount`` is None while the amount is omitted. ``price`` is the per-unit
    price (or cost) of an exchange posting.
    """

    account: str
    amount: Amount | None = None
    price: Amount | None = None
    meta: Mapping[str, Any] = field(default_factory=lambda: _EMPTY_META, compare=False)

    @property
    def is_omitted(self) -> bool:
        return self.amount is None

    @property
    def is_exchange(self) -> bool:
        return self.amount is not None and self.price is not None and self.price.currency != self.amount.currency

    def weight(self) -> Amount:
        """Amount this posting contributes to the transaction's balance."""
        if self.amount is None:
            raise ValueError(f"Posting to {self.account} has no amount")
        if self.price is not None and self.price.currency != self.amount.currency:
            return Amount(self.amount.number * self.price.number, self.price.currency)
        return self.amount

    def with_amount(self, amount: Amount) -> Posting:
        return replace(self, amount=amount)


@dataclass(frozen=True)
class Transaction:
    date: dt.date
    postings: tuple[Posting, ...]
    description: str = ""
    payee: str | None = None
    status: str | None = FLAG_CLEARED
    tags: frozenset[str] = frozenset()
    links: frozenset[str] = frozenset()
    meta: Mapping[str, Any] = field(default_factory=lambda: _EMPTY_META, compare=False)
    line_number: int = field(default=0, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.postings, tuple):
            object.__setattr__(self, "postings", tuple(self.postings))
        if not self.postings:
            raise ValueError("Transaction must have at least one posting")

    def omitted_postings(self) -> list[Posting]:
        return [posting for posting in self.postings if posting.is_omitted]

    def exchange_postings(self) -> list[Posting]:
        return [posting for posting in self.postings if posting.is_exchange]

    def with_postings(self, postings: tuple[Posting, ...] | list[Posting]) -> Transaction:
        return replace(self, postings=tuple(postings))
