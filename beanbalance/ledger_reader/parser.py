"""Adapter from Beancount's parser to beanbalance records.

This module is the single place that calls the Beancount parser. It parses
text only (no booking, no plugins, no includes), so omitted posting amounts
arrive as Beancount's ``MISSING`` marker and are resolved by beanbalance.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from beancount.core import data
from beancount.core.number import MISSING
from beancount.parser import parser

from beanbalance.domain.amount import Amount
from beanbalance.domain.errors import LedgerParseError
from beanbalance.domain.models import Posting, Price, Transaction
from beanbalance.runtime import get_logger

logger = get_logger(__name__)

_SOURCE_META_KEYS = frozenset({"filename", "lineno"})


@dataclass(frozen=True)
class EntryError:
    """Parser-style error for an entry the parser accepted but beanbalance cannot use."""

    source: dict[str, Any]
    message: str
    entry: Any = None


@dataclass(frozen=True)
class ParsedLedger:
    """Structured records as the parser produced them, not yet validated."""

    transactions: list[Transaction] = field(default_factory=list)
    prices: list[Price] = field(default_factory=list)


def _present(value: Any) -> bool:
    return value is not None and value is not MISSING


def _user_meta(meta: dict[str, Any] | None) -> dict[str, Any]:
    if not meta:
        return {}
    return {
        str(key): value
        for key, value in meta.items()
        if key not in _SOURCE_META_KEYS and not str(key).startswith("__")
    }


def _line_number(meta: dict[str, Any] | None) -> int:
    raw_lineno = (meta or {}).get("lineno", 0)
    try:
        return int(raw_lineno)
    except (TypeError, ValueError):
        return 0


def _map_units(posting: data.Posting, errors: list[EntryError]) -> Amount | None:
    units = posting.units
    if not _present(units):
        return None
    number = getattr(units, "number", None)
    currency = getattr(units, "currency", None)
    if not _present(number) and not _present(currency):
        return None
    if not _present(number) or not _present(currency):
        errors.append(
            EntryError(
                source=dict(posting.meta or {}),
                message=f"Incomplete amount on posting to {posting.account}",
            )
        )
        return None
    return Amount(Decimal(number), str(currency))


def _cost_as_price(cost: Any, units: Amount | None) -> Amount | None:
    """Per-unit cost of a ``{...}`` annotation, when it can be known."""
    currency = getattr(cost, "currency", None)
    if not _present(currency):
        return None

    per_unit = getattr(cost, "number_per", getattr(cost, "number", None))
    total = getattr(cost, "number_total", None)
    number = Decimal(per_unit) if _present(per_unit) else None
    if _present(total) and units is not None and units.number != 0:
        number = (number or Decimal("0")) + Decimal(total) / abs(units.number)
    if number is None:
        return None
    return Amount(number, str(currency))


def _map_posting(posting: data.Posting, errors: list[EntryError]) -> Posting:
    amount = _map_units(posting, errors)

    price: Amount | None = None
    if posting.cost is not None:
        price = _cost_as_price(posting.cost, amount)
    if price is None and posting.price is not None:
        if _present(posting.price.number) and _present(posting.price.currency):
            price = Amount(Decimal(posting.price.number), str(posting.price.currency))

    return Posting(
        account=posting.account,
        amount=amount,
        price=price,
        meta=_user_meta(posting.meta),
    )


def _map_transaction(txn: data.Transaction, errors: list[EntryError]) -> Transaction | None:
    if not txn.postings:
        errors.append(EntryError(source=dict(txn.meta or {}), message="Transaction has no postings", entry=txn))
        return None
    return Transaction(
        date=txn.date,
        postings=tuple(_map_posting(posting, errors) for posting in txn.postings),
        description=txn.narration or "",
        payee=txn.payee or None,
        status=txn.flag,
        tags=frozenset(txn.tags or ()),
        links=frozenset(txn.links or ()),
        meta=_user_meta(txn.meta),
        line_number=_line_number(txn.meta),
    )


def _map_price(entry: data.Price) -> Price:
    return Price(
        date=entry.date,
        base=entry.currency,
        quote=entry.amount.currency,
        rate=Decimal(entry.amount.number),
    )


def parse(text: str) -> ParsedLedger:
    """
    Parse ledger text into transactions and price directives.

    Directives other than transactions and prices (open, close, balance,
    note, ...) are ignored.

    Raises:
        LedgerParseError: the parser reported errors; they are carried verbatim.
    """
    entries, parse_errors, _options = parser.parse_string(text)
    if parse_errors:
        logger.debug("Parser reported %d error(s)", len(parse_errors))
        raise LedgerParseError(parse_errors)

    errors: list[EntryError] = []
    transactions: list[Transaction] = []
    prices: list[Price] = []
    for entry in entries:
        if isinstance(entry, data.Transaction):
            transaction = _map_transaction(entry, errors)
            if transaction is not None:
                transactions.append(transaction)
        elif isinstance(entry, data.Price):
            prices.append(_map_price(entry))

    if errors:
        raise LedgerParseError(errors)

    logger.debug("Parsed %d transaction(s) and %d price(s)", len(transactions), len(prices))
    return ParsedLedger(transactions=transactions, prices=prices)
