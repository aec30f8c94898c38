"""Render ledgers back to Beancount text.

The output is accepted again by ``beanbalance.ledger_reader.parse``: price
directives come first, then transactions, separated by blank lines.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from beanbalance.domain.amount import Amount
from beanbalance.domain.ledger import Ledger
from beanbalance.domain.models import FLAG_CLEARED, Posting, Price, Transaction
from beanbalance.domain.simplified import SimplifiedLedger, SimplifiedTransaction

INDENT = "  "


def _quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _format_meta_value(value: Any) -> str:
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, str):
        return _quote(value)
    return str(value)


def _header(
    date_text: str,
    status: str | None,
    payee: str | None,
    description: str,
    tags: Iterable[str],
    links: Iterable[str] = (),
) -> str:
    parts = [date_text, status or FLAG_CLEARED]
    if payee:
        parts.append(_quote(payee))
    parts.append(_quote(description))
    parts.extend(f"#{tag}" for tag in sorted(tags))
    parts.extend(f"^{link}" for link in sorted(links))
    return " ".join(parts)


def format_amount(amount: Amount) -> str:
    return f"{amount.number} {amount.currency}"


def format_price(price: Price) -> str:
    """Format one price directive as Beancount text."""
    return f"{price.date.isoformat()} price {price.base}  {price.rate} {price.quote}\n"


def format_posting(posting: Posting) -> str:
    line = f"{INDENT}{posting.account}"
    if posting.amount is not None:
        line += f"  {format_amount(posting.amount)}"
        if posting.price is not None:
            line += f" @ {format_amount(posting.price)}"
    return line


def format_transaction(transaction: Transaction) -> str:
    """Format one transaction as Beancount text."""
    lines = [
        _header(
            transaction.date.isoformat(),
            transaction.status,
            transaction.payee,
            transaction.description,
            transaction.tags,
            transaction.links,
        )
    ]
    for key, value in transaction.meta.items():
        lines.append(f"{INDENT}{key}: {_format_meta_value(value)}")
    lines.extend(format_posting(posting) for posting in transaction.postings)
    lines.append("")
    return "\n".join(lines)


def format_simplified_transaction(transaction: SimplifiedTransaction) -> str:
    lines = [
        _header(
            transaction.date.isoformat(),
            transaction.status,
            transaction.payee,
            transaction.description,
            transaction.tags,
        )
    ]
    lines.extend(f"{INDENT}{posting.account}  {format_amount(posting.amount)}" for posting in transaction.postings)
    lines.append("")
    return "\n".join(lines)


def _join(prices: Iterable[Price], blocks: Iterable[str]) -> str:
    chunks: list[str] = []
    price_block = "".join(format_price(price) for price in prices)
    if price_block:
        chunks.append(price_block)
    chunks.extend(blocks)
    return "\n".join(chunks)


def format_ledger(ledger: Ledger) -> str:
    return _join(ledger.prices, (format_transaction(txn) for txn in ledger.transactions))


def format_simplified_ledger(ledger: SimplifiedLedger) -> str:
    return _join(ledger.prices, (format_simplified_transaction(txn) for txn in ledger.transactions))
