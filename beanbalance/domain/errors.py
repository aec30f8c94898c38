"""Error types raised while building, validating and simplifying ledgers.

Every error derives from LedgerError and carries a ``kind`` string so callers
can dispatch on one attribute instead of a chain of isinstance checks.
"""

from __future__ import annotations

import datetime as dt
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from beanbalance.domain.amount import MultiAmount
    from beanbalance.domain.models import Transaction


def _describe(transaction: Transaction) -> str:
    label = transaction.description or transaction.payee or ""
    location = f" (line {transaction.line_number})" if transaction.line_number else ""
    return f'{transaction.date.isoformat()} "{label}"{location}'


class LedgerError(Exception):
    """Base class for all ledger failures."""

    kind = "ledger"


class LedgerParseError(LedgerError):
    """The parser rejected the ledger text. Holds the parser's errors verbatim."""

    kind = "parse"

    def __init__(self, errors: Sequence[Any]) -> None:
        self.errors = list(errors)
        preview = "; ".join(str(getattr(err, "message", err)) for err in self.errors[:3])
        super().__init__(f"Parse error ({len(self.errors)} issue(s)): {preview}")


class UnbalancedTransactionError(LedgerError):
    kind = "unbalanced"

    def __init__(self, transaction: Transaction, residual: MultiAmount) -> None:
        self.transaction = transaction
        self.residual = residual
        residual_text = ", ".join(str(amount) for amount in residual.amounts())
        super().__init__(f"Unbalanced transaction {_describe(transaction)}: residual {residual_text}")


class AmbiguousOmissionError(LedgerError):
    kind = "ambiguous_omission"

    def __init__(self, transaction: Transaction, reason: str) -> None:
        self.transaction = transaction
        self.reason = reason
        super().__init__(f"Cannot infer omitted amount in {_describe(transaction)}: {reason}")


class MultipleOmissionsError(LedgerError):
    kind = "multiple_omissions"

    def __init__(self, transaction: Transaction, accounts: Sequence[str]) -> None:
        self.transaction = transaction
        self.accounts = list(accounts)
        super().__init__(
            f"Transaction {_describe(transaction)} omits more than one amount: {', '.join(self.accounts)}"
        )


class NoPriceAvailableError(LedgerError):
    kind = "no_price"

    def __init__(self, base: str, quote: str, as_of: dt.date, *, known_pair: bool = False) -> None:
        self.base = base
        self.quote = quote
        self.as_of = as_of
        self.known_pair = known_pair
        if known_pair:
            detail = f"no rate recorded on or before {as_of.isoformat()}"
        else:
            detail = "no rate recorded for this pair"
        super().__init__(f"No price available for {base} -> {quote}: {detail}")


class CurrencyMismatchError(LedgerError, ValueError):
    kind = "currency_mismatch"

    def __init__(self, left: str, right: str) -> None:
        self.left = left
        self.right = right
        super().__init__(f"Cannot combine amounts in {left} and {right} without a conversion")
