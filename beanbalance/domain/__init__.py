"""Core domain models for beanbalance.

This package provides the value types and pure transforms:
- Amount, MultiAmount: currency-tagged exact quantities
- Posting, Transaction, Price: ledger records
- PriceIndex: exchange rates by pair and date
- Ledger, Balance, SimplifiedLedger: the aggregate and its derived views

Usage:
    from beanbalance.domain import Balance, Ledger, SimplifiedLedger
"""

from beanbalance.domain.amount import Amount, MultiAmount
from beanbalance.domain.balance import Balance, add_transaction
from beanbalance.domain.errors import (
    AmbiguousOmissionError,
    CurrencyMismatchError,
    LedgerError,
    LedgerParseError,
    MultipleOmissionsError,
    NoPriceAvailableError,
    UnbalancedTransactionError,
)
from beanbalance.domain.ledger import Ledger
from beanbalance.domain.models import Posting, Price, Transaction
from beanbalance.domain.omissions import resolve_transaction
from beanbalance.domain.prices import PriceIndex, implied_prices
from beanbalance.domain.reports import MonthlyBalance, MonthlyReport, TreeBalanceNode
from beanbalance.domain.simplified import (
    SimplifiedLedger,
    SimplifiedPosting,
    SimplifiedTransaction,
    simplify,
)
from beanbalance.domain.trading import handle_foreign_currencies

__all__ = [
    "Amount",
    "MultiAmount",
    "Posting",
    "Price",
    "Transaction",
    "PriceIndex",
    "implied_prices",
    "resolve_transaction",
    "Ledger",
    "Balance",
    "add_transaction",
    "SimplifiedLedger",
    "SimplifiedPosting",
    "SimplifiedTransaction",
    "simplify",
    "TreeBalanceNode",
    "MonthlyBalance",
    "MonthlyReport",
    "handle_foreign_currencies",
    # Errors
    "LedgerError",
    "LedgerParseError",
    "UnbalancedTransactionError",
    "AmbiguousOmissionError",
    "MultipleOmissionsError",
    "NoPriceAvailableError",
    "CurrencyMismatchError",
]
