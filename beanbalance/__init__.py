"""Balances and simplified transaction views for plain-text double-entry ledgers.

Usage:
    from beanbalance import Balance, Ledger, SimplifiedLedger

    ledger = Ledger.from_text(text)
    balance = Balance.from_ledger(ledger)
    for account in sorted(balance.account_names()):
        print(f"{account}: {balance.amount_for(account)}")
"""

from beanbalance.domain import (
    AmbiguousOmissionError,
    Amount,
    Balance,
    CurrencyMismatchError,
    Ledger,
    LedgerError,
    LedgerParseError,
    MonthlyReport,
    MultiAmount,
    MultipleOmissionsError,
    NoPriceAvailableError,
    Posting,
    Price,
    PriceIndex,
    SimplifiedLedger,
    SimplifiedPosting,
    SimplifiedTransaction,
    Transaction,
    TreeBalanceNode,
    UnbalancedTransactionError,
    handle_foreign_currencies,
    simplify,
)

__all__ = [
    "Amount",
    "MultiAmount",
    "Posting",
    "Price",
    "Transaction",
    "PriceIndex",
    "Ledger",
    "Balance",
    "SimplifiedLedger",
    "SimplifiedPosting",
    "SimplifiedTransaction",
    "simplify",
    "TreeBalanceNode",
    "MonthlyReport",
    "handle_foreign_currencies",
    "LedgerError",
    "LedgerParseError",
    "UnbalancedTransactionError",
    "AmbiguousOmissionError",
    "MultipleOmissionsError",
    "NoPriceAvailableError",
    "CurrencyMismatchError",
]
