"""Centralized ledger text and file access."""

from beanbalance.ledger_reader.parser import ParsedLedger, parse
from beanbalance.ledger_reader.reader import LedgerReader, get_ledger_reader
from beanbalance.ledger_reader.writer import (
    format_ledger,
    format_price,
    format_simplified_ledger,
    format_transaction,
)

__all__ = [
    "ParsedLedger",
    "parse",
    "LedgerReader",
    "get_ledger_reader",
    "format_ledger",
    "format_price",
    "format_simplified_ledger",
    "format_transaction",
]
