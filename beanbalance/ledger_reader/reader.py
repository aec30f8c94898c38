"""File access for ledgers.

This module is the single place that reads ledger files from disk. Parsing is
delegated to ``beanbalance.ledger_reader.parser``; validation to ``Ledger``.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from beanbalance.domain.errors import LedgerParseError
from beanbalance.domain.ledger import Ledger
from beanbalance.domain.prices import PriceIndex
from beanbalance.domain.simplified import SimplifiedLedger, simplify
from beanbalance.ledger_reader.parser import ParsedLedger, parse
from beanbalance.runtime import get_logger

logger = get_logger(__name__)


class LedgerReader:
    """Read-only access to ledger files."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding

    def read_text(self, ledger_path: Path | str) -> str:
        path = Path(ledger_path)
        logger.debug("Reading ledger %s", path)
        return path.read_text(encoding=self.encoding)

    def parse(self, ledger_path: Path | str) -> ParsedLedger:
        """Parse one ledger file without validating it."""
        try:
            return parse(self.read_text(ledger_path))
        except LedgerParseError as exc:
            logger.warning("Parser reported %d error(s) while loading %s", len(exc.errors), ledger_path)
            raise

    def load(self, ledger_path: Path | str, *, prices: PriceIndex | None = None) -> Ledger:
        """Load and validate one ledger file."""
        parsed = self.parse(ledger_path)
        return Ledger.from_entries(parsed.transactions, parsed.prices, extra_prices=prices)

    def load_many(self, ledger_paths: Sequence[Path | str]) -> Ledger:
        """
        Load several ledger files and merge them in the given order.

        Every file's transactions are validated against the price directives
        of all the files, so one file may hold the prices another one needs.
        """
        parsed = [self.parse(path) for path in ledger_paths]
        shared = PriceIndex.union(PriceIndex(item.prices) for item in parsed)
        ledgers = [Ledger.from_entries(item.transactions, item.prices, extra_prices=shared) for item in parsed]
        return Ledger.merge(ledgers)

    def simplified(self, ledger_path: Path | str) -> SimplifiedLedger:
        """Load one ledger file and simplify it."""
        return simplify(self.load(ledger_path))


_reader: LedgerReader | None = None


def get_ledger_reader() -> LedgerReader:
    """Return a singleton ledger reader instance."""
    global _reader
    if _reader is None:
        _reader = LedgerReader()
    return _reader
