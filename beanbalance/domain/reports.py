"""Reports derived from balances: account-tree rollups and monthly summaries."""

from __future__ import annotations

from dataclasses import dataclass, field

from beanbalance.domain.amount import MultiAmount
from beanbalance.domain.balance import Balance
from beanbalance.domain.ledger import Ledger

ACCOUNT_SEPARATOR = ":"


@dataclass
class TreeBalanceNode:
    """Balance rolled up along the account hierarchy.

    Each node's balance is the sum of every account below it; the root holds
    the sum of all accounts.
    """

    balance: MultiAmount = field(default_factory=MultiAmount)
    children: dict[str, TreeBalanceNode] = field(default_factory=dict)

    @classmethod
    def from_balance(cls, balance: Balance) -> TreeBalanceNode:
        root = cls()
        for account_name, account_balance in balance.items():
            node = root
            node.balance += account_balance
            for part in account_name.split(ACCOUNT_SEPARATOR):
                node = node.children.setdefault(part, cls())
                node.balance += account_balance
        return root

    def find(self, account: str) -> TreeBalanceNode | None:
        """Walk down the colon-separated path; None if any segment is missing."""
        node: TreeBalanceNode | None = self
        for part in account.split(ACCOUNT_SEPARATOR):
            if node is None:
                return None
            node = node.children.get(part)
        return node

    def walk(self, prefix: str = "") -> list[tuple[str, MultiAmount]]:
        """Depth-first (account, balance) pairs below this node, children sorted by name."""
        rows: list[tuple[str, MultiAmount]] = []
        for name in sorted(self.children):
            child = self.children[name]
            path = f"{prefix}{ACCOUNT_SEPARATOR}{name}" if prefix else name
            rows.append((path, child.balance.copy()))
            rows.extend(child.walk(path))
        return rows


@dataclass
class MonthlyBalance:
    year: int
    month: int
    monthly_change: Balance = field(default_factory=Balance)
    total: Balance = field(default_factory=Balance)


@dataclass
class MonthlyReport:
    monthly_balances: list[MonthlyBalance] = field(default_factory=list)

    @classmethod
    def from_ledger(cls, ledger: Ledger) -> MonthlyReport:
        """
        Group transactions into runs of the same calendar month, in ledger order.

        Each entry holds the change over its month and the running total at the
        end of it. A month that reappears after a different month starts a new
        entry, so callers wanting one entry per month should sort by date first.
        """
        report = cls()
        current: MonthlyBalance | None = None
        total = Balance()

        for transaction in ledger.transactions:
            key = (transaction.date.year, transaction.date.month)
            if current is None or (current.year, current.month) != key:
                if current is not None:
                    current.total = total.copy()
                    report.monthly_balances.append(current)
                current = MonthlyBalance(year=key[0], month=key[1])

            current.monthly_change.update_with_transaction(transaction)
            total.update_with_transaction(transaction)

        if current is not None:
            current.total = total.copy()
            report.monthly_balances.append(current)

        return report
