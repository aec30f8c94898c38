"""Per-account multi-currency balances folded from transactions."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Protocol

from beanbalance.domain.amount import Amount, MultiAmount

if TYPE_CHECKING:
    from beanbalance.domain.ledger import Ledger


class _PostingLike(Protocol):
    account: str
    amount: Amount | None


class _TransactionLike(Protocol):
    @property
    def postings(self) -> Sequence[_PostingLike]: ...


class Balance:
    """Balance of one or more accounts.

    Maps account names to their MultiAmount. Accounts whose balance reaches
    zero are removed as soon as it happens, so an absent account means zero.
    """

    def __init__(self) -> None:
        self._accounts: dict[str, MultiAmount] = {}

    @classmethod
    def from_transaction(cls, transaction: _TransactionLike) -> Balance:
        balance = cls()
        balance.update_with_transaction(transaction)
        return balance

    @classmethod
    def from_transactions(cls, transactions: Iterable[_TransactionLike]) -> Balance:
        balance = cls()
        for transaction in transactions:
            balance.update_with_transaction(transaction)
        return balance

    @classmethod
    def from_ledger(cls, ledger: Ledger) -> Balance:
        return cls.from_transactions(ledger.transactions)

    @classmethod
    def from_ledgers(cls, ledgers: Iterable[Ledger]) -> Balance:
        """Fold the transactions of several ledgers, concatenated in the given order."""
        balance = cls()
        for ledger in ledgers:
            for transaction in ledger.transactions:
                balance.update_with_transaction(transaction)
        return balance

    def update_with_transaction(self, transaction: _TransactionLike) -> Balance:
        for posting in transaction.postings:
            if posting.amount is None:
                raise ValueError(f"Posting to {posting.account} has no amount; resolve the transaction first")
        for posting in transaction.postings:
            self.add_amount(posting.account, posting.amount)
        return self

    def add_amount(self, account: str, amount: Amount) -> Balance:
        account_balance = self._accounts.setdefault(account, MultiAmount())
        account_balance.add(amount)
        if account_balance.is_zero():
            del self._accounts[account]
        return self

    def account_names(self) -> list[str]:
        return list(self._accounts)

    def amount_for(self, account: str) -> MultiAmount:
        """A copy of the account's balance; empty when the account is absent."""
        account_balance = self._accounts.get(account)
        return account_balance.copy() if account_balance is not None else MultiAmount()

    def get_account_balance(self, account_prefixes: Sequence[str]) -> MultiAmount:
        """Sum of every account whose name starts with one of the prefixes."""
        total = MultiAmount()
        for account_name, account_balance in self._accounts.items():
            if any(account_name.startswith(prefix) for prefix in account_prefixes):
                total += account_balance
        return total

    def items(self) -> list[tuple[str, MultiAmount]]:
        return [(account, amounts.copy()) for account, amounts in self._accounts.items()]

    def copy(self) -> Balance:
        result = Balance()
        result._accounts = {account: amounts.copy() for account, amounts in self._accounts.items()}
        return result

    def is_zero(self) -> bool:
        return not self._accounts

    def _combine(self, other: Balance, sign: int) -> None:
        for account_name, account_balance in other._accounts.items():
            target = self._accounts.setdefault(account_name, MultiAmount())
            if sign > 0:
                target += account_balance
            else:
                target -= account_balance
        self._remove_empties()

    def _remove_empties(self) -> None:
        for account_name in [name for name, amounts in self._accounts.items() if amounts.is_zero()]:
            del self._accounts[account_name]

    def __iadd__(self, other: Balance) -> Balance:
        self._combine(other, 1)
        return self

    def __isub__(self, other: Balance) -> Balance:
        self._combine(other, -1)
        return self

    def __add__(self, other: Balance) -> Balance:
        result = self.copy()
        result += other
        return result

    def __sub__(self, other: Balance) -> Balance:
        result = self.copy()
        result -= other
        return result

    def __contains__(self, account: object) -> bool:
        return account in self._accounts

    def __len__(self) -> int:
        return len(self._accounts)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Balance):
            return NotImplemented
        return self._accounts == other._accounts

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Balance({len(self._accounts)} account(s))"

    def render(self, accounts: Iterable[str] | None = None) -> str:
        """Report lines ``<account>: <multiamount>``, sorted unless an order is given."""
        names = sorted(self._accounts) if accounts is None else list(accounts)
        return "\n".join(f"{name}: {self.amount_for(name)}" for name in names)

    def __str__(self) -> str:
        return self.render()


def add_transaction(balance: Balance, transaction: _TransactionLike) -> Balance:
    """Return a copy of ``balance`` with ``transaction`` folded in."""
    return balance.copy().update_with_transaction(transaction)
