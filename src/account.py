from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict

from errors import (
    AccountIsLocked,
    InsufficientAvailableFunds,
    NegativeAmount,
    NoDepositTransaction,
    TransactionAlreadyDisputed,
    TransactionIsNotDisputed,
)
from models import AccountSnapshot


@dataclass
class DepositRecord:
    """A deposit kept for later dispute lookups. Withdrawals are never recorded."""

    amount: Decimal
    disputed: bool = False


@dataclass
class ClientAccount:
    """
    Balance state for one client.

    total is kept equal to available + held by every operation rather than derived.
    Each operation validates everything before writing a field, so a raised
    LedgerError leaves the account untouched. Once locked, every operation raises
    AccountIsLocked.
    """

    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    locked: bool = False
    deposits: Dict[int, DepositRecord] = field(default_factory=dict)

    def deposit(self, transaction_id: int, amount: Decimal) -> None:
        """Credit available and total, and remember the deposit so it can be disputed."""
        self._ensure_unlocked()
        if amount < 0:
            raise NegativeAmount(transaction_id)

        self.available += amount
        self.total += amount
        # A reused transaction id replaces the earlier record.
        self.deposits[transaction_id] = DepositRecord(amount)

    def withdraw(self, transaction_id: int, amount: Decimal) -> None:
        """Debit available and total."""
        self._ensure_unlocked()
        if amount < 0:
            raise NegativeAmount(transaction_id)
        if self.available < amount:
            raise InsufficientAvailableFunds(transaction_id)

        self.available -= amount
        self.total -= amount

    def dispute(self, transaction_id: int) -> None:
        """Move a deposit's amount from available to held. The funds must still be available."""
        self._ensure_unlocked()
        deposit = self._get_deposit(transaction_id)
        if deposit.disputed:
            raise TransactionAlreadyDisputed(transaction_id)
        if self.available < deposit.amount:
            raise InsufficientAvailableFunds(transaction_id)

        self.available -= deposit.amount
        self.held += deposit.amount
        deposit.disputed = True

    def resolve(self, transaction_id: int) -> None:
        """Release a disputed deposit's held funds back to available."""
        self._ensure_unlocked()
        deposit = self._get_disputed_deposit(transaction_id)

        self.held -= deposit.amount
        self.available += deposit.amount
        deposit.disputed = False

    def chargeback(self, transaction_id: int) -> None:
        """Reverse a disputed deposit and lock the account for good."""
        self._ensure_unlocked()
        deposit = self._get_disputed_deposit(transaction_id)

        self.held -= deposit.amount
        self.total -= deposit.amount
        deposit.disputed = False
        self.locked = True

    def snapshot(self) -> AccountSnapshot:
        return AccountSnapshot(self.client_id, self.available, self.held, self.total, self.locked)

    def _ensure_unlocked(self) -> None:
        if self.locked:
            raise AccountIsLocked(self.client_id)

    def _get_deposit(self, transaction_id: int) -> DepositRecord:
        deposit = self.deposits.get(transaction_id)
        if deposit is None:
            raise NoDepositTransaction(transaction_id)
        return deposit

    def _get_disputed_deposit(self, transaction_id: int) -> DepositRecord:
        deposit = self._get_deposit(transaction_id)
        if not deposit.disputed:
            raise TransactionIsNotDisputed(transaction_id)
        return deposit
