import logging
from typing import Dict, Iterator, Optional

from account import ClientAccount
from errors import NoClientAccount
from models import (
    AccountSnapshot,
    Chargeback,
    Deposit,
    Dispute,
    Resolve,
    Transaction,
    Withdrawal,
)

logger = logging.getLogger(__name__)


class AccountSnapshots:
    """
    Lazy view over the registry's accounts.
    Every iteration starts over and reflects the accounts as they are at that moment.
    """

    def __init__(self, accounts: Dict[int, ClientAccount]):
        self._accounts = accounts

    def __iter__(self) -> Iterator[AccountSnapshot]:
        return (account.snapshot() for account in self._accounts.values())

    def __len__(self) -> int:
        return len(self._accounts)


class LedgerRegistry:
    """
    Owns every client account and routes transactions to them.
    Only a deposit or a withdrawal may open an account.
    Not thread-safe: transactions must be applied one at a time, in arrival order.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def process(self, transaction: Transaction) -> None:
        """
        Apply a single transaction.

        Raises:
            NoClientAccount: dispute, resolve or chargeback for a client never seen before
            LedgerError: whatever the account operation rejects
        """
        account = self._accounts.get(transaction.client_id)
        if account is None:
            if not isinstance(transaction, (Deposit, Withdrawal)):
                raise NoClientAccount(transaction.client_id)
            account = ClientAccount(client_id=transaction.client_id)
            self._accounts[transaction.client_id] = account
            logger.debug(f"Opened account for client {transaction.client_id}")

        match transaction:
            case Deposit():
                account.deposit(transaction.transaction_id, transaction.amount)
            case Withdrawal():
                account.withdraw(transaction.transaction_id, transaction.amount)
            case Dispute():
                account.dispute(transaction.transaction_id)
            case Resolve():
                account.resolve(transaction.transaction_id)
            case Chargeback():
                account.chargeback(transaction.transaction_id)
            case _:
                raise TypeError(f"Unsupported transaction: {transaction!r}")

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def snapshot(self) -> AccountSnapshots:
        """Return a restartable iterable of AccountSnapshot, one per known account."""
        return AccountSnapshots(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts
