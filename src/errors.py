class LedgerError(Exception):
    """Base class for transactions rejected by the ledger. Never fatal to a run."""


class NoClientAccount(LedgerError):
    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"No account for client, id: {client_id}")


class AccountIsLocked(LedgerError):
    def __init__(self, client_id: int):
        self.client_id = client_id
        super().__init__(f"Account is locked, client id: {client_id}")


class TransactionError(LedgerError):
    """Rejection tied to a single transaction id."""

    message = "Transaction rejected"

    def __init__(self, transaction_id: int):
        self.transaction_id = transaction_id
        super().__init__(f"{self.message}, id: {transaction_id}")


class NegativeAmount(TransactionError):
    message = "Negative amount for transaction"


class InsufficientAvailableFunds(TransactionError):
    message = "Insufficient available funds for transaction"


class NoDepositTransaction(TransactionError):
    message = "No deposit transaction"


class TransactionIsNotDisputed(TransactionError):
    message = "Transaction is not disputed"


class TransactionAlreadyDisputed(TransactionError):
    message = "Transaction is already disputed"
