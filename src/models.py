from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import ClassVar, Dict, NamedTuple, Optional, Type


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


@dataclass(frozen=True)
class Transaction:
    """
    Base of the transaction variants.
    Deposits and withdrawals always carry an amount, the dispute family never does.
    """

    transaction_type: ClassVar[TransactionType]

    client_id: int
    transaction_id: int

    @staticmethod
    def create(
        transaction_type: TransactionType,
        client_id: int,
        transaction_id: int,
        amount: Optional[Decimal] = None,
    ) -> "Transaction":
        """Build the variant for transaction_type. A missing amount on a funds transaction counts as zero."""
        variant = TRANSACTION_VARIANTS[transaction_type]
        if issubclass(variant, FundsTransaction):
            return variant(client_id, transaction_id, Decimal("0") if amount is None else amount)
        return variant(client_id, transaction_id)

    def __str__(self) -> str:
        return f"{self.transaction_type.value}(client={self.client_id}, tx={self.transaction_id})"


@dataclass(frozen=True)
class FundsTransaction(Transaction):
    amount: Decimal

    def __str__(self) -> str:
        return (
            f"{self.transaction_type.value}(client={self.client_id}, "
            f"tx={self.transaction_id}, amount={self.amount})"
        )


class DisputeTransaction(Transaction):
    """References an earlier deposit by transaction_id."""


class Deposit(FundsTransaction):
    transaction_type = TransactionType.DEPOSIT


class Withdrawal(FundsTransaction):
    transaction_type = TransactionType.WITHDRAWAL


class Dispute(DisputeTransaction):
    transaction_type = TransactionType.DISPUTE


class Resolve(DisputeTransaction):
    transaction_type = TransactionType.RESOLVE


class Chargeback(DisputeTransaction):
    transaction_type = TransactionType.CHARGEBACK


TRANSACTION_VARIANTS: Dict[TransactionType, Type[Transaction]] = {
    variant.transaction_type: variant
    for variant in (Deposit, Withdrawal, Dispute, Resolve, Chargeback)
}


class AccountSnapshot(NamedTuple):
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool


class ProcessingStats:
    """Counters for the end of run report."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.malformed = 0

    def record_success(self):
        self.processed += 1

    def record_failure(self):
        self.failed += 1

    def record_malformed(self):
        self.malformed += 1
