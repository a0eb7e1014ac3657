import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, Optional

from errors import LedgerError
from models import ProcessingStats, Transaction, TransactionType
from registry import LedgerRegistry

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class TransactionParseError(ValueError):
    """A CSV row that does not describe a valid transaction."""


def _parse_id(value: str, name: str, upper_bound: int) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise TransactionParseError(f"{name} is not an integer: {value!r}") from None
    if not 0 <= parsed <= upper_bound:
        raise TransactionParseError(f"{name} out of range: {parsed}")
    return parsed


def _parse_amount(value: str) -> Optional[Decimal]:
    if not value:
        return None
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise TransactionParseError(f"amount is not a decimal: {value!r}") from None
    if not amount.is_finite():
        raise TransactionParseError(f"amount is not finite: {value!r}")
    return amount


def parse_csv_row(row: Dict[Optional[str], Optional[str]]) -> Transaction:
    """
    Parse a csv.DictReader row into a Transaction.
    Headers and values are whitespace-trimmed and the type is case-insensitive.
    An empty or missing amount is allowed, extra trailing columns are ignored.

    Raises:
        TransactionParseError: the row does not describe a valid transaction
    """
    normalized = {
        key.strip(): (value or "").strip()
        for key, value in row.items()
        if isinstance(key, str)
    }

    for column in ("type", "client", "tx"):
        if not normalized.get(column):
            raise TransactionParseError(f"missing {column}")

    try:
        transaction_type = TransactionType(normalized["type"].lower())
    except ValueError:
        raise TransactionParseError(f"unknown transaction type: {normalized['type']!r}") from None

    return Transaction.create(
        transaction_type,
        client_id=_parse_id(normalized["client"], "client", MAX_CLIENT_ID),
        transaction_id=_parse_id(normalized["tx"], "tx", MAX_TRANSACTION_ID),
        amount=_parse_amount(normalized.get("amount", "")),
    )


def read_transactions(filepath: str, stats: Optional[ProcessingStats] = None) -> Iterator[Transaction]:
    """
    Yield transactions from a CSV file in file order.
    Malformed rows are logged and skipped. OSError from opening the file propagates.
    """
    with open(filepath, "r", newline="") as f:
        reader = csv.DictReader(f)
        for row in reader:
            try:
                yield parse_csv_row(row)
            except TransactionParseError as e:
                logger.warning(f"Skipping malformed row at line {reader.line_num}: {e}")
                if stats is not None:
                    stats.record_malformed()


class PaymentsEngine:
    """
    Replays transactions, in order, against a LedgerRegistry.
    Rejected transactions are logged and counted, never fatal.
    """

    def __init__(self, registry: Optional[LedgerRegistry] = None):
        self.registry = registry if registry is not None else LedgerRegistry()
        self.stats = ProcessingStats()

    def process_file(self, filepath: str) -> LedgerRegistry:
        """Process a CSV file and return the registry holding the final account states."""
        logger.info(f"Processing transactions from {filepath}")
        return self.process_transactions(read_transactions(filepath, self.stats))

    def process_transactions(self, transactions: Iterable[Transaction]) -> LedgerRegistry:
        for transaction in transactions:
            try:
                self.registry.process(transaction)
            except LedgerError as e:
                self.stats.record_failure()
                logger.warning(f"Rejected {transaction}: {e}")
            else:
                self.stats.record_success()

        logger.info(
            f"Processing complete: {self.stats.processed} processed, "
            f"{self.stats.failed} rejected, {self.stats.malformed} malformed"
        )
        return self.registry
