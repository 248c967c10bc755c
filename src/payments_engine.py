import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, Optional

from models import Transaction, TransactionType, ClientAccount, ProcessingStats, MAX_AMOUNT_DIGITS, truncate_amount
from ledger_store import LedgerStore
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class TransactionParseError(ValueError):
    """A CSV row could not be turned into a Transaction. Aborts the run."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


class PaymentsEngine:
    """
    Replays a transaction file against a fresh ledger in a single pass.
    Transactions are applied strictly in file order.
    """

    def __init__(self):
        self._store = LedgerStore()
        self._processor = TransactionProcessor(self._store)
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Replaying transactions from {filepath}")
        with open(filepath, "r", encoding="utf-8-sig", newline="") as f:
            return self.process_transactions(self._read_transactions(f))

    def process_transactions(self, transactions: Iterable[Transaction]) -> Dict[int, ClientAccount]:
        """Apply already-parsed transactions and return final account states."""
        for transaction in transactions:
            result = self._processor.process_transaction(transaction)
            self._stats.record(result)

        logger.info(self._stats.summary())
        return self._store.get_all_accounts()

    def _read_transactions(self, lines: Iterable[str]) -> Iterator[Transaction]:
        """Read CSV and yield transactions in file order."""
        reader = csv.DictReader(lines)
        try:
            if reader.fieldnames is None:
                return
            reader.fieldnames = [name.strip() for name in reader.fieldnames]
            for row in reader:
                yield self._parse_csv_row(row, reader.line_num)
        except (csv.Error, UnicodeDecodeError) as e:
            raise TransactionParseError(str(e), reader.line_num) from e

    def _parse_csv_row(self, row: Dict[Optional[str], Optional[str]], line_number: int) -> Transaction:
        """Parse CSV row into Transaction."""
        if None in row:
            raise TransactionParseError(f"too many fields in row {row}", line_number)

        normalized = {k: (v or "").strip() for k, v in row.items()}

        try:
            transaction_type = TransactionType(normalized["type"])
            client_id = self._parse_id(normalized["client"], MAX_CLIENT_ID)
            transaction_id = self._parse_id(normalized["tx"], MAX_TRANSACTION_ID)
            amount = self._parse_amount(normalized.get("amount", ""))
        except KeyError as e:
            raise TransactionParseError(f"missing column {e} in row {row}", line_number) from e
        except (ValueError, InvalidOperation) as e:
            raise TransactionParseError(f"failed to parse row {row}: {e}", line_number) from e

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )

    @staticmethod
    def _parse_id(value: str, maximum: int) -> int:
        if not (value.isascii() and value.isdigit()):
            raise ValueError(f"{value!r} is not an unsigned integer")
        parsed = int(value)
        if parsed > maximum:
            raise ValueError(f"{parsed} is outside 0..{maximum}")
        return parsed

    @staticmethod
    def _parse_amount(value: str) -> Decimal:
        """Missing amounts count as zero; present ones are truncated to 4 places."""
        if not value:
            return Decimal("0")
        # Decimal() also takes digit separators and non-ASCII digits
        if "_" in value or not value.isascii():
            raise ValueError(f"amount {value!r} is not a plain decimal number")
        amount = Decimal(value)
        if not amount.is_finite():
            raise ValueError(f"amount {value!r} is not a finite number")
        if amount and amount.adjusted() >= MAX_AMOUNT_DIGITS:
            raise ValueError(f"amount {value!r} exceeds {MAX_AMOUNT_DIGITS} integer digits")
        return truncate_amount(amount)
