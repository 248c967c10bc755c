from collections import Counter
from dataclasses import dataclass
from decimal import Context, Decimal, DivisionByZero, InvalidOperation, Overflow, ROUND_DOWN
from enum import Enum
from typing import Optional

AMOUNT_PRECISION = Decimal("0.0001")

# Largest accepted amount on ingestion, in integer digits.
MAX_AMOUNT_DIGITS = 40

# Wide enough that sums of ingestible amounts are always exact.
LEDGER_CONTEXT = Context(prec=100, rounding=ROUND_DOWN, traps=[InvalidOperation, DivisionByZero, Overflow])


def truncate_amount(value: Decimal) -> Decimal:
    """Drop digits past the 4th fractional place, truncating toward zero."""
    return value.quantize(AMOUNT_PRECISION, rounding=ROUND_DOWN, context=LEDGER_CONTEXT)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class IgnoreReason(Enum):
    ACCOUNT_LOCKED = "account_locked"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    NOTHING_HELD = "nothing_held"


@dataclass(frozen=True)
class ProcessingResult:
    """
    Outcome of applying one transaction.
    Either applied, or ignored with the business rule that dropped it.
    """

    reason: Optional[IgnoreReason] = None

    @property
    def applied(self) -> bool:
        return self.reason is None

    @classmethod
    def success(cls) -> "ProcessingResult":
        return cls()

    @classmethod
    def ignored(cls, reason: IgnoreReason) -> "ProcessingResult":
        return cls(reason=reason)


@dataclass(frozen=True)
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Decimal = Decimal("0")

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return LEDGER_CONTEXT.add(self.available, self.held)

    def credit(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.add(self.available, amount)

    def debit(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.subtract(self.available, amount)

    def hold(self, amount: Decimal) -> None:
        self.available = LEDGER_CONTEXT.subtract(self.available, amount)
        self.held = LEDGER_CONTEXT.add(self.held, amount)

    def release_hold(self, amount: Decimal) -> None:
        self.held = LEDGER_CONTEXT.subtract(self.held, amount)
        self.available = LEDGER_CONTEXT.add(self.available, amount)

    def remove_held(self, amount: Decimal) -> None:
        # total follows held down, available is untouched
        self.held = LEDGER_CONTEXT.subtract(self.held, amount)


class ProcessingStats:
    """Counters for applied and ignored records over one run."""

    def __init__(self):
        self.applied = 0
        self.ignored: Counter = Counter()

    def record(self, result: ProcessingResult) -> None:
        if result.applied:
            self.applied += 1
        else:
            self.ignored[result.reason] += 1

    @property
    def total_ignored(self) -> int:
        return sum(self.ignored.values())

    def summary(self) -> str:
        parts = [f"Applied: {self.applied}", f"Ignored: {self.total_ignored}"]
        for reason, count in sorted(self.ignored.items(), key=lambda item: item[0].value):
            parts.append(f"{reason.value}={count}")
        return ", ".join(parts)
