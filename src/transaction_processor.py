import logging

from models import Transaction, TransactionType, ClientAccount, IgnoreReason, ProcessingResult
from ledger_store import LedgerStore

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies transactions to the ledger one at a time, in arrival order.
    Business-rule violations never raise: the record is dropped and the
    returned ProcessingResult says why.
    """

    def __init__(self, store: LedgerStore):
        self._store = store

    def process_transaction(self, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction.

        Deposits and withdrawals are recorded for later reference before
        their own rules are checked. The client's account always exists
        afterwards, even when the record is ignored.
        """
        self._store.record_if_applicable(transaction)
        account = self._store.get_or_create_account(transaction.client_id)

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                result = self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                result = self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                result = self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                result = self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                result = self._handle_chargeback(account, transaction)

        if not result.applied:
            logger.debug(f"Ignored {transaction}: {result.reason.value}")
        return result

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if account.locked:
            return ProcessingResult.ignored(IgnoreReason.ACCOUNT_LOCKED)

        account.credit(transaction.amount)
        return ProcessingResult.success()

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        if account.locked:
            return ProcessingResult.ignored(IgnoreReason.ACCOUNT_LOCKED)

        # Strict: withdrawing the whole available balance counts as an overdraft.
        if not transaction.amount < account.available:
            return ProcessingResult.ignored(IgnoreReason.INSUFFICIENT_FUNDS)

        account.debit(transaction.amount)
        return ProcessingResult.success()

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = self._store.lookup_transaction(transaction.transaction_id)

        if original is None:
            return ProcessingResult.ignored(IgnoreReason.TRANSACTION_NOT_FOUND)

        # No lock gate and no already-disputed guard: repeated disputes stack.
        account.hold(original.amount)
        return ProcessingResult.success()

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = self._store.lookup_transaction(transaction.transaction_id)

        if original is None:
            return ProcessingResult.ignored(IgnoreReason.TRANSACTION_NOT_FOUND)

        # Gated on the account's total hold, not on this transaction being disputed.
        if account.held <= 0:
            return ProcessingResult.ignored(IgnoreReason.NOTHING_HELD)

        account.release_hold(original.amount)
        return ProcessingResult.success()

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original = self._store.lookup_transaction(transaction.transaction_id)

        if original is None:
            return ProcessingResult.ignored(IgnoreReason.TRANSACTION_NOT_FOUND)

        if account.held <= 0:
            return ProcessingResult.ignored(IgnoreReason.NOTHING_HELD)

        account.remove_held(original.amount)
        account.locked = True
        return ProcessingResult.success()
