import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import Transaction, TransactionType
from ledger_store import LedgerStore


class TestLedgerStore:
    def setup_method(self):
        self.store = LedgerStore()

    def test_fresh_client_is_zeroed(self):
        account = self.store.get_or_create_account(42)
        assert account.client_id == 42
        assert account.available == Decimal("0")
        assert account.held == Decimal("0")
        assert account.total == Decimal("0")
        assert account.locked is False

    def test_get_or_create_returns_same_account(self):
        first = self.store.get_or_create_account(1)
        first.credit(Decimal("5"))
        second = self.store.get_or_create_account(1)
        assert second is first
        assert second.available == Decimal("5")

    def test_records_deposits_and_withdrawals(self):
        deposit = Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=Decimal("10"))
        withdrawal = Transaction(TransactionType.WITHDRAWAL, client_id=1, transaction_id=2, amount=Decimal("3"))
        self.store.record_if_applicable(deposit)
        self.store.record_if_applicable(withdrawal)

        assert self.store.lookup_transaction(1) is deposit
        assert self.store.lookup_transaction(2) is withdrawal

    def test_does_not_record_dispute_resolve_chargeback(self):
        for transaction_type in (TransactionType.DISPUTE, TransactionType.RESOLVE, TransactionType.CHARGEBACK):
            self.store.record_if_applicable(Transaction(transaction_type, client_id=1, transaction_id=7))
        assert self.store.lookup_transaction(7) is None

    def test_dispute_does_not_overwrite_stored_deposit(self):
        deposit = Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=Decimal("10"))
        self.store.record_if_applicable(deposit)
        self.store.record_if_applicable(Transaction(TransactionType.DISPUTE, client_id=1, transaction_id=1))
        assert self.store.lookup_transaction(1) is deposit

    def test_duplicate_transaction_id_overwrites(self):
        first = Transaction(TransactionType.DEPOSIT, client_id=1, transaction_id=1, amount=Decimal("10"))
        second = Transaction(TransactionType.WITHDRAWAL, client_id=1, transaction_id=1, amount=Decimal("2"))
        self.store.record_if_applicable(first)
        self.store.record_if_applicable(second)
        assert self.store.lookup_transaction(1) is second

    def test_lookup_unknown_transaction(self):
        assert self.store.lookup_transaction(99) is None

    def test_get_all_accounts_is_a_snapshot(self):
        self.store.get_or_create_account(1)
        self.store.get_or_create_account(2)
        accounts = self.store.get_all_accounts()
        assert set(accounts) == {1, 2}

        accounts.pop(1)
        assert set(self.store.get_all_accounts()) == {1, 2}
