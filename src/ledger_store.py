from typing import Dict, Optional

from models import Transaction, TransactionType, ClientAccount

STORED_TYPES = frozenset({TransactionType.DEPOSIT, TransactionType.WITHDRAWAL})


class LedgerStore:
    """
    In-memory owner of client accounts and referenceable transactions.
    Only deposits and withdrawals are kept, for later dispute lookups.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, Transaction] = {}

    def get_or_create_account(self, client_id: int) -> ClientAccount:
        """Get existing account or create a zeroed, unlocked one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def record_if_applicable(self, transaction: Transaction) -> None:
        """
        Store a deposit or withdrawal under its transaction id.
        Disputes, resolves and chargebacks are never stored.
        A repeated id replaces the earlier entry.
        """
        if transaction.transaction_type not in STORED_TYPES:
            return
        self._transactions[transaction.transaction_id] = transaction

    def lookup_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
