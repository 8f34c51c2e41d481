import logging
from typing import Dict, List, Optional

from models import AccountSnapshot, ClientAccount, ProcessingResult, Transaction
from transaction_log import TransactionLog
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


class AccountLedger:
    """
    Owns every client account and the transaction log for one run.
    Transactions are applied one at a time, in the order they are given.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transaction_log = TransactionLog()
        self._processor = TransactionProcessor(self._transaction_log)

    @property
    def transaction_log(self) -> TransactionLog:
        return self._transaction_log

    def apply(self, transaction: Transaction) -> ProcessingResult:
        """
        Apply a transaction to the account it names.

        Deposits and withdrawals open an account for a client seen for the
        first time. Disputes, resolves and chargebacks never open one: with
        no account there can be no logged transaction to refer to.
        """
        if transaction.transaction_type.moves_funds:
            account = self._get_or_create_account(transaction.client_id)
        else:
            account = self._accounts.get(transaction.client_id)
            if account is None:
                logger.info(f"{transaction!r}: no account for client {transaction.client_id}")
                return ProcessingResult.UNKNOWN_ACCOUNT

        return self._processor.process_transaction(account, transaction)

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def snapshot_all(self) -> List[AccountSnapshot]:
        """One immutable row per known account, ordered by client id."""
        return [self._accounts[client_id].snapshot() for client_id in sorted(self._accounts)]

    def __len__(self) -> int:
        return len(self._accounts)

    def _get_or_create_account(self, client_id: int) -> ClientAccount:
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]
