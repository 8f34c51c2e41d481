import logging
from decimal import Decimal
from typing import Dict, Optional

from models import LoggedTransaction, TransactionType

logger = logging.getLogger(__name__)


class TransactionLog:
    """
    Append-only store of deposits and withdrawals, keyed by transaction id.
    Dispute, resolve and chargeback records look up the original amount and
    owner here.
    """

    def __init__(self):
        self._transactions: Dict[int, LoggedTransaction] = {}

    def record(
        self,
        transaction_id: int,
        client_id: int,
        amount: Decimal,
        transaction_type: TransactionType = TransactionType.DEPOSIT,
    ) -> bool:
        """
        Store a settled transaction for future dispute lookups.
        Returns False and leaves the log untouched if the id is already taken.
        """
        if transaction_id in self._transactions:
            logger.info(f"Transaction log: tx {transaction_id} already recorded, keeping the first one")
            return False

        self._transactions[transaction_id] = LoggedTransaction(
            client_id=client_id,
            amount=amount,
            transaction_type=transaction_type,
        )
        return True

    def lookup(self, transaction_id: int) -> Optional[LoggedTransaction]:
        """Retrieve a stored transaction by ID. The returned object is live."""
        return self._transactions.get(transaction_id)

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def __len__(self) -> int:
        return len(self._transactions)
