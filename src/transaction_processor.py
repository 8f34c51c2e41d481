import logging
from typing import Optional, Tuple

from models import (
    ClientAccount,
    LoggedTransaction,
    ProcessingResult,
    Transaction,
    TransactionState,
    TransactionType,
)
from transaction_log import TransactionLog

logger = logging.getLogger(__name__)


class TransactionProcessor:
    """
    Applies a single transaction to an account.
    Returns ProcessingResult to indicate success or why the transaction was ignored.
    A rejected transaction leaves both the account and the log untouched.
    """

    def __init__(self, transaction_log: TransactionLog):
        self._transaction_log = transaction_log

    def process_transaction(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        """
        Process a single transaction against the account it names.

        Deposits and withdrawals are refused on a locked account. Disputes,
        resolves and chargebacks still apply to it.
        """
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                return self._handle_deposit(account, transaction)
            case TransactionType.WITHDRAWAL:
                return self._handle_withdrawal(account, transaction)
            case TransactionType.DISPUTE:
                return self._handle_dispute(account, transaction)
            case TransactionType.RESOLVE:
                return self._handle_resolve(account, transaction)
            case TransactionType.CHARGEBACK:
                return self._handle_chargeback(account, transaction)

    def _check_funds_movement(self, account: ClientAccount, transaction: Transaction) -> Optional[ProcessingResult]:
        """Checks shared by deposits and withdrawals. Zero and negative amounts are refused for both."""
        label = transaction.transaction_type.value.capitalize()

        if transaction.amount is None or transaction.amount <= 0:
            logger.warning(f"{label} tx {transaction.transaction_id}: invalid amount {transaction.amount}")
            return ProcessingResult.INVALID_AMOUNT

        if account.locked:
            logger.info(f"{label} tx {transaction.transaction_id}: account {account.client_id} is locked")
            return ProcessingResult.ACCOUNT_FROZEN

        if transaction.transaction_id in self._transaction_log:
            logger.info(f"{label} tx {transaction.transaction_id}: already processed, skipping")
            return ProcessingResult.DUPLICATE_TRANSACTION

        return None

    def _handle_deposit(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        rejection = self._check_funds_movement(account, transaction)
        if rejection is not None:
            return rejection

        account.credit(transaction.amount)
        self._transaction_log.record(
            transaction.transaction_id, account.client_id, transaction.amount, TransactionType.DEPOSIT
        )
        return ProcessingResult.SUCCESS

    def _handle_withdrawal(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        rejection = self._check_funds_movement(account, transaction)
        if rejection is not None:
            return rejection

        if account.available < transaction.amount:
            logger.info(
                f"Withdrawal tx {transaction.transaction_id}: insufficient funds "
                f"(available {account.available}, requested {transaction.amount})"
            )
            return ProcessingResult.INSUFFICIENT_FUNDS

        account.debit(transaction.amount)
        self._transaction_log.record(
            transaction.transaction_id, account.client_id, transaction.amount, TransactionType.WITHDRAWAL
        )
        return ProcessingResult.SUCCESS

    def _find_original(self, transaction: Transaction) -> Tuple[Optional[LoggedTransaction], ProcessingResult]:
        label = transaction.transaction_type.value.capitalize()
        original = self._transaction_log.lookup(transaction.transaction_id)

        if original is None:
            logger.info(f"{label} for tx {transaction.transaction_id}: transaction not found")
            return None, ProcessingResult.UNKNOWN_TRANSACTION

        if original.client_id != transaction.client_id:
            logger.warning(
                f"{label} for tx {transaction.transaction_id}: client mismatch "
                f"(expected {original.client_id}, got {transaction.client_id})"
            )
            return None, ProcessingResult.CLIENT_MISMATCH

        return original, ProcessingResult.SUCCESS

    def _handle_dispute(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, result = self._find_original(transaction)
        if original is None:
            return result

        if original.state is TransactionState.DISPUTED:
            logger.warning(f"Dispute for tx {transaction.transaction_id}: transaction already disputed")
            return ProcessingResult.ALREADY_DISPUTED

        if original.state is TransactionState.CHARGED_BACK:
            logger.warning(f"Dispute for tx {transaction.transaction_id}: transaction was charged back")
            return ProcessingResult.CHARGED_BACK

        account.hold(original.amount)
        original.state = TransactionState.DISPUTED
        return ProcessingResult.SUCCESS

    def _handle_resolve(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, result = self._find_original(transaction)
        if original is None:
            return result

        if not original.disputed:
            logger.info(f"Resolve for tx {transaction.transaction_id}: transaction is not disputed")
            return ProcessingResult.NOT_DISPUTED

        account.release_hold(original.amount)
        original.state = TransactionState.SETTLED
        return ProcessingResult.SUCCESS

    def _handle_chargeback(self, account: ClientAccount, transaction: Transaction) -> ProcessingResult:
        original, result = self._find_original(transaction)
        if original is None:
            return result

        if not original.disputed:
            logger.info(f"Chargeback for tx {transaction.transaction_id}: transaction is not disputed")
            return ProcessingResult.NOT_DISPUTED

        account.remove_held(original.amount)
        account.freeze()
        original.state = TransactionState.CHARGED_BACK
        return ProcessingResult.SUCCESS
