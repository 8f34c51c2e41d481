from dataclasses import dataclass
from decimal import Context, Decimal, localcontext
from enum import Enum
from typing import Optional

# Amounts stay below 10**24 with 4 decimal places, so balances need far fewer
# digits than this to be summed exactly.
BALANCE_CONTEXT = Context(prec=60)


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def moves_funds(self) -> bool:
        """Deposits and withdrawals carry an amount and get logged."""
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class TransactionState(Enum):
    SETTLED = "settled"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


class ProcessingResult(Enum):
    SUCCESS = "success"
    ACCOUNT_FROZEN = "account_frozen"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_AMOUNT = "invalid_amount"
    DUPLICATE_TRANSACTION = "duplicate_transaction"
    UNKNOWN_ACCOUNT = "unknown_account"
    UNKNOWN_TRANSACTION = "unknown_transaction"
    CLIENT_MISMATCH = "client_mismatch"
    ALREADY_DISPUTED = "already_disputed"
    CHARGED_BACK = "charged_back"
    NOT_DISPUTED = "not_disputed"

    @property
    def applied(self) -> bool:
        return self is ProcessingResult.SUCCESS


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class LoggedTransaction:
    """A deposit or withdrawal kept around so later disputes can find it."""

    client_id: int
    amount: Decimal
    transaction_type: TransactionType
    state: TransactionState = TransactionState.SETTLED

    @property
    def disputed(self) -> bool:
        return self.state is TransactionState.DISPUTED


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        with localcontext(BALANCE_CONTEXT):
            return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        with localcontext(BALANCE_CONTEXT):
            self.available += amount

    def debit(self, amount: Decimal) -> None:
        with localcontext(BALANCE_CONTEXT):
            self.available -= amount

    def hold(self, amount: Decimal) -> None:
        with localcontext(BALANCE_CONTEXT):
            self.available -= amount
            self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        with localcontext(BALANCE_CONTEXT):
            self.held -= amount
            self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        with localcontext(BALANCE_CONTEXT):
            self.held -= amount

    def freeze(self) -> None:
        self.locked = True

    def snapshot(self) -> "AccountSnapshot":
        return AccountSnapshot(
            client_id=self.client_id,
            available=self.available,
            held=self.held,
            total=self.total,
            locked=self.locked,
        )


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: Decimal
    held: Decimal
    total: Decimal
    locked: bool


class ProcessingStats:
    """Counters for tracking processing statistics."""

    def __init__(self):
        self.processed = 0
        self.rejected = 0
        self.skipped_rows = 0

    def record(self, result: ProcessingResult) -> None:
        if result.applied:
            self.processed += 1
        else:
            self.rejected += 1

    def record_skipped_row(self) -> None:
        self.skipped_rows += 1

    def __repr__(self) -> str:
        return f"Processed: {self.processed}, Rejected: {self.rejected}, Skipped rows: {self.skipped_rows}"
