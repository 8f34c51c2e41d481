import csv
import logging
from decimal import Decimal, InvalidOperation, ROUND_DOWN
from typing import Dict, Iterable, List, Optional, TextIO

from ledger import AccountLedger
from models import AccountSnapshot, ClientAccount, ProcessingStats, Transaction, TransactionType

logger = logging.getLogger(__name__)

AMOUNT_PRECISION = Decimal("0.0001")
MAX_AMOUNT = Decimal(10) ** 24


class PaymentsEngine:
    """
    Reads transaction rows from CSV and feeds them, in file order, into a ledger.
    Rows that cannot be parsed are logged and skipped.
    """

    def __init__(self, ledger: Optional[AccountLedger] = None):
        self._ledger = ledger if ledger is not None else AccountLedger()
        self._stats = ProcessingStats()

    @property
    def ledger(self) -> AccountLedger:
        return self._ledger

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")
        # Undecodable bytes become U+FFFD, so only the row holding them fails to parse.
        with open(filepath, "r", newline="", encoding="utf-8", errors="replace") as f:
            return self.process_stream(f)

    def process_stream(self, stream: TextIO) -> Dict[int, ClientAccount]:
        """Process CSV text (header row first) and return final account states."""
        self.process_transactions(self._read_transactions(stream))
        logger.info(repr(self._stats))
        return self._ledger.get_all_accounts()

    def process_transactions(self, transactions: Iterable[Transaction]) -> None:
        for transaction in transactions:
            result = self._ledger.apply(transaction)
            self._stats.record(result)
            if not result.applied:
                logger.debug(f"Ignored {transaction!r}: {result.value}")

    def snapshot_all(self) -> List[AccountSnapshot]:
        return self._ledger.snapshot_all()

    def _read_transactions(self, stream: TextIO) -> Iterable[Transaction]:
        reader = csv.DictReader(stream)
        for row in reader:
            transaction = self._parse_csv_row(row)
            if transaction is None:
                self._stats.record_skipped_row()
                continue
            yield transaction

    def _parse_csv_row(self, row: Dict[Optional[str], Optional[str]]) -> Optional[Transaction]:
        """Parse CSV row into Transaction."""
        try:
            # Short rows leave trailing values as None, long rows put the excess under a None key.
            normalized = {k.strip(): (v or "").strip() for k, v in row.items() if k is not None}

            transaction_type = TransactionType(normalized["type"].lower())
            client_id = parse_id(normalized["client"])
            transaction_id = parse_id(normalized["tx"])

            amount = None
            amount_str = normalized.get("amount", "")
            if amount_str and transaction_type.moves_funds:
                amount = parse_amount(amount_str)

            if transaction_type.moves_funds and amount is None:
                raise ValueError(f"{transaction_type.value} is missing an amount")

            return Transaction(
                transaction_type=transaction_type,
                client_id=client_id,
                transaction_id=transaction_id,
                amount=amount,
            )
        except (KeyError, ValueError, InvalidOperation) as e:
            logger.warning(f"Failed to parse row {row}: {e!r}")
            return None


def parse_id(value: str) -> int:
    parsed = int(value)
    if parsed < 0:
        raise ValueError(f"id must be unsigned, got {value}")
    return parsed


def parse_amount(value: str) -> Decimal:
    """Parse an amount and truncate it to four decimal places."""
    amount = Decimal(value)
    if not amount.is_finite():
        raise ValueError(f"amount must be finite, got {value}")
    if abs(amount) >= MAX_AMOUNT:
        raise ValueError(f"amount too large, got {value}")
    return amount.quantize(AMOUNT_PRECISION, rounding=ROUND_DOWN)
