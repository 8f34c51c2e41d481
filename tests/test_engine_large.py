import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import Transaction, TransactionType
from payments_engine import PaymentsEngine


def write_rows(tmp_path, rows):
    csv_file = tmp_path / "large_test.csv"
    csv_file.write_text('\n'.join(["type, client, tx, amount"] + rows))
    return str(csv_file)


def assert_consistent(snapshots):
    for snapshot in snapshots:
        assert snapshot.total == snapshot.available + snapshot.held, f"Client {snapshot.client_id}"
        if snapshot.held == 0:
            assert snapshot.available >= 0, f"Client {snapshot.client_id}"


class TestPaymentsEngineLargeScale:
    def test_many_clients_plain_funds_movement(self, tmp_path):
        """1000 clients, each deposits and withdraws in a fixed pattern; every tenth overdraws once."""
        num_clients = 1000
        rows = []
        tx_id = 1
        for client_id in range(1, num_clients + 1):
            for kind, amount in (("deposit", "100"), ("deposit", "200.5"), ("withdrawal", "50.25")):
                rows.append(f"{kind}, {client_id}, {tx_id}, {amount}")
                tx_id += 1
            if client_id % 10 == 0:
                rows.append(f"withdrawal, {client_id}, {tx_id}, 1000")
                tx_id += 1

        engine = PaymentsEngine()
        engine.process_file(write_rows(tmp_path, rows))
        snapshots = engine.snapshot_all()

        assert [s.client_id for s in snapshots] == list(range(1, num_clients + 1))
        assert_consistent(snapshots)
        assert {s.total for s in snapshots} == {Decimal("250.25")}
        assert not any(s.locked for s in snapshots)
        assert engine.stats.processed == 3 * num_clients
        assert engine.stats.rejected == num_clients // 10
        assert len(engine.ledger.transaction_log) == 3 * num_clients

    def test_dispute_lifecycles_by_client_group(self, tmp_path):
        """Five groups of 20 clients, each driving its deposits through a different dispute path."""
        rows = []

        def deposits(client_id, *amounts):
            for offset, amount in enumerate(amounts, start=1):
                rows.append(f"deposit, {client_id}, {client_id * 100 + offset}, {amount}")

        def follow_up(kind, clients, offset):
            for client_id in clients:
                rows.append(f"{kind}, {client_id}, {client_id * 100 + offset},")

        untouched = range(1, 21)
        resolved = range(21, 41)
        charged_back = range(41, 61)
        still_held = range(61, 81)
        refused_after_freeze = range(81, 101)

        for client_id in range(1, 101):
            deposits(client_id, "100", "150", "250")

        follow_up("dispute", resolved, 1)
        follow_up("resolve", resolved, 1)

        follow_up("dispute", charged_back, 2)
        follow_up("chargeback", charged_back, 2)

        follow_up("dispute", still_held, 3)
        follow_up("resolve", still_held, 9)

        follow_up("dispute", refused_after_freeze, 1)
        follow_up("chargeback", refused_after_freeze, 1)
        for client_id in refused_after_freeze:
            rows.append(f"deposit, {client_id}, {client_id * 100 + 4}, 1000")
            rows.append(f"withdrawal, {client_id}, {client_id * 100 + 5}, 10")
        follow_up("dispute", refused_after_freeze, 1)

        engine = PaymentsEngine()
        engine.process_file(write_rows(tmp_path, rows))
        snapshots = {s.client_id: s for s in engine.snapshot_all()}

        assert len(snapshots) == 100
        for snapshot in snapshots.values():
            assert snapshot.total == snapshot.available + snapshot.held

        expected = {
            untouched: (Decimal("500"), Decimal("0"), False),
            resolved: (Decimal("500"), Decimal("0"), False),
            charged_back: (Decimal("350"), Decimal("0"), True),
            still_held: (Decimal("250"), Decimal("250"), False),
            refused_after_freeze: (Decimal("400"), Decimal("0"), True),
        }
        for clients, (available, held, locked) in expected.items():
            for client_id in clients:
                snapshot = snapshots[client_id]
                assert (snapshot.available, snapshot.held, snapshot.locked) == (available, held, locked), \
                    f"Client {client_id}"

    def test_interleaved_clients_keep_totals_consistent(self):
        engine = PaymentsEngine()
        num_clients = 200
        tx_id = 1
        deposits = {}

        transactions = []
        for _ in range(5):
            for client_id in range(1, num_clients + 1):
                transactions.append(Transaction(TransactionType.DEPOSIT, client_id, tx_id, Decimal("10.0001")))
                deposits.setdefault(client_id, []).append(tx_id)
                tx_id += 1
                transactions.append(Transaction(TransactionType.WITHDRAWAL, client_id, tx_id, Decimal("3")))
                tx_id += 1

        for client_id in range(1, num_clients + 1):
            first, second = deposits[client_id][:2]
            transactions.append(Transaction(TransactionType.DISPUTE, client_id, first))
            transactions.append(Transaction(TransactionType.DISPUTE, client_id, second))
            if client_id % 2:
                transactions.append(Transaction(TransactionType.RESOLVE, client_id, first))
            else:
                transactions.append(Transaction(TransactionType.CHARGEBACK, client_id, first))

        engine.process_transactions(transactions)
        snapshots = engine.snapshot_all()

        assert len(snapshots) == num_clients
        for snapshot in snapshots:
            assert snapshot.total == snapshot.available + snapshot.held
            assert snapshot.held == Decimal("10.0001")
            if snapshot.client_id % 2:
                assert snapshot.total == Decimal("35.0005")
                assert snapshot.locked is False
            else:
                assert snapshot.total == Decimal("25.0004")
                assert snapshot.locked is True
