import csv
import logging
import sys
from decimal import Decimal, localcontext
from typing import Iterable, List, Optional, TextIO

from config import EngineConfig
from models import BALANCE_CONTEXT, AccountSnapshot
from payments_engine import PaymentsEngine, AMOUNT_PRECISION

OUTPUT_HEADER = "client,available,held,total,locked"


def format_decimal(value: Decimal) -> str:
    """Format decimal with up to 4 decimal places, removing trailing zeros."""
    with localcontext(BALANCE_CONTEXT):
        normalized = value.quantize(AMOUNT_PRECISION).normalize()
    if normalized.is_zero():
        return "0"
    return f"{normalized:f}"


def write_accounts(snapshots: Iterable[AccountSnapshot], out: TextIO) -> None:
    print(OUTPUT_HEADER, file=out)
    for snapshot in sorted(snapshots, key=lambda s: s.client_id):
        print(
            f"{snapshot.client_id},"
            f"{format_decimal(snapshot.available)},"
            f"{format_decimal(snapshot.held)},"
            f"{format_decimal(snapshot.total)},"
            f"{str(snapshot.locked).lower()}",
            file=out,
        )


def configure_logging(config: EngineConfig) -> None:
    logging.basicConfig(
        level=config.log_level,
        format=config.log_format,
        stream=sys.stderr,
    )


def main(argv: Optional[List[str]] = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        return 1

    configure_logging(EngineConfig.from_env())

    filepath = argv[0]
    engine = PaymentsEngine()
    try:
        engine.process_file(filepath)
    except (OSError, csv.Error) as e:
        print(f"Cannot read {filepath}: {e}", file=sys.stderr)
        return 1

    write_accounts(engine.snapshot_all(), sys.stdout)
    return 0


if __name__ == "__main__":
    sys.exit(main())
