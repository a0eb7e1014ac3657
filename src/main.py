import csv
import logging
import sys
import time
from decimal import Decimal, localcontext
from typing import Iterable, TextIO

from engine import PaymentsEngine
from models import AccountSnapshot

logger = logging.getLogger(__name__)

OUTPUT_PRECISION = Decimal("0.0001")


def format_decimal(value: Decimal) -> str:
    """Format decimal with exactly 4 decimal places."""
    with localcontext() as ctx:
        # Room for every integer digit plus the 4 places, however large the balance.
        ctx.prec = max(ctx.prec, value.adjusted() + 5)
        return f"{value.quantize(OUTPUT_PRECISION):f}"


def write_accounts(snapshots: Iterable[AccountSnapshot], stream: TextIO) -> None:
    """Write account snapshots as CSV, sorted by client id."""
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(["client", "available", "held", "total", "locked"])
    for snapshot in sorted(snapshots, key=lambda s: s.client_id):
        writer.writerow([
            snapshot.client_id,
            format_decimal(snapshot.available),
            format_decimal(snapshot.held),
            format_decimal(snapshot.total),
            str(snapshot.locked).lower(),
        ])


def main():
    logging.basicConfig(
        level=logging.WARNING,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    if len(sys.argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = sys.argv[1]
    started = time.perf_counter()
    engine = PaymentsEngine()
    try:
        registry = engine.process_file(filepath)
    except OSError as e:
        logger.error(f"Can't read transactions from {filepath}: {e}")
        sys.exit(1)

    write_accounts(registry.snapshot(), sys.stdout)

    elapsed_ms = (time.perf_counter() - started) * 1000
    print(
        f"Processed: {engine.stats.processed}, "
        f"Failed: {engine.stats.failed}, "
        f"Malformed: {engine.stats.malformed}, "
        f"Elapsed: {elapsed_ms:.0f} ms",
        file=sys.stderr,
    )


if __name__ == "__main__":
    main()
