import sys
import logging
from decimal import Decimal
from typing import Dict, TextIO

from models import ClientAccount, LEDGER_CONTEXT, truncate_amount
from payments_engine import PaymentsEngine, TransactionParseError

OUTPUT_COLUMNS = ("client", "available", "held", "total", "locked")

logger = logging.getLogger(__name__)


def format_decimal(value: Decimal) -> str:
    """Format decimal truncated to 4 decimal places, removing trailing zeros."""
    normalized = truncate_amount(value).normalize(LEDGER_CONTEXT)
    if normalized.is_zero():
        # drops the sign of -0
        return "0"
    return f"{normalized:f}"


def write_accounts(accounts: Dict[int, ClientAccount], out: TextIO) -> None:
    print(",".join(OUTPUT_COLUMNS), file=out)
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        print(
            f"{client_id},"
            f"{format_decimal(account.available)},"
            f"{format_decimal(account.held)},"
            f"{format_decimal(account.total)},"
            f"{str(account.locked).lower()}",
            file=out,
        )


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
    engine = PaymentsEngine()
    try:
        accounts = engine.process_file(filepath)
    except (OSError, TransactionParseError) as e:
        logger.debug("Replay aborted", exc_info=True)
        print(f"Could not read from file: {e}", file=sys.stderr)
        sys.exit(1)

    write_accounts(accounts, sys.stdout)


if __name__ == "__main__":
    main()
