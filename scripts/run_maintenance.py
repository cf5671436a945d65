#!/usr/bin/env python3
"""Run one audited maintenance operation against PostgreSQL.

Examples:

    run_maintenance.py --actor luis delete-payment <payment-id> --reason "duplicate"
    run_maintenance.py --actor luis set-paid-until <loan-id> 2026-01-07 --reason "client paid in cash"
    run_maintenance.py --actor luis set-status <loan-id> active --reason "arrears cleared"
"""

import argparse
import json
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from zaldo.config import ZaldoConfig
from zaldo.exceptions import ZaldoError
from zaldo.logging import get_logger, setup_logging
from zaldo.maintenance import MaintenanceService
from zaldo.models import LoanStatus
from zaldo.sinks.serialization import to_dict
from zaldo.store.postgres import PostgresLedgerStore

logger = get_logger(__name__)


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Run an audited ZALDO maintenance operation")
    parser.add_argument("--actor", required=True, help="Who is performing the operation")
    parser.add_argument(
        "--postgres-url",
        type=str,
        default=None,
        help="PostgreSQL connection string (default: from POSTGRES_* env vars)",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    delete = commands.add_parser("delete-payment", help="Delete a payment")
    delete.add_argument("payment_id")
    delete.add_argument("--reason", required=True)

    paid_until = commands.add_parser("set-paid-until", help="Set a loan's paid-until date")
    paid_until.add_argument("loan_id")
    paid_until.add_argument("paid_until", type=date.fromisoformat, help="YYYY-MM-DD")
    paid_until.add_argument("--reason", required=True)

    status = commands.add_parser("set-status", help="Change a loan's status")
    status.add_argument("loan_id")
    status.add_argument("status", choices=[s.value for s in LoanStatus])
    status.add_argument("--reason", required=True)

    args = parser.parse_args()

    config = ZaldoConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    try:
        store = PostgresLedgerStore(args.postgres_url or config.postgres.connection_string)
    except ZaldoError as e:
        logger.error("%s", e)
        sys.exit(1)

    service = MaintenanceService(store, actor=args.actor)
    try:
        if args.command == "delete-payment":
            record = service.delete_payment(args.payment_id, args.reason)
        elif args.command == "set-paid-until":
            record = service.set_paid_until(args.loan_id, args.paid_until, args.reason)
        else:
            record = service.set_loan_status(args.loan_id, args.status, args.reason)
    except ZaldoError as e:
        logger.error("Maintenance failed: %s", e)
        sys.exit(1)
    finally:
        store.close()

    print(json.dumps(to_dict(record), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
