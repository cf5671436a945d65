#!/usr/bin/env python3
"""Compute ledger reports for the portfolio or a single investor.

Data comes either from a generated demo portfolio or from PostgreSQL.
Reports are written to the console or to JSON files:

- portfolio: totals, arrears alerts and warnings
- investors: one share per investor (capital, profit split, wallet)
- overdue_loans: active loans whose interest is past the grace period
- wallet_movements: chronological wallet feed of the selected scope
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from zaldo.config import ZaldoConfig
from zaldo.exceptions import ZaldoError
from zaldo.generators import PortfolioGenerator
from zaldo.ledger import LedgerEngine
from zaldo.logging import get_logger, setup_logging
from zaldo.sinks import ConsoleSink, JsonFileSink

logger = get_logger(__name__)


def load_engine(args: argparse.Namespace, config: ZaldoConfig) -> LedgerEngine:
    """Build the engine from the selected data source."""
    options = {
        "default_fee_percent": config.ledger.default_admin_fee_percent,
        "grace_period_days": config.ledger.grace_period_days,
    }
    if args.source == "demo":
        store = PortfolioGenerator(seed=args.seed).generate(
            num_investors=args.investors,
            loans_per_investor=args.loans_per_investor,
        )
        return LedgerEngine.from_store(store, **options)

    from zaldo.store.postgres import PostgresLedgerStore

    store = PostgresLedgerStore(args.postgres_url or config.postgres.connection_string)
    try:
        return LedgerEngine.from_store(store, **options)
    finally:
        store.close()


def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Compute ZALDO ledger reports")
    parser.add_argument(
        "--source",
        choices=["demo", "postgres"],
        default="demo",
        help="Data source (default: demo)",
    )
    parser.add_argument(
        "--postgres-url",
        type=str,
        default=None,
        help="PostgreSQL connection string (default: from POSTGRES_* env vars)",
    )
    parser.add_argument(
        "--investor",
        type=str,
        default=None,
        help="Report a single investor id instead of the whole portfolio",
    )
    parser.add_argument(
        "--format",
        choices=["console", "json"],
        default="console",
        help="Output format (default: console)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for JSON reports (default: OUTPUT_DIR or ./reports)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=42,
        help="Random seed for the demo portfolio (default: 42)",
    )
    parser.add_argument(
        "--investors",
        type=int,
        default=3,
        help="Demo investors to generate (default: 3)",
    )
    parser.add_argument(
        "--loans-per-investor",
        type=int,
        default=4,
        help="Demo loans per investor (default: 4)",
    )
    args = parser.parse_args()

    config = ZaldoConfig.from_env()
    setup_logging(config.log_level, config.log_format)

    try:
        engine = load_engine(args, config)
    except ZaldoError as e:
        logger.error("Could not load ledger data: %s", e)
        sys.exit(1)

    if args.format == "json":
        sink = JsonFileSink(args.output_dir or config.output.json_output_dir, pretty=config.output.pretty_json)
    else:
        sink = ConsoleSink(pretty=True)

    if args.investor:
        share = engine.investor_share(args.investor)
        sink.write_batch("investors", [share])
        sink.write_batch("warnings", share.warnings)
    else:
        summary = engine.portfolio_summary()
        sink.write_batch("portfolio", [summary.totals])
        sink.write_batch("investors", summary.investors)
        sink.write_batch("arrears_alerts", summary.arrears_alerts)
        sink.write_batch("warnings", summary.warnings)

    sink.write_batch("overdue_loans", engine.overdue_loans(investor_id=args.investor))
    sink.write_batch("wallet_movements", engine.wallet_movements(args.investor))
    sink.close()


if __name__ == "__main__":
    main()
