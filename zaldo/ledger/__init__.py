"""Ledger and profit-split engine."""

from zaldo.ledger.aggregator import aggregate, arrears_alerts
from zaldo.ledger.cashflow import parse_timestamp, simulate_wallet
from zaldo.ledger.collector import EventCollector, LedgerScope
from zaldo.ledger.engine import LedgerEngine
from zaldo.ledger.fees import (
    ADMIN_FEE_PERCENT,
    calculate_interest_distribution,
    resolve_admin_fee_percent,
    split_interest,
)
from zaldo.ledger.schedule import (
    GRACE_PERIOD_DAYS,
    is_payment_late,
    next_cutoff_date,
    next_due_date,
    overdue_loans,
)

__all__ = [
    "ADMIN_FEE_PERCENT",
    "EventCollector",
    "GRACE_PERIOD_DAYS",
    "LedgerEngine",
    "LedgerScope",
    "aggregate",
    "arrears_alerts",
    "calculate_interest_distribution",
    "is_payment_late",
    "next_cutoff_date",
    "next_due_date",
    "overdue_loans",
    "parse_timestamp",
    "resolve_admin_fee_percent",
    "simulate_wallet",
    "split_interest",
]
