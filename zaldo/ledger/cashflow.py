"""Cash-flow simulation of an investor's liquid wallet.

All loans, payments and payouts of a scope are merged into one
chronological stream and replayed against a running balance starting at
zero:

- payments credit the investor's net amount (full amount for capital,
  investor share for interest and fees);
- payouts debit their full amount, with no floor;
- loans debit their amount when the wallet can fund it, otherwise the
  balance drops to zero and the shortfall is recorded as external funding.

Because of the loan rule, moving a loan before or after a payment can
change the result. Payments and payouts alone commute.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

from zaldo.ledger.collector import LedgerScope
from zaldo.ledger.fees import ADMIN_FEE_PERCENT, is_capital, loan_admin_fee_percent, split_interest, to_money
from zaldo.logging import get_logger, log_ledger_warning
from zaldo.models.base import LedgerWarning
from zaldo.models.enums import EventKind, FlowDirection, WarningCode
from zaldo.models.reports import ZERO, WalletMovement, WalletSimulation

logger = get_logger(__name__)


@dataclass(frozen=True)
class LedgerEvent:
    """A dated, signed effect on the wallet."""

    timestamp: datetime
    source: EventKind
    reference_id: str
    gross_amount: Decimal
    net_amount: Decimal

    @property
    def kind(self) -> FlowDirection:
        if self.source == EventKind.PAYMENT:
            return FlowDirection.INFLOW
        return FlowDirection.OUTFLOW


def parse_timestamp(value: Any) -> datetime | None:
    """Parse a stored date into a naive datetime, or None when unusable.

    Aware datetimes are converted to UTC before dropping the offset so that
    they sort alongside naive ones.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def build_events(
    scope: LedgerScope,
    default_fee_percent: Decimal = ADMIN_FEE_PERCENT,
) -> tuple[list[LedgerEvent], list[LedgerWarning]]:
    """Turn a scope into dated events, sorted ascending.

    Ties keep collection order (loans, then payments, then payouts).

    Returns
    -------
    tuple[list[LedgerEvent], list[LedgerWarning]]
        Sorted events and warnings for records dropped for a bad date.
    """
    events: list[LedgerEvent] = []
    warnings: list[LedgerWarning] = []

    def add(source: EventKind, ref: str, raw_date: Any, gross: Decimal, net: Decimal) -> None:
        timestamp = parse_timestamp(raw_date)
        if timestamp is None:
            message = f"{source.value.capitalize()} {ref} has unparseable date {raw_date!r}, excluded from wallet"
            warning = LedgerWarning(
                code=WarningCode.MALFORMED_TIMESTAMP,
                message=message,
                entity_type=source.value,
                entity_id=ref,
            )
            warnings.append(log_ledger_warning(logger, warning))
            return
        events.append(LedgerEvent(timestamp, source, ref, gross, net))

    for loan in scope.loans:
        amount = to_money(loan.amount)
        add(EventKind.LOAN, loan.loan_id, loan.start_date, amount, amount)

    for payment in scope.payments:
        amount = to_money(payment.amount)
        if is_capital(payment.payment_type):
            net = amount
        else:
            loan = scope.loans_by_id[payment.loan_id]
            net = split_interest(amount, loan_admin_fee_percent(loan, default_fee_percent)).investor_share
        add(EventKind.PAYMENT, payment.payment_id, payment.payment_date, amount, net)

    for payout in scope.payouts:
        amount = to_money(payout.amount)
        add(EventKind.PAYOUT, payout.payout_id, payout.date, amount, amount)

    events.sort(key=lambda e: e.timestamp)
    return events, warnings


def replay(events: list[LedgerEvent]) -> WalletSimulation:
    """Replay ordered events against a balance starting at zero."""
    balance = ZERO
    external_funding = ZERO
    movements: list[WalletMovement] = []

    for event in events:
        funded_externally = ZERO
        if event.source == EventKind.PAYMENT:
            balance += event.net_amount
        elif event.source == EventKind.PAYOUT:
            balance -= event.net_amount
        elif balance >= event.net_amount:
            balance -= event.net_amount
        else:
            funded_externally = event.net_amount - max(balance, ZERO)
            balance = ZERO

        external_funding += funded_externally
        movements.append(
            WalletMovement(
                timestamp=event.timestamp,
                kind=event.kind,
                source=event.source,
                reference_id=event.reference_id,
                gross_amount=event.gross_amount,
                net_amount=event.net_amount,
                balance_after=balance,
                externally_funded=funded_externally,
            )
        )

    return WalletSimulation(balance=balance, movements=movements, external_funding=external_funding)


def simulate_wallet(
    scope: LedgerScope,
    default_fee_percent: Decimal = ADMIN_FEE_PERCENT,
) -> WalletSimulation:
    """Compute the liquid wallet balance and movement feed of a scope.

    Parameters
    ----------
    scope : LedgerScope
        Records of one investor or of the portfolio.
    default_fee_percent : Decimal
        Fee rate for loans without one.

    Returns
    -------
    WalletSimulation
        Final balance, chronological movements and date warnings.
    """
    events, warnings = build_events(scope, default_fee_percent)
    simulation = replay(events)
    simulation.warnings = warnings
    logger.debug(
        "Wallet replay for %s: %d events, balance %s",
        scope.investor_id or "portfolio",
        len(events),
        simulation.balance,
    )
    return simulation
