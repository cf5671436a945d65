"""Capital and profit aggregation over a ledger scope."""

from __future__ import annotations

from decimal import Decimal
from typing import Mapping

from zaldo.ledger.collector import LedgerScope
from zaldo.ledger.fees import (
    ADMIN_FEE_PERCENT,
    calculate_interest_distribution,
    is_capital,
    loan_admin_fee_percent,
    split_interest,
    to_money,
)
from zaldo.models.enums import LoanStatus
from zaldo.models.ledger import Client, Loan
from zaldo.models.reports import ZERO, ArrearsAlert, LedgerTotals

# Loans whose principal is still out (defaulted capital remains at risk)
OUTSTANDING_STATUSES = frozenset({LoanStatus.ACTIVE, LoanStatus.DEFAULTED})


def is_outstanding(loan: Loan) -> bool:
    """Whether a loan's principal counts as active capital."""
    return LoanStatus(loan.status) in OUTSTANDING_STATUSES


def projected_arrears(loan: Loan) -> Decimal:
    """One month of interest on a defaulted loan, used as the amount owed."""
    return calculate_interest_distribution(loan.amount, loan.interest_rate).total_interest


def aggregate(
    scope: LedgerScope,
    default_fee_percent: Decimal = ADMIN_FEE_PERCENT,
) -> LedgerTotals:
    """Sum capital, profit, fees, withdrawals and arrears of a scope.

    Every loan is classified as outstanding or settled, and every payment as
    revenue or capital, exactly once. Dates are not needed here, so records
    with malformed dates are still counted.

    Parameters
    ----------
    scope : LedgerScope
        Records to aggregate.
    default_fee_percent : Decimal
        Fee rate for loans without one.

    Returns
    -------
    LedgerTotals
        Aggregated figures.
    """
    totals = LedgerTotals()
    active_clients: set[str] = set()

    for loan in scope.loans:
        amount = to_money(loan.amount)
        totals.invested_capital += amount
        if is_outstanding(loan):
            totals.active_capital += amount
            totals.active_loans += 1
            active_clients.add(loan.client_id)
        if LoanStatus(loan.status) == LoanStatus.DEFAULTED:
            totals.arrears_exposure += projected_arrears(loan)

    for payment in scope.payments:
        amount = to_money(payment.amount)
        if is_capital(payment.payment_type):
            totals.capital_repaid += amount
            continue
        loan = scope.loans_by_id[payment.loan_id]
        split = split_interest(amount, loan_admin_fee_percent(loan, default_fee_percent))
        totals.gross_profit += amount
        totals.admin_fee += split.admin_share

    totals.net_profit = totals.gross_profit - totals.admin_fee
    totals.total_withdrawn = sum((to_money(p.amount) for p in scope.payouts), ZERO)
    totals.active_clients = len(active_clients)
    return totals


def arrears_alerts(
    scope: LedgerScope,
    clients: Mapping[str, Client] | None = None,
) -> list[ArrearsAlert]:
    """Collection alerts for the defaulted loans of a scope."""
    clients = clients or {}
    alerts = []
    for loan in scope.loans:
        if LoanStatus(loan.status) != LoanStatus.DEFAULTED:
            continue
        client = clients.get(loan.client_id)
        alerts.append(
            ArrearsAlert(
                loan_id=loan.loan_id,
                client_id=loan.client_id,
                investor_id=loan.investor_id,
                amount=projected_arrears(loan),
                client_name=client.full_name if client else None,
            )
        )
    return alerts
