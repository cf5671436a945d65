"""Payment schedule helpers: cutoff dates and lateness."""

import calendar
from datetime import date, datetime
from typing import Iterable, Mapping

from zaldo.ledger.cashflow import parse_timestamp
from zaldo.models.enums import LoanStatus
from zaldo.models.ledger import Client, Loan
from zaldo.models.reports import OverdueLoan

GRACE_PERIOD_DAYS = 5


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def is_payment_late(
    payment_date: date | datetime,
    expected_date: date | datetime,
    grace_days: int = GRACE_PERIOD_DAYS,
) -> bool:
    """A payment is late when made more than ``grace_days`` after it was due."""
    return (_as_date(payment_date) - _as_date(expected_date)).days > grace_days


def next_cutoff_date(reference: date | datetime, cutoff_day: int) -> date:
    """Next cutoff date strictly after the reference day.

    Months shorter than ``cutoff_day`` use their last day instead.

    Parameters
    ----------
    reference : date | datetime
        Usually today or the loan start date.
    cutoff_day : int
        Day of the month (1-31).

    Returns
    -------
    date
        The next cutoff date.
    """
    if not 1 <= cutoff_day <= 31:
        raise ValueError(f"cutoff_day must be within 1..31, got {cutoff_day}")

    reference = _as_date(reference)
    year, month = reference.year, reference.month
    if reference.day >= min(cutoff_day, calendar.monthrange(year, month)[1]):
        month += 1
        if month > 12:
            year, month = year + 1, 1

    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(cutoff_day, last_day))


def loan_cutoff_day(loan: Loan) -> int | None:
    """Cutoff day of a loan, falling back to its start day of month."""
    if loan.cutoff_day is not None:
        return loan.cutoff_day
    if isinstance(loan.start_date, (date, datetime)):
        return loan.start_date.day
    if isinstance(loan.start_date, str):
        try:
            return datetime.fromisoformat(loan.start_date.strip()).day
        except ValueError:
            return None
    return None


def next_due_date(loan: Loan) -> date | None:
    """First cutoff date after the loan's interest was last settled.

    Interest is settled up to ``paid_until``, or up to the start date when
    nothing has been paid yet.
    """
    cutoff_day = loan_cutoff_day(loan)
    settled = parse_timestamp(loan.paid_until) or parse_timestamp(loan.start_date)
    if cutoff_day is None or settled is None:
        return None
    return next_cutoff_date(settled, cutoff_day)


def overdue_loans(
    loans: Iterable[Loan],
    as_of: date | datetime,
    grace_days: int = GRACE_PERIOD_DAYS,
    clients: Mapping[str, Client] | None = None,
) -> list[OverdueLoan]:
    """Active loans whose next interest payment is late on ``as_of``.

    Parameters
    ----------
    loans : Iterable[Loan]
        Loans to check. Loans without a usable date or cutoff day are skipped.
    as_of : date | datetime
        Day the check is made.
    grace_days : int
        Days after the due date before a payment counts as late.
    clients : Mapping[str, Client] | None
        Clients by id, for names.

    Returns
    -------
    list[OverdueLoan]
        Overdue loans, most late first.
    """
    clients = clients or {}
    as_of = _as_date(as_of)
    overdue = []
    for loan in loans:
        if LoanStatus(loan.status) != LoanStatus.ACTIVE:
            continue
        due = next_due_date(loan)
        if due is None or not is_payment_late(as_of, due, grace_days):
            continue
        client = clients.get(loan.client_id)
        overdue.append(
            OverdueLoan(
                loan_id=loan.loan_id,
                client_id=loan.client_id,
                investor_id=loan.investor_id,
                due_date=due,
                days_late=(as_of - due).days,
                client_name=client.full_name if client else None,
            )
        )
    return sorted(overdue, key=lambda o: -o.days_late)
