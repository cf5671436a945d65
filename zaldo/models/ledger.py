"""Ledger entities as fetched from the data store.

Date fields keep the raw value received from the store (``date``,
``datetime``, ISO string or ``None``). They are parsed by the cash-flow
simulator, which tolerates malformed values.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from zaldo.models.enums import InvestorRole, LoanStatus, PaymentType

RawDate = date | datetime | str | None


@dataclass
class Client:
    """Borrower."""

    client_id: str
    full_name: str
    document_id: str | None = None
    phone: str | None = None


@dataclass
class Investor:
    """Capital provider (socia) or platform operator profile."""

    investor_id: str
    full_name: str
    role: InvestorRole = InvestorRole.INVESTOR
    email: str | None = None


@dataclass
class Loan:
    """Loan funded by one investor and owed by one client."""

    loan_id: str
    client_id: str
    investor_id: str
    amount: Decimal  # Principal
    interest_rate: Decimal  # Monthly percentage (e.g., 5 for 5%)
    start_date: RawDate
    status: LoanStatus = LoanStatus.ACTIVE
    admin_fee_percent: Decimal | None = None  # None means the default applies
    cutoff_day: int | None = None  # Day of month interest falls due
    paid_until: RawDate = None


@dataclass
class Payment:
    """Money received from a client against a loan."""

    payment_id: str
    loan_id: str
    amount: Decimal
    payment_date: RawDate
    payment_type: PaymentType
    late_fee_waived: bool = False
    notes: str | None = None


@dataclass
class Payout:
    """Cash physically handed to an investor."""

    payout_id: str
    investor_id: str
    amount: Decimal
    date: RawDate
    notes: str | None = None
