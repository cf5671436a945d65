"""Enumeration types for ledger entities."""

from enum import Enum


class LoanStatus(str, Enum):
    ACTIVE = "active"
    DEFAULTED = "defaulted"  # mora
    PAID = "paid"
    COMPLETED = "completed"


class PaymentType(str, Enum):
    INTEREST = "interest"
    FEE = "fee"  # late-payment penalty, split like interest
    CAPITAL = "capital"
    PRINCIPAL = "principal"


class InvestorRole(str, Enum):
    ADMIN = "admin"
    INVESTOR = "investor"


class EventKind(str, Enum):
    LOAN = "loan"
    PAYMENT = "payment"
    PAYOUT = "payout"


class FlowDirection(str, Enum):
    INFLOW = "inflow"
    OUTFLOW = "outflow"


class WarningCode(str, Enum):
    INVALID_RECORD = "INVALID_RECORD"
    MALFORMED_TIMESTAMP = "MALFORMED_TIMESTAMP"
    UNRESOLVED_LOAN = "UNRESOLVED_LOAN"
    UNRESOLVED_INVESTOR = "UNRESOLVED_INVESTOR"
