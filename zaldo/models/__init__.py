"""Domain models for the ZALDO ledger."""

from zaldo.models.base import AuditRecord, LedgerWarning
from zaldo.models.enums import (
    EventKind,
    FlowDirection,
    InvestorRole,
    LoanStatus,
    PaymentType,
    WarningCode,
)
from zaldo.models.ledger import Client, Investor, Loan, Payment, Payout
from zaldo.models.reports import (
    ArrearsAlert,
    InterestDistribution,
    InterestSplit,
    InvestorShare,
    LedgerTotals,
    OverdueLoan,
    PortfolioSummary,
    WalletMovement,
    WalletSimulation,
)

__all__ = [
    "ArrearsAlert",
    "AuditRecord",
    "Client",
    "EventKind",
    "FlowDirection",
    "InterestDistribution",
    "InterestSplit",
    "Investor",
    "InvestorRole",
    "InvestorShare",
    "LedgerTotals",
    "LedgerWarning",
    "Loan",
    "LoanStatus",
    "OverdueLoan",
    "Payment",
    "PaymentType",
    "Payout",
    "PortfolioSummary",
    "WalletMovement",
    "WalletSimulation",
    "WarningCode",
]
