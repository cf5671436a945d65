"""Derived ledger figures. Recomputed on every query and never persisted."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from zaldo.models.base import LedgerWarning
from zaldo.models.enums import EventKind, FlowDirection

ZERO = Decimal("0")


@dataclass(frozen=True)
class InterestSplit:
    """Revenue divided between the operator and the investor."""

    amount: Decimal
    admin_fee_percent: Decimal
    admin_share: Decimal
    investor_share: Decimal


@dataclass(frozen=True)
class InterestDistribution:
    """One month of projected interest on a principal, already split."""

    total_interest: Decimal
    admin_share: Decimal
    investor_share: Decimal


@dataclass
class LedgerTotals:
    """Capital and profit sums over a scope."""

    invested_capital: Decimal = ZERO
    active_capital: Decimal = ZERO
    gross_profit: Decimal = ZERO
    admin_fee: Decimal = ZERO
    net_profit: Decimal = ZERO
    capital_repaid: Decimal = ZERO
    total_withdrawn: Decimal = ZERO
    arrears_exposure: Decimal = ZERO
    active_loans: int = 0
    active_clients: int = 0


@dataclass
class ArrearsAlert:
    """Collection alert for a defaulted loan."""

    loan_id: str
    client_id: str
    investor_id: str
    amount: Decimal  # One month of projected interest
    client_name: str | None = None


@dataclass
class WalletMovement:
    """One replayed event of the cash-flow simulation."""

    timestamp: datetime
    kind: FlowDirection
    source: EventKind
    reference_id: str
    gross_amount: Decimal
    net_amount: Decimal
    balance_after: Decimal
    externally_funded: Decimal = ZERO


@dataclass
class WalletSimulation:
    """Result of replaying a scope's events against a running balance."""

    balance: Decimal = ZERO
    movements: list[WalletMovement] = field(default_factory=list)
    external_funding: Decimal = ZERO
    warnings: list[LedgerWarning] = field(default_factory=list)


@dataclass
class InvestorShare:
    """Per-investor aggregate shown on the investor detail and portal pages."""

    investor_id: str
    investor_name: str | None
    totals: LedgerTotals
    wallet_balance: Decimal
    warnings: list[LedgerWarning] = field(default_factory=list)

    @property
    def active_capital(self) -> Decimal:
        return self.totals.active_capital

    @property
    def invested_capital(self) -> Decimal:
        return self.totals.invested_capital

    @property
    def gross_profit(self) -> Decimal:
        return self.totals.gross_profit

    @property
    def net_profit(self) -> Decimal:
        return self.totals.net_profit

    @property
    def admin_fee(self) -> Decimal:
        return self.totals.admin_fee

    @property
    def capital_repaid(self) -> Decimal:
        return self.totals.capital_repaid

    @property
    def total_withdrawn(self) -> Decimal:
        return self.totals.total_withdrawn


@dataclass
class PortfolioSummary:
    """Portfolio-wide figures for the admin dashboard."""

    totals: LedgerTotals
    wallet_balance: Decimal
    investors: list[InvestorShare] = field(default_factory=list)
    arrears_alerts: list[ArrearsAlert] = field(default_factory=list)
    warnings: list[LedgerWarning] = field(default_factory=list)


@dataclass
class OverdueLoan:
    """Active loan whose next interest payment is past the grace period."""

    loan_id: str
    client_id: str
    investor_id: str
    due_date: date
    days_late: int
    client_name: str | None = None
