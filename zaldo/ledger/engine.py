"""Ledger engine: the single entry point for every dashboard figure."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Iterable

from zaldo.ledger.aggregator import aggregate, arrears_alerts
from zaldo.ledger.cashflow import simulate_wallet
from zaldo.ledger.collector import EventCollector, LedgerScope
from zaldo.ledger.fees import ADMIN_FEE_PERCENT
from zaldo.ledger.schedule import GRACE_PERIOD_DAYS, overdue_loans as find_overdue_loans
from zaldo.logging import get_logger
from zaldo.models.enums import InvestorRole
from zaldo.models.ledger import Client, Investor, Loan, Payment, Payout
from zaldo.models.reports import InvestorShare, OverdueLoan, PortfolioSummary, WalletMovement

logger = get_logger(__name__)


class LedgerEngine:
    """Pure fold over already-fetched loans, payments and payouts.

    Nothing is cached between calls: each query replays the full history,
    so calling a method twice on the same inputs gives equal results.

    Parameters
    ----------
    loans : Iterable[Loan]
        Loans of the scope of interest (usually the whole portfolio).
    payments : Iterable[Payment]
        Client payments.
    payouts : Iterable[Payout]
        Investor payouts.
    investors : Iterable[Investor] | None
        Investor profiles. Used for names and to flag unknown investor ids.
    clients : Iterable[Client] | None
        Clients, used for names in arrears alerts.
    default_fee_percent : Decimal
        Fee rate for loans that do not carry one.
    grace_period_days : int
        Days after a due date before an interest payment counts as late.
    """

    def __init__(
        self,
        loans: Iterable[Loan],
        payments: Iterable[Payment],
        payouts: Iterable[Payout],
        investors: Iterable[Investor] | None = None,
        clients: Iterable[Client] | None = None,
        default_fee_percent: Decimal = ADMIN_FEE_PERCENT,
        grace_period_days: int = GRACE_PERIOD_DAYS,
    ) -> None:
        self._investors = {i.investor_id: i for i in investors} if investors is not None else None
        self._clients = {c.client_id: c for c in clients or []}
        self.default_fee_percent = default_fee_percent
        self.grace_period_days = grace_period_days
        self._collector = EventCollector(
            loans,
            payments,
            payouts,
            investor_ids=self._investors.keys() if self._investors is not None else None,
        )

    @classmethod
    def from_store(
        cls,
        store: Any,
        default_fee_percent: Decimal = ADMIN_FEE_PERCENT,
        grace_period_days: int = GRACE_PERIOD_DAYS,
    ) -> LedgerEngine:
        """Build an engine from any store exposing the ``list_*`` queries."""
        return cls(
            loans=store.list_loans(),
            payments=store.list_payments(),
            payouts=store.list_payouts(),
            investors=store.list_investors(),
            clients=store.list_clients(),
            default_fee_percent=default_fee_percent,
            grace_period_days=grace_period_days,
        )

    def _investor_name(self, investor_id: str) -> str | None:
        if self._investors is None or investor_id not in self._investors:
            return None
        return self._investors[investor_id].full_name

    def _is_operator(self, investor_id: str) -> bool:
        profile = (self._investors or {}).get(investor_id)
        return profile is not None and profile.role == InvestorRole.ADMIN

    def _share(self, scope: LedgerScope) -> InvestorShare:
        totals = aggregate(scope, self.default_fee_percent)
        wallet = simulate_wallet(scope, self.default_fee_percent)
        return InvestorShare(
            investor_id=scope.investor_id,
            investor_name=self._investor_name(scope.investor_id),
            totals=totals,
            wallet_balance=wallet.balance,
            warnings=[*scope.warnings, *wallet.warnings],
        )

    def investor_share(self, investor_id: str) -> InvestorShare:
        """Aggregate and wallet balance of one investor."""
        return self._share(self._collector.for_investor(investor_id))

    def investor_shares(self) -> list[InvestorShare]:
        """Shares of every known investor, ordered by name then id.

        The operator's profile is listed only when it funds loans itself.
        """
        shares = [
            self.investor_share(i)
            for i in self._collector.investor_ids()
            if not self._is_operator(i) or self._collector.has_records(i)
        ]
        return sorted(shares, key=lambda s: (s.investor_name or "", s.investor_id))

    def portfolio_summary(self) -> PortfolioSummary:
        """Portfolio totals, investor breakdown and collection alerts."""
        scope = self._collector.for_portfolio()
        totals = aggregate(scope, self.default_fee_percent)
        wallet = simulate_wallet(scope, self.default_fee_percent)
        summary = PortfolioSummary(
            totals=totals,
            wallet_balance=wallet.balance,
            investors=self.investor_shares(),
            arrears_alerts=arrears_alerts(scope, self._clients),
            warnings=[*scope.warnings, *wallet.warnings],
        )
        logger.info(
            "Portfolio: active capital %s, gross profit %s, admin fee %s, %d warnings",
            totals.active_capital,
            totals.gross_profit,
            totals.admin_fee,
            len(summary.warnings),
        )
        return summary

    def overdue_loans(
        self,
        as_of: date | datetime | None = None,
        investor_id: str | None = None,
    ) -> list[OverdueLoan]:
        """Active loans whose interest is late on ``as_of`` (default: today)."""
        if investor_id is None:
            scope = self._collector.for_portfolio()
        else:
            scope = self._collector.for_investor(investor_id)
        return find_overdue_loans(scope.loans, as_of or date.today(), self.grace_period_days, self._clients)

    def wallet_movements(self, investor_id: str | None = None) -> list[WalletMovement]:
        """Chronological wallet feed of one investor, or of the portfolio."""
        if investor_id is None:
            scope = self._collector.for_portfolio()
        else:
            scope = self._collector.for_investor(investor_id)
        return simulate_wallet(scope, self.default_fee_percent).movements
