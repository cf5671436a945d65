"""Event collection: gather loans, payments and payouts for a scope."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import InvalidOperation
from enum import Enum
from typing import Any, Iterable

from zaldo.ledger.fees import to_money
from zaldo.logging import get_logger, log_ledger_warning
from zaldo.models.base import LedgerWarning
from zaldo.models.enums import LoanStatus, PaymentType, WarningCode
from zaldo.models.ledger import Loan, Payment, Payout

logger = get_logger(__name__)


@dataclass
class LedgerScope:
    """Records of one investor, or of the whole portfolio when ``investor_id`` is None."""

    investor_id: str | None
    loans: list[Loan] = field(default_factory=list)
    payments: list[Payment] = field(default_factory=list)
    payouts: list[Payout] = field(default_factory=list)
    loans_by_id: dict[str, Loan] = field(default_factory=dict)
    warnings: list[LedgerWarning] = field(default_factory=list)

    @property
    def is_portfolio(self) -> bool:
        return self.investor_id is None


def _is_money(value: Any) -> bool:
    try:
        return to_money(value).is_finite()
    except (InvalidOperation, TypeError, ValueError):
        return False


def _is_member(enum_cls: type[Enum], value: Any) -> bool:
    try:
        enum_cls(value)
    except ValueError:
        return False
    return True


def loan_problem(loan: Loan) -> str | None:
    """Why a loan cannot be folded, or None when it is usable."""
    if not _is_member(LoanStatus, loan.status):
        return f"unknown status {loan.status!r}"
    if not _is_money(loan.amount):
        return f"invalid amount {loan.amount!r}"
    if not _is_money(loan.interest_rate):
        return f"invalid interest rate {loan.interest_rate!r}"
    if loan.admin_fee_percent not in (None, "") and not _is_money(loan.admin_fee_percent):
        return f"invalid admin fee percent {loan.admin_fee_percent!r}"
    if loan.cutoff_day is not None and not (isinstance(loan.cutoff_day, int) and 1 <= loan.cutoff_day <= 31):
        return f"invalid cutoff day {loan.cutoff_day!r}"
    return None


def payment_problem(payment: Payment) -> str | None:
    """Why a payment cannot be folded, or None when it is usable."""
    if not _is_member(PaymentType, payment.payment_type):
        return f"unknown payment type {payment.payment_type!r}"
    if not _is_money(payment.amount):
        return f"invalid amount {payment.amount!r}"
    return None


def payout_problem(payout: Payout) -> str | None:
    """Why a payout cannot be folded, or None when it is usable."""
    if not _is_money(payout.amount):
        return f"invalid amount {payout.amount!r}"
    return None


class EventCollector:
    """Validate records, resolve foreign keys once and hand out per-scope record sets.

    Records with an unknown enum value or a non-numeric amount are left out of
    every scope with an ``INVALID_RECORD`` warning, so one bad row never stops
    the other figures from being computed.

    Parameters
    ----------
    loans, payments, payouts : Iterable
        Records already fetched from the store. They are never mutated.
    investor_ids : Iterable[str] | None
        Known investor profiles. When omitted, any investor id referenced by
        a loan or payout is taken as valid.
    """

    def __init__(
        self,
        loans: Iterable[Loan],
        payments: Iterable[Payment],
        payouts: Iterable[Payout],
        investor_ids: Iterable[str] | None = None,
    ) -> None:
        self._known_investors = set(investor_ids) if investor_ids is not None else None

        self._loans: list[Loan] = []
        self._payouts: list[Payout] = []
        self._resolved_payments: list[Payment] = []
        self._loans_by_id: dict[str, Loan] = {}

        # (owning investor id or None, warning)
        self._record_warnings: list[tuple[str | None, LedgerWarning]] = []
        self._orphan_payment_warnings: list[LedgerWarning] = []
        self._orphan_investor_warnings: list[LedgerWarning] = []
        self._resolve(list(loans), list(payments), list(payouts))

    def _resolve(self, loans: list[Loan], payments: list[Payment], payouts: list[Payout]) -> None:
        for loan in loans:
            problem = loan_problem(loan)
            if problem:
                self._reject(loan.investor_id, "loan", loan.loan_id, problem)
                continue
            self._loans.append(loan)
            self._loans_by_id[loan.loan_id] = loan

        for payment in payments:
            problem = payment_problem(payment)
            if problem:
                owner = self._loans_by_id.get(payment.loan_id)
                self._reject(owner.investor_id if owner else None, "payment", payment.payment_id, problem)
            elif payment.loan_id in self._loans_by_id:
                self._resolved_payments.append(payment)
            else:
                self._orphan_payment_warnings.append(
                    _warn(
                        WarningCode.UNRESOLVED_LOAN,
                        f"Payment {payment.payment_id} references unknown loan {payment.loan_id}",
                        "payment",
                        payment.payment_id,
                    )
                )

        for payout in payouts:
            problem = payout_problem(payout)
            if problem:
                self._reject(payout.investor_id, "payout", payout.payout_id, problem)
            else:
                self._payouts.append(payout)

        for loan in self._loans:
            if not self.is_known_investor(loan.investor_id):
                self._orphan_investor_warnings.append(
                    _warn(
                        WarningCode.UNRESOLVED_INVESTOR,
                        f"Loan {loan.loan_id} references unknown investor {loan.investor_id}",
                        "loan",
                        loan.loan_id,
                    )
                )

        for payout in self._payouts:
            if not self.is_known_investor(payout.investor_id):
                self._orphan_investor_warnings.append(
                    _warn(
                        WarningCode.UNRESOLVED_INVESTOR,
                        f"Payout {payout.payout_id} references unknown investor {payout.investor_id}",
                        "payout",
                        payout.payout_id,
                    )
                )

    def _reject(self, owner: str | None, entity_type: str, entity_id: str, problem: str) -> None:
        warning = _warn(
            WarningCode.INVALID_RECORD,
            f"{entity_type.capitalize()} {entity_id} has {problem}, excluded from the ledger",
            entity_type,
            entity_id,
        )
        self._record_warnings.append((owner, warning))

    def is_known_investor(self, investor_id: str | None) -> bool:
        """Whether an investor id resolves to a profile."""
        if investor_id is None:
            return False
        if self._known_investors is None:
            return True
        return investor_id in self._known_investors

    def has_records(self, investor_id: str) -> bool:
        """Whether any usable loan or payout belongs to the investor."""
        return any(r.investor_id == investor_id for r in [*self._loans, *self._payouts])

    def investor_ids(self) -> list[str]:
        """Every resolvable investor id, in first-seen order."""
        seen: dict[str, None] = {}
        if self._known_investors is not None:
            seen.update((i, None) for i in sorted(self._known_investors))
        for record in [*self._loans, *self._payouts]:
            if self.is_known_investor(record.investor_id):
                seen.setdefault(record.investor_id, None)
        return list(seen)

    @property
    def warnings(self) -> list[LedgerWarning]:
        """Every data problem found across the collections."""
        return [
            *(w for _, w in self._record_warnings),
            *self._orphan_payment_warnings,
            *self._orphan_investor_warnings,
        ]

    def for_portfolio(self) -> LedgerScope:
        """All usable records, minus payments that cannot be tied to a loan.

        Loans and payouts of unknown investors stay in the portfolio totals
        and are flagged.
        """
        return LedgerScope(
            investor_id=None,
            loans=list(self._loans),
            payments=list(self._resolved_payments),
            payouts=list(self._payouts),
            loans_by_id=dict(self._loans_by_id),
            warnings=self.warnings,
        )

    def for_investor(self, investor_id: str) -> LedgerScope:
        """Records owned by one investor.

        Payments are attributed through their loan. Payments that cannot be
        attributed are reported once, in the portfolio scope.
        """
        warnings = [w for owner, w in self._record_warnings if owner == investor_id]
        if not self.is_known_investor(investor_id):
            warnings.append(
                _warn(
                    WarningCode.UNRESOLVED_INVESTOR,
                    f"Investor {investor_id} not found",
                    "investor",
                    investor_id,
                )
            )
            return LedgerScope(investor_id=investor_id, warnings=warnings)

        loans = [loan for loan in self._loans if loan.investor_id == investor_id]
        loans_by_id = {loan.loan_id: loan for loan in loans}
        payments = [p for p in self._resolved_payments if p.loan_id in loans_by_id]
        payouts = [p for p in self._payouts if p.investor_id == investor_id]

        return LedgerScope(
            investor_id=investor_id,
            loans=loans,
            payments=payments,
            payouts=payouts,
            loans_by_id=loans_by_id,
            warnings=warnings,
        )


def _warn(code: WarningCode, message: str, entity_type: str, entity_id: str) -> LedgerWarning:
    warning = LedgerWarning(code=code, message=message, entity_type=entity_type, entity_id=entity_id)
    return log_ledger_warning(logger, warning)
