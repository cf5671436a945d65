"""Tests for the event collector."""

from dataclasses import replace

import pytest

from zaldo.ledger.collector import EventCollector, loan_problem, payment_problem, payout_problem
from zaldo.models import WarningCode

from factories import make_loan, make_payment, make_payout


class TestInvestorScope:
    """Tests for EventCollector.for_investor."""

    def test_payments_attributed_through_loan(self) -> None:
        loans = [
            make_loan("loan-a", investor_id="inv-1"),
            make_loan("loan-b", investor_id="inv-2"),
        ]
        payments = [
            make_payment("pay-a", loan_id="loan-a"),
            make_payment("pay-b", loan_id="loan-b"),
        ]
        payouts = [make_payout("out-1", investor_id="inv-1"), make_payout("out-2", investor_id="inv-2")]

        scope = EventCollector(loans, payments, payouts).for_investor("inv-1")

        assert [l.loan_id for l in scope.loans] == ["loan-a"]
        assert [p.payment_id for p in scope.payments] == ["pay-a"]
        assert [p.payout_id for p in scope.payouts] == ["out-1"]
        assert scope.warnings == []
        assert not scope.is_portfolio

    def test_empty_investor(self) -> None:
        scope = EventCollector([], [], []).for_investor("inv-1")

        assert scope.loans == []
        assert scope.payments == []
        assert scope.payouts == []
        assert scope.warnings == []

    def test_unknown_investor_with_registry(self) -> None:
        collector = EventCollector([make_loan(investor_id="ghost")], [], [], investor_ids=["inv-1"])

        scope = collector.for_investor("ghost")

        assert scope.loans == []
        assert any(w.code == WarningCode.UNRESOLVED_INVESTOR and w.entity_id == "ghost" for w in scope.warnings)

    def test_orphan_payment_reported_once_at_portfolio_level(self) -> None:
        loans = [make_loan("loan-a", investor_id="inv-1")]
        payments = [make_payment("pay-a", loan_id="loan-a"), make_payment("pay-x", loan_id="missing")]

        collector = EventCollector(loans, payments, [])
        scope = collector.for_investor("inv-1")

        assert [p.payment_id for p in scope.payments] == ["pay-a"]
        assert scope.warnings == []
        assert [(w.code, w.entity_id) for w in collector.for_portfolio().warnings] == [
            (WarningCode.UNRESOLVED_LOAN, "pay-x")
        ]

class TestPortfolioScope:
    """Tests for EventCollector.for_portfolio."""

    def test_all_records(self) -> None:
        loans = [make_loan("loan-a", investor_id="inv-1"), make_loan("loan-b", investor_id="inv-2")]
        payments = [make_payment("pay-a", loan_id="loan-a")]
        payouts = [make_payout(investor_id="inv-2")]

        scope = EventCollector(loans, payments, payouts).for_portfolio()

        assert scope.is_portfolio
        assert len(scope.loans) == 2
        assert len(scope.payments) == 1
        assert len(scope.payouts) == 1

    def test_unknown_investor_flagged_not_dropped(self) -> None:
        """Loans of unknown investors stay in portfolio totals with a warning."""
        loans = [make_loan("loan-a", investor_id="inv-1"), make_loan("loan-b", investor_id="ghost")]
        payouts = [make_payout("out-x", investor_id="ghost")]

        collector = EventCollector(loans, [], payouts, investor_ids=["inv-1"])
        scope = collector.for_portfolio()

        assert len(scope.loans) == 2
        assert len(scope.payouts) == 1
        flagged = {(w.entity_type, w.entity_id) for w in scope.warnings}
        assert flagged == {("loan", "loan-b"), ("payout", "out-x")}

    def test_orphan_payment_dropped(self) -> None:
        scope = EventCollector([], [make_payment(loan_id="missing")], []).for_portfolio()

        assert scope.payments == []
        assert scope.warnings[0].code == WarningCode.UNRESOLVED_LOAN


class TestInvestorIds:
    """Tests for EventCollector.investor_ids."""

    def test_without_registry(self) -> None:
        loans = [make_loan("loan-a", investor_id="inv-2"), make_loan("loan-b", investor_id="inv-1")]
        payouts = [make_payout(investor_id="inv-3")]

        assert EventCollector(loans, [], payouts).investor_ids() == ["inv-2", "inv-1", "inv-3"]

    def test_with_registry_skips_unknown(self) -> None:
        loans = [make_loan(investor_id="ghost")]

        collector = EventCollector(loans, [], [], investor_ids=["inv-1"])

        assert collector.investor_ids() == ["inv-1"]
        assert not collector.is_known_investor("ghost")
        assert not collector.is_known_investor(None)

    def test_inputs_not_mutated(self) -> None:
        loans = [make_loan()]
        payments = [make_payment(), make_payment("pay-x", loan_id="missing")]

        EventCollector(loans, payments, []).for_portfolio()

        assert len(loans) == 1
        assert len(payments) == 2


class TestInvalidRecords:
    """Tests for records that cannot be folded into the ledger."""

    def test_unknown_payment_type_dropped(self) -> None:
        loans = [make_loan("loan-a", investor_id="inv-1")]
        payments = [
            make_payment("pay-a", loan_id="loan-a"),
            replace(make_payment("pay-b", loan_id="loan-a"), payment_type="abono"),
        ]

        collector = EventCollector(loans, payments, [])
        scope = collector.for_investor("inv-1")

        assert [p.payment_id for p in scope.payments] == ["pay-a"]
        assert [(w.code, w.entity_id) for w in scope.warnings] == [(WarningCode.INVALID_RECORD, "pay-b")]
        assert "abono" in scope.warnings[0].message
        assert collector.for_portfolio().warnings == scope.warnings

    def test_unknown_loan_status_dropped(self) -> None:
        loans = [make_loan("loan-a", investor_id="inv-1"), make_loan("loan-b", investor_id="inv-1", status="pending")]

        scope = EventCollector(loans, [], []).for_portfolio()

        assert [loan.loan_id for loan in scope.loans] == ["loan-a"]
        assert "loan-b" not in scope.loans_by_id
        assert scope.warnings[0].code == WarningCode.INVALID_RECORD
        assert scope.warnings[0].entity_type == "loan"

    def test_missing_amount_dropped(self) -> None:
        payments = [replace(make_payment("pay-a"), amount=None)]
        payouts = [replace(make_payout("out-a"), amount="n/a")]

        scope = EventCollector([make_loan()], payments, payouts).for_investor("inv-test-001")

        assert scope.payments == []
        assert scope.payouts == []
        assert {w.entity_id for w in scope.warnings} == {"pay-a", "out-a"}

    def test_payment_of_invalid_loan_is_unresolved(self) -> None:
        loans = [make_loan("loan-b", status="pending")]
        payments = [make_payment("pay-b", loan_id="loan-b")]

        warnings = EventCollector(loans, payments, []).warnings

        assert [(w.code, w.entity_id) for w in warnings] == [
            (WarningCode.INVALID_RECORD, "loan-b"),
            (WarningCode.UNRESOLVED_LOAN, "pay-b"),
        ]

    def test_invalid_loan_does_not_list_investor(self) -> None:
        loans = [make_loan(investor_id="inv-1"), make_loan("loan-b", investor_id="inv-2", status="pending")]

        collector = EventCollector(loans, [], [])

        assert collector.investor_ids() == ["inv-1"]
        assert collector.has_records("inv-1")
        assert not collector.has_records("inv-2")
        assert collector.for_investor("inv-2").warnings[0].entity_id == "loan-b"


class TestRecordProblems:
    """Tests for the per-record validation helpers."""

    def test_valid_records(self) -> None:
        assert loan_problem(make_loan(admin_fee_percent=None)) is None
        assert payment_problem(make_payment()) is None
        assert payout_problem(make_payout()) is None

    def test_string_values_accepted(self) -> None:
        loan = replace(make_loan(), status="defaulted", amount="250000", interest_rate=5)
        payment = replace(make_payment(), payment_type="capital", amount=1500.5)

        assert loan_problem(loan) is None
        assert payment_problem(payment) is None

    @pytest.mark.parametrize(
        "changes,expected",
        [
            ({"status": "pending"}, "unknown status"),
            ({"amount": None}, "invalid amount"),
            ({"interest_rate": "diez"}, "invalid interest rate"),
            ({"admin_fee_percent": "cuarenta"}, "invalid admin fee percent"),
            ({"cutoff_day": 32}, "invalid cutoff day"),
            ({"amount": float("nan")}, "invalid amount"),
        ],
    )
    def test_loan_problems(self, changes: dict, expected: str) -> None:
        assert expected in loan_problem(replace(make_loan(), **changes))

    def test_payment_problems(self) -> None:
        assert "unknown payment type" in payment_problem(replace(make_payment(), payment_type="abono"))
        assert "invalid amount" in payment_problem(replace(make_payment(), amount=""))
