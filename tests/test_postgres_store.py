"""Tests for the PostgreSQL ledger store."""

from datetime import date
from decimal import Decimal
from typing import Any
from unittest.mock import MagicMock

import psycopg
import pytest

from zaldo.exceptions import EntityNotFoundError, InvalidEntityStateError, StoreError
from zaldo.models import InvestorRole, LoanStatus, PaymentType
from zaldo.store.postgres import PostgresLedgerStore, loan_from_row, payment_from_row


def _loan_row(**overrides: Any) -> dict[str, Any]:
    row = {
        "id": "loan-1",
        "client_id": "client-1",
        "investor_id": "inv-1",
        "amount": Decimal("1000000"),
        "interest_rate": Decimal("10"),
        "admin_fee_percent": None,
        "start_date": date(2025, 1, 1),
        "status": "active",
        "cutoff_day": None,
        "paid_until": None,
    }
    row.update(overrides)
    return row


@pytest.fixture
def cursor() -> MagicMock:
    return MagicMock()


@pytest.fixture
def connection(cursor: MagicMock) -> MagicMock:
    conn = MagicMock()
    conn.cursor.return_value.__enter__.return_value = cursor
    return conn


@pytest.fixture
def pg_store(connection: MagicMock) -> PostgresLedgerStore:
    return PostgresLedgerStore(connection=connection)


class TestRowMapping:
    """Tests for the row mappers."""

    def test_loan_without_fee(self) -> None:
        loan = loan_from_row(_loan_row())

        assert loan.loan_id == "loan-1"
        assert loan.status == LoanStatus.ACTIVE
        assert loan.admin_fee_percent is None
        assert loan.amount == Decimal("1000000")

    def test_loan_float_columns(self) -> None:
        loan = loan_from_row(_loan_row(amount=1500.5, admin_fee_percent=40.0))

        assert loan.amount == Decimal("1500.5")
        assert loan.admin_fee_percent == Decimal("40.0")

    def test_invalid_status(self) -> None:
        with pytest.raises(InvalidEntityStateError, match="loan-1"):
            loan_from_row(_loan_row(status="archived"))

    def test_payment(self) -> None:
        payment = payment_from_row(
            {
                "id": 7,
                "loan_id": 3,
                "amount": Decimal("50000"),
                "payment_date": date(2025, 2, 1),
                "payment_type": "interest",
                "late_fee_waived": None,
                "notes": None,
            }
        )

        assert payment.payment_id == "7"
        assert payment.loan_id == "3"
        assert payment.payment_type == PaymentType.INTEREST
        assert payment.late_fee_waived is False


class TestQueries:
    """Tests for the list queries."""

    def test_list_loans(self, pg_store: PostgresLedgerStore, cursor: MagicMock) -> None:
        cursor.fetchall.return_value = [_loan_row(), _loan_row(id="loan-2", status="defaulted")]

        loans = pg_store.list_loans()

        assert [l.loan_id for l in loans] == ["loan-1", "loan-2"]
        assert loans[1].status == LoanStatus.DEFAULTED

    def test_list_loans_for_investor(self, pg_store: PostgresLedgerStore, cursor: MagicMock) -> None:
        cursor.fetchall.return_value = []

        pg_store.list_loans("inv-1")

        query, params = cursor.execute.call_args.args
        assert query.endswith("WHERE investor_id = %s")
        assert params == ("inv-1",)

    def test_list_payments_for_investor_joins_loans(self, pg_store: PostgresLedgerStore, cursor: MagicMock) -> None:
        cursor.fetchall.return_value = []

        pg_store.list_payments("inv-1")

        query, params = cursor.execute.call_args.args
        assert "JOIN loans l" in query
        assert params == ("inv-1",)

    def test_list_investors_default_role(self, pg_store: PostgresLedgerStore, cursor: MagicMock) -> None:
        cursor.fetchall.return_value = [{"id": "inv-1", "full_name": None, "role": None, "email": None}]

        investors = pg_store.list_investors()

        assert investors[0].role == InvestorRole.INVESTOR
        assert investors[0].full_name == ""

    def test_driver_error_wrapped(self, pg_store: PostgresLedgerStore, cursor: MagicMock) -> None:
        cursor.execute.side_effect = psycopg.Error("connection lost")

        with pytest.raises(StoreError, match="connection lost"):
            pg_store.list_payouts()


class TestMaintenanceStatements:
    """Tests for the write path."""

    def test_remove_payment(
        self, pg_store: PostgresLedgerStore, connection: MagicMock, cursor: MagicMock
    ) -> None:
        cursor.rowcount = 1

        pg_store.remove_payment("pay-1")

        assert cursor.execute.call_args.args[1] == ("pay-1",)
        connection.commit.assert_called_once()

    def test_remove_missing_payment(self, pg_store: PostgresLedgerStore, cursor: MagicMock) -> None:
        cursor.rowcount = 0

        with pytest.raises(EntityNotFoundError):
            pg_store.remove_payment("pay-1")

    def test_failed_statement_rolls_back(
        self, pg_store: PostgresLedgerStore, connection: MagicMock, cursor: MagicMock
    ) -> None:
        cursor.execute.side_effect = psycopg.Error("deadlock")

        with pytest.raises(StoreError):
            pg_store.remove_payment("pay-1")

        connection.rollback.assert_called_once()
        connection.commit.assert_not_called()

    def test_update_loan(self, pg_store: PostgresLedgerStore, cursor: MagicMock) -> None:
        cursor.rowcount = 1
        cursor.fetchall.return_value = [_loan_row(status="paid")]

        loan = pg_store.update_loan("loan-1", status=LoanStatus.PAID)

        update_params = cursor.execute.call_args_list[0].args[1]
        assert update_params == ("paid", "loan-1")
        assert loan.status == LoanStatus.PAID

    def test_update_loan_rejects_unknown_column(self, pg_store: PostgresLedgerStore) -> None:
        with pytest.raises(InvalidEntityStateError):
            pg_store.update_loan("loan-1", investor_id="inv-2")

    def test_update_missing_loan(self, pg_store: PostgresLedgerStore, cursor: MagicMock) -> None:
        cursor.rowcount = 0

        with pytest.raises(EntityNotFoundError):
            pg_store.update_loan("loan-1", paid_until=date(2025, 6, 1))


class TestConnection:
    """Tests for connection handling."""

    def test_requires_conninfo_or_connection(self) -> None:
        with pytest.raises(StoreError):
            PostgresLedgerStore()

    def test_close(self, pg_store: PostgresLedgerStore, connection: MagicMock) -> None:
        pg_store.close()

        connection.close.assert_called_once()
