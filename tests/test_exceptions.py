"""Tests for the exception hierarchy as raised by stores, config and maintenance."""

import pytest

from zaldo.config import LedgerConfig
from zaldo.exceptions import (
    ConfigurationError,
    EntityNotFoundError,
    InvalidEntityStateError,
    ReferentialIntegrityError,
    StoreError,
    ZaldoError,
)
from zaldo.maintenance import MaintenanceService
from zaldo.store.memory import LedgerDataStore
from zaldo.store.postgres import PostgresLedgerStore

from factories import make_loan


@pytest.mark.parametrize(
    "error_cls",
    [EntityNotFoundError, InvalidEntityStateError, ConfigurationError, StoreError],
)
def test_caught_as_zaldo_error(error_cls: type) -> None:
    assert issubclass(error_cls, ZaldoError)


class TestStoreErrors:
    """Errors raised by the in-memory store."""

    def test_missing_client_is_not_found(self, store: LedgerDataStore) -> None:
        with pytest.raises(EntityNotFoundError, match="Client missing not found") as exc_info:
            store.add_loan(make_loan(client_id="missing"))

        assert isinstance(exc_info.value, ReferentialIntegrityError)

    def test_missing_payment_caught_as_zaldo_error(self, store: LedgerDataStore) -> None:
        with pytest.raises(ZaldoError, match="Payment pay-x not found"):
            store.remove_payment("pay-x")

    def test_key_change_is_invalid_state(self, store: LedgerDataStore) -> None:
        store.add_loan(make_loan())

        with pytest.raises(InvalidEntityStateError):
            store.update_loan("loan-test-001", investor_id="inv-other")

    def test_postgres_without_connection(self) -> None:
        with pytest.raises(StoreError, match="conninfo or connection"):
            PostgresLedgerStore()


class TestConfigurationErrors:
    """Errors raised while building configuration."""

    def test_negative_grace_period(self) -> None:
        with pytest.raises(ZaldoError, match="Grace period"):
            LedgerConfig(grace_period_days=-3)


class TestMaintenanceErrors:
    """Errors raised by maintenance operations."""

    def test_actor_required(self, store: LedgerDataStore) -> None:
        with pytest.raises(InvalidEntityStateError, match="actor"):
            MaintenanceService(store, "")

    def test_unknown_loan(self, store: LedgerDataStore) -> None:
        service = MaintenanceService(store, "admin@zaldo.co")

        with pytest.raises(EntityNotFoundError, match="Loan ghost not found"):
            service.set_loan_status("ghost", "paid", reason="closed")
