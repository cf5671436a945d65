"""Pytest configuration and fixtures."""

import pytest

from zaldo.models import Client, Investor
from zaldo.store.memory import LedgerDataStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def sample_investor_id() -> str:
    """Sample investor ID."""
    return "inv-test-001"


@pytest.fixture
def sample_loan_id() -> str:
    """Sample loan ID."""
    return "loan-test-001"


@pytest.fixture
def sample_investor(sample_investor_id: str) -> Investor:
    """Sample investor profile."""
    return Investor(investor_id=sample_investor_id, full_name="Herminia Test")


@pytest.fixture
def sample_client() -> Client:
    """Sample client."""
    return Client(client_id="client-test-001", full_name="Julio Test", document_id="1234567890")


@pytest.fixture
def store(sample_investor: Investor, sample_client: Client) -> LedgerDataStore:
    """Store with one investor and one client."""
    store = LedgerDataStore()
    store.add_investor(sample_investor)
    store.add_client(sample_client)
    return store
