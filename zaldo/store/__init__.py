"""Data stores feeding the ledger engine."""

from zaldo.store.memory import LedgerDataStore

__all__ = ["LedgerDataStore"]
