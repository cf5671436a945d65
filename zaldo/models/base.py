"""Base models shared across the ledger."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from zaldo.models.enums import WarningCode


@dataclass(frozen=True)
class LedgerWarning:
    """A recoverable data problem found while folding the ledger."""

    code: WarningCode
    message: str
    entity_type: str  # loan, payment, payout, investor
    entity_id: str


@dataclass
class AuditRecord:
    """Trace of an administrative maintenance operation."""

    action: str  # e.g. payment.delete
    entity_type: str
    entity_id: str
    actor: str
    reason: str
    applied: bool  # False when the operation was already in effect
    performed_at: datetime
    before: dict[str, Any] = field(default_factory=dict)
    after: dict[str, Any] = field(default_factory=dict)
