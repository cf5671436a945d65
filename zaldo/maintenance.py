"""Audited administrative corrections to ledger records.

Each operation takes explicit identifiers, is idempotent and leaves an
``AuditRecord`` plus an INFO log line on the ``zaldo.audit`` logger.
Re-applying an operation whose effect is already present is recorded with
``applied=False``.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from zaldo.exceptions import EntityNotFoundError, InvalidEntityStateError
from zaldo.logging import get_logger
from zaldo.models import AuditRecord, LoanStatus
from zaldo.sinks.serialization import to_dict

audit_logger = get_logger("zaldo.audit")


class MaintenanceService:
    """Run maintenance operations against a store.

    Parameters
    ----------
    store : Any
        Store exposing ``get_loan``, ``get_payment``, ``remove_payment`` and
        ``update_loan`` (``LedgerDataStore`` or ``PostgresLedgerStore``).
    actor : str
        Who requested the operations, written to every audit record.
    """

    def __init__(self, store: Any, actor: str) -> None:
        if not actor:
            raise InvalidEntityStateError("Maintenance operations require an actor")
        self.store = store
        self.actor = actor
        self.audit_log: list[AuditRecord] = []

    def _record(
        self,
        action: str,
        entity_type: str,
        entity_id: str,
        reason: str,
        applied: bool,
        before: dict[str, Any],
        after: dict[str, Any],
    ) -> AuditRecord:
        record = AuditRecord(
            action=action,
            entity_type=entity_type,
            entity_id=entity_id,
            actor=self.actor,
            reason=reason,
            applied=applied,
            performed_at=datetime.now(),
            before=before,
            after=after,
        )
        self.audit_log.append(record)
        audit_logger.info(
            "%s %s %s by %s (%s): %s",
            action,
            entity_type,
            entity_id,
            self.actor,
            "applied" if applied else "already in effect",
            reason,
            extra={"audit": to_dict(record)},
        )
        return record

    def delete_payment(self, payment_id: str, reason: str) -> AuditRecord:
        """Delete a payment, e.g. a duplicate registration.

        A payment that is already gone is a no-op.
        """
        payment = self.store.get_payment(payment_id)
        if payment is None:
            return self._record("payment.delete", "payment", payment_id, reason, False, {}, {})
        self.store.remove_payment(payment_id)
        return self._record("payment.delete", "payment", payment_id, reason, True, to_dict(payment), {})

    def set_paid_until(self, loan_id: str, paid_until: date, reason: str) -> AuditRecord:
        """Set the date up to which a loan's interest is settled."""
        loan = self._require_loan(loan_id)
        before = {"paid_until": loan.paid_until}
        if loan.paid_until == paid_until:
            return self._record("loan.set_paid_until", "loan", loan_id, reason, False, before, before)
        self.store.update_loan(loan_id, paid_until=paid_until)
        return self._record(
            "loan.set_paid_until", "loan", loan_id, reason, True, before, {"paid_until": paid_until}
        )

    def set_loan_status(self, loan_id: str, status: LoanStatus | str, reason: str) -> AuditRecord:
        """Move a loan to another status (e.g. out of mora)."""
        status = LoanStatus(status)
        loan = self._require_loan(loan_id)
        before = {"status": LoanStatus(loan.status).value}
        if LoanStatus(loan.status) == status:
            return self._record("loan.set_status", "loan", loan_id, reason, False, before, before)
        self.store.update_loan(loan_id, status=status)
        return self._record("loan.set_status", "loan", loan_id, reason, True, before, {"status": status.value})

    def _require_loan(self, loan_id: str) -> Any:
        loan = self.store.get_loan(loan_id)
        if loan is None:
            raise EntityNotFoundError(f"Loan {loan_id} not found")
        return loan
