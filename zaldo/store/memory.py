"""In-memory ledger store with referential integrity."""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Any

from zaldo.exceptions import EntityNotFoundError, InvalidEntityStateError, ReferentialIntegrityError
from zaldo.models import Client, Investor, Loan, Payment, Payout


def _check_positive(entity: str, entity_id: str, amount: Decimal) -> None:
    if amount <= 0:
        raise InvalidEntityStateError(f"{entity} {entity_id} amount must be positive, got {amount}")


@dataclass
class LedgerDataStore:
    """In-memory store for ledger entities with relationship tracking."""

    # Primary entities
    clients: dict[str, Client] = field(default_factory=dict)
    investors: dict[str, Investor] = field(default_factory=dict)
    loans: dict[str, Loan] = field(default_factory=dict)
    payments: dict[str, Payment] = field(default_factory=dict)
    payouts: dict[str, Payout] = field(default_factory=dict)

    # Relationship indexes
    _client_loans: dict[str, list[str]] = field(default_factory=dict)
    _investor_loans: dict[str, list[str]] = field(default_factory=dict)
    _loan_payments: dict[str, list[str]] = field(default_factory=dict)
    _investor_payouts: dict[str, list[str]] = field(default_factory=dict)

    def add_client(self, client: Client) -> None:
        """Add a client to the store."""
        self.clients[client.client_id] = client
        self._client_loans.setdefault(client.client_id, [])

    def add_investor(self, investor: Investor) -> None:
        """Add an investor profile to the store."""
        self.investors[investor.investor_id] = investor
        self._investor_loans.setdefault(investor.investor_id, [])
        self._investor_payouts.setdefault(investor.investor_id, [])

    def add_loan(self, loan: Loan) -> None:
        """Add a loan to the store."""
        if loan.client_id not in self.clients:
            raise ReferentialIntegrityError(f"Client {loan.client_id} not found")

        if loan.investor_id not in self.investors:
            raise ReferentialIntegrityError(f"Investor {loan.investor_id} not found")

        _check_positive("Loan", loan.loan_id, loan.amount)
        if loan.admin_fee_percent is not None and not 0 <= loan.admin_fee_percent <= 100:
            raise InvalidEntityStateError(
                f"Loan {loan.loan_id} admin fee percent must be within 0..100, got {loan.admin_fee_percent}"
            )

        self.loans[loan.loan_id] = loan
        self._client_loans[loan.client_id].append(loan.loan_id)
        self._investor_loans[loan.investor_id].append(loan.loan_id)
        self._loan_payments[loan.loan_id] = []

    def add_payment(self, payment: Payment) -> None:
        """Add a client payment to the store."""
        if payment.loan_id not in self.loans:
            raise ReferentialIntegrityError(f"Loan {payment.loan_id} not found")

        _check_positive("Payment", payment.payment_id, payment.amount)
        self.payments[payment.payment_id] = payment
        self._loan_payments[payment.loan_id].append(payment.payment_id)

    def add_payout(self, payout: Payout) -> None:
        """Add an investor payout to the store."""
        if payout.investor_id not in self.investors:
            raise ReferentialIntegrityError(f"Investor {payout.investor_id} not found")

        _check_positive("Payout", payout.payout_id, payout.amount)
        self.payouts[payout.payout_id] = payout
        self._investor_payouts[payout.investor_id].append(payout.payout_id)

    # Ledger engine queries
    def list_clients(self) -> list[Client]:
        return list(self.clients.values())

    def list_investors(self) -> list[Investor]:
        return list(self.investors.values())

    def list_loans(self) -> list[Loan]:
        return list(self.loans.values())

    def list_payments(self) -> list[Payment]:
        return list(self.payments.values())

    def list_payouts(self) -> list[Payout]:
        return list(self.payouts.values())

    # Query methods
    def get_client_loans(self, client_id: str) -> list[Loan]:
        """Get all loans of a client."""
        return [self.loans[lid] for lid in self._client_loans.get(client_id, [])]

    def get_investor_loans(self, investor_id: str) -> list[Loan]:
        """Get all loans funded by an investor."""
        return [self.loans[lid] for lid in self._investor_loans.get(investor_id, [])]

    def get_loan_payments(self, loan_id: str) -> list[Payment]:
        """Get all payments made against a loan."""
        return [self.payments[pid] for pid in self._loan_payments.get(loan_id, [])]

    def get_investor_payments(self, investor_id: str) -> list[Payment]:
        """Get all payments on the loans of an investor."""
        return [p for loan in self.get_investor_loans(investor_id) for p in self.get_loan_payments(loan.loan_id)]

    def get_investor_payouts(self, investor_id: str) -> list[Payout]:
        """Get all payouts made to an investor."""
        return [self.payouts[pid] for pid in self._investor_payouts.get(investor_id, [])]

    # Maintenance operations
    def get_loan(self, loan_id: str) -> Loan | None:
        return self.loans.get(loan_id)

    def get_payment(self, payment_id: str) -> Payment | None:
        return self.payments.get(payment_id)

    def remove_payment(self, payment_id: str) -> None:
        """Remove a payment from the store."""
        payment = self.payments.pop(payment_id, None)
        if payment is None:
            raise EntityNotFoundError(f"Payment {payment_id} not found")
        self._loan_payments[payment.loan_id].remove(payment_id)

    def update_loan(self, loan_id: str, **changes: Any) -> Loan:
        """Replace fields of a loan, keeping its relationships."""
        loan = self.loans.get(loan_id)
        if loan is None:
            raise EntityNotFoundError(f"Loan {loan_id} not found")
        if {"loan_id", "client_id", "investor_id"} & changes.keys():
            raise InvalidEntityStateError(f"Loan {loan_id} keys cannot be changed")
        updated = replace(loan, **changes)
        self.loans[loan_id] = updated
        return updated

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "clients": len(self.clients),
            "investors": len(self.investors),
            "loans": len(self.loans),
            "payments": len(self.payments),
            "payouts": len(self.payouts),
        }
