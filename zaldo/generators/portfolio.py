"""Demo loan portfolio with investors, payments and payouts."""

from __future__ import annotations

import random
from datetime import date, timedelta
from decimal import Decimal

from zaldo.generators.base import BaseGenerator
from zaldo.ledger.fees import split_interest
from zaldo.logging import get_logger
from zaldo.models import (
    Client,
    Investor,
    Loan,
    LoanStatus,
    Payment,
    PaymentType,
    Payout,
)
from zaldo.store.memory import LedgerDataStore

logger = get_logger(__name__)


class PortfolioGenerator(BaseGenerator):
    """Generate a reproducible portfolio of investor-funded loans.

    Loans pay one month of interest every 30 days. Some end in default
    (payments stop), some are settled with a capital payment.
    """

    INTEREST_RATES = [Decimal("5"), Decimal("8"), Decimal("10"), Decimal("15"), Decimal("20")]
    ADMIN_FEES = [Decimal("30"), Decimal("40"), Decimal("50")]
    STATUS_WEIGHTS = {
        LoanStatus.ACTIVE: 0.60,
        LoanStatus.DEFAULTED: 0.15,
        LoanStatus.PAID: 0.25,
    }
    MISSING_FEE_RATE = 0.20  # Share of loans stored without admin_fee_percent
    LATE_FEE_RATE = 0.10  # Chance an interest payment carries a penalty

    def generate(
        self,
        num_investors: int = 3,
        loans_per_investor: int = 4,
        months: int = 6,
        as_of: date | None = None,
    ) -> LedgerDataStore:
        """Generate a portfolio.

        Parameters
        ----------
        num_investors : int
            Number of investors (socias).
        loans_per_investor : int
            Loans funded by each investor, one client per loan.
        months : int
            History length before ``as_of``.
        as_of : date | None
            Last day of generated activity (default: today).

        Returns
        -------
        LedgerDataStore
            Store containing the generated records.
        """
        as_of = as_of or date.today()
        start = as_of - timedelta(days=30 * months)
        store = LedgerDataStore()

        for _ in range(num_investors):
            investor = Investor(
                investor_id=self.fake.uuid4(),
                full_name=self.fake.name_female(),
                email=self.fake.email(),
            )
            store.add_investor(investor)

            net_collected = Decimal("0")
            for _ in range(loans_per_investor):
                net_collected += self._generate_loan(store, investor, start, as_of)

            self._generate_payouts(store, investor, net_collected, as_of)

        logger.info("Generated demo portfolio: %s", store.summary())
        return store

    def _generate_loan(self, store: LedgerDataStore, investor: Investor, start: date, as_of: date) -> Decimal:
        client = Client(
            client_id=self.fake.uuid4(),
            full_name=self.fake.name(),
            document_id=self.fake.bothify("##########"),
            phone=self.fake.phone_number(),
        )
        store.add_client(client)

        span_days = max((as_of - start).days - 60, 0)
        start_date = start + timedelta(days=random.randint(0, span_days))
        status = random.choices(list(self.STATUS_WEIGHTS), weights=list(self.STATUS_WEIGHTS.values()))[0]
        admin_fee = None if random.random() < self.MISSING_FEE_RATE else random.choice(self.ADMIN_FEES)

        loan = Loan(
            loan_id=self.fake.uuid4(),
            client_id=client.client_id,
            investor_id=investor.investor_id,
            amount=Decimal(random.randint(5, 50) * 100_000),
            interest_rate=random.choice(self.INTEREST_RATES),
            start_date=start_date,
            status=status,
            admin_fee_percent=admin_fee,
            cutoff_day=start_date.day,
        )
        store.add_loan(loan)

        due_dates = []
        due = start_date + timedelta(days=30)
        while due <= as_of:
            due_dates.append(due)
            due += timedelta(days=30)
        if status == LoanStatus.DEFAULTED and due_dates:
            due_dates = due_dates[: random.randint(0, len(due_dates) - 1)]

        monthly_interest = loan.amount * loan.interest_rate / Decimal("100")
        net_collected = Decimal("0")
        for due_date in due_dates:
            paid_on = due_date + timedelta(days=random.randint(0, 8))
            net_collected += self._add_payment(store, loan, monthly_interest, paid_on, PaymentType.INTEREST)
            if random.random() < self.LATE_FEE_RATE:
                penalty = (monthly_interest * Decimal("0.05")).quantize(Decimal("1"))
                net_collected += self._add_payment(store, loan, penalty, paid_on, PaymentType.FEE)

        if status == LoanStatus.PAID:
            settled_on = due_dates[-1] if due_dates else as_of
            net_collected += self._add_payment(store, loan, loan.amount, settled_on, PaymentType.CAPITAL)
            store.update_loan(loan.loan_id, paid_until=settled_on)
        elif due_dates:
            store.update_loan(loan.loan_id, paid_until=due_dates[-1])

        return net_collected

    def _add_payment(
        self,
        store: LedgerDataStore,
        loan: Loan,
        amount: Decimal,
        paid_on: date,
        payment_type: PaymentType,
    ) -> Decimal:
        store.add_payment(
            Payment(
                payment_id=self.fake.uuid4(),
                loan_id=loan.loan_id,
                amount=amount,
                payment_date=paid_on,
                payment_type=payment_type,
            )
        )
        if payment_type in (PaymentType.INTEREST, PaymentType.FEE):
            return split_interest(amount, loan.admin_fee_percent).investor_share
        return amount

    def _generate_payouts(
        self,
        store: LedgerDataStore,
        investor: Investor,
        net_collected: Decimal,
        as_of: date,
    ) -> None:
        # Investors withdraw part of what came back, rounded to 10,000
        withdrawable = net_collected * Decimal(str(round(random.uniform(0.1, 0.4), 2)))
        amount = (withdrawable / 10_000).quantize(Decimal("1")) * 10_000
        if amount <= 0:
            return
        store.add_payout(
            Payout(
                payout_id=self.fake.uuid4(),
                investor_id=investor.investor_id,
                amount=amount,
                date=as_of - timedelta(days=random.randint(0, 15)),
                notes="Retiro demo",
            )
        )
