"""Interest split between the platform operator and the investor."""

from decimal import Decimal
from typing import Any

from zaldo.logging import get_logger
from zaldo.models.enums import PaymentType
from zaldo.models.ledger import Loan
from zaldo.models.reports import InterestDistribution, InterestSplit

logger = get_logger(__name__)

ADMIN_FEE_PERCENT = Decimal("40")

REVENUE_TYPES = frozenset({PaymentType.INTEREST, PaymentType.FEE})
CAPITAL_TYPES = frozenset({PaymentType.CAPITAL, PaymentType.PRINCIPAL})

_HUNDRED = Decimal("100")


def to_money(value: Any) -> Decimal:
    """Coerce a numeric value to Decimal.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    rather than its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def resolve_admin_fee_percent(
    admin_fee_percent: Any,
    default: Decimal = ADMIN_FEE_PERCENT,
) -> Decimal:
    """Return the fee rate to apply, substituting the default when absent.

    Only a missing value is defaulted: an explicit ``0`` is a valid rate.

    Parameters
    ----------
    admin_fee_percent : Any
        Stored fee rate (0..100) or ``None``.
    default : Decimal
        Rate used when the stored value is missing.

    Returns
    -------
    Decimal
        Effective fee rate.
    """
    if admin_fee_percent is None or admin_fee_percent == "":
        return to_money(default)
    return to_money(admin_fee_percent)


def loan_admin_fee_percent(loan: Loan, default: Decimal = ADMIN_FEE_PERCENT) -> Decimal:
    """Effective fee rate of a loan."""
    if loan.admin_fee_percent is None:
        logger.debug("Loan %s has no admin fee percent, using %s", loan.loan_id, default)
    return resolve_admin_fee_percent(loan.admin_fee_percent, default)


def is_revenue(payment_type: PaymentType | str) -> bool:
    """Whether a payment type is interest income subject to the split."""
    return PaymentType(payment_type) in REVENUE_TYPES


def is_capital(payment_type: PaymentType | str) -> bool:
    """Whether a payment type returns principal."""
    return PaymentType(payment_type) in CAPITAL_TYPES


def split_interest(amount: Any, admin_fee_percent: Any = None) -> InterestSplit:
    """Divide a revenue amount into operator and investor shares.

    Parameters
    ----------
    amount : Any
        Interest or fee amount received.
    admin_fee_percent : Any
        Operator's percentage; ``None`` applies ``ADMIN_FEE_PERCENT``.

    Returns
    -------
    InterestSplit
        Shares that always add back up to ``amount``.
    """
    amount = to_money(amount)
    percent = resolve_admin_fee_percent(admin_fee_percent)
    admin_share = amount * percent / _HUNDRED
    return InterestSplit(
        amount=amount,
        admin_fee_percent=percent,
        admin_share=admin_share,
        investor_share=amount - admin_share,
    )


def calculate_interest_distribution(
    amount: Any,
    rate: Any,
    admin_fee_percent: Any = None,
) -> InterestDistribution:
    """Project one month of interest on a principal and split it.

    Parameters
    ----------
    amount : Any
        Principal.
    rate : Any
        Monthly interest rate as a percentage (5 means 5%).
    admin_fee_percent : Any
        Operator's percentage; ``None`` applies ``ADMIN_FEE_PERCENT``.

    Returns
    -------
    InterestDistribution
        Total monthly interest and its shares.
    """
    total_interest = to_money(amount) * to_money(rate) / _HUNDRED
    split = split_interest(total_interest, admin_fee_percent)
    return InterestDistribution(
        total_interest=total_interest,
        admin_share=split.admin_share,
        investor_share=split.investor_share,
    )
