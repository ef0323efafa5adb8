"""
Amortized-loan quote: fixed monthly payment and total repayment for a principal and term.
Decimal arithmetic throughout; results rounded half-up to cents. The total is the rounded
payment times the term, so payment * term == total exactly.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from errors import InvalidArgument

TWOPLACES = Decimal("0.01")
DEFAULT_ANNUAL_RATE = Decimal("0.05")
MONTHS_PER_YEAR = 12

Number = Union[Decimal, int, float, str]


@dataclass(frozen=True)
class LoanSchedule:
    principal: Decimal
    term_months: int
    annual_rate: Decimal
    periodic_payment: Decimal
    total_repayment: Decimal


def _as_decimal(value: Number, name: str) -> Decimal:
    if isinstance(value, bool):
        raise InvalidArgument(f"{name} must be a number")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError) as e:
            raise InvalidArgument(f"{name} must be a number") from e
    if not result.is_finite():
        raise InvalidArgument(f"{name} must be finite")
    return result


def monthly_rate(annual_rate: Decimal) -> Decimal:
    return annual_rate / Decimal(MONTHS_PER_YEAR)


def periodic_payment(principal: Decimal, annual_rate: Decimal, term_months: int) -> Decimal:
    rate = monthly_rate(annual_rate)
    if rate == 0:
        return (principal / Decimal(term_months)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    factor = (Decimal("1") + rate) ** term_months
    payment = principal * rate * factor / (factor - Decimal("1"))
    return payment.quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def compute_schedule(
    principal: Number,
    term_months: int,
    annual_rate: Number = DEFAULT_ANNUAL_RATE,
) -> LoanSchedule:
    """
    Compute the fixed monthly payment and total repayment.
    Only mathematical validity is checked here (positive principal, term >= 1,
    non-negative rate); business bounds belong to the caller.
    """
    principal_d = _as_decimal(principal, "principal")
    if principal_d <= 0:
        raise InvalidArgument("principal must be positive")
    if isinstance(term_months, bool) or not isinstance(term_months, int) or term_months < 1:
        raise InvalidArgument("term_months must be a positive integer")
    rate_d = _as_decimal(annual_rate, "annual_rate")
    if rate_d < 0:
        raise InvalidArgument("annual_rate must not be negative")

    payment = periodic_payment(principal_d, rate_d, term_months)
    total = (payment * Decimal(term_months)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    return LoanSchedule(
        principal=principal_d,
        term_months=term_months,
        annual_rate=rate_d,
        periodic_payment=payment,
        total_repayment=total,
    )
