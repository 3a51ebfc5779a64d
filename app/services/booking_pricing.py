"""Booking price computation.

Stays are priced per whole calendar month: a 10-day stay costs one month,
a stay of 13 months and 3 days costs 13 months.
"""

from dataclasses import dataclass
from datetime import date

from dateutil.relativedelta import relativedelta


@dataclass(frozen=True)
class BookingQuote:
    months: int
    monthly_rent: float
    subtotal: float
    commission_rate: float
    service_fee: float
    total_amount: float


def whole_months_between(start: date, end: date) -> int:
    """Number of complete calendar months from start to end (never negative)."""
    delta = relativedelta(end, start)
    return max(0, delta.years * 12 + delta.months)


def compute_booking(
    monthly_rent: float, check_in: date, check_out: date, commission_rate: float
) -> BookingQuote:
    """
    Price a stay.

    Args:
        monthly_rent: Listing price per month
        check_in: Arrival date
        check_out: Departure date
        commission_rate: Platform commission in percent (10 means 10%)

    Returns:
        BookingQuote with months >= 1 and total = subtotal + service fee
    """
    months = max(1, whole_months_between(check_in, check_out))
    subtotal = round(float(monthly_rent) * months, 2)
    service_fee = round(subtotal * float(commission_rate) / 100, 2)
    return BookingQuote(
        months=months,
        monthly_rent=float(monthly_rent),
        subtotal=subtotal,
        commission_rate=float(commission_rate),
        service_fee=service_fee,
        total_amount=round(subtotal + service_fee, 2),
    )
