"""
Financial calculation utilities
Period conversion, discounting and rounding used by the lease engine
"""

from typing import Union

from ..core.models import PaymentFrequency


PERIODS_PER_YEAR = {
    PaymentFrequency.MONTHLY: 12,
    PaymentFrequency.QUARTERLY: 4,
    PaymentFrequency.SEMIANNUAL: 2,
    PaymentFrequency.ANNUAL: 1,
}


def periods_per_year(frequency: Union[PaymentFrequency, str, None]) -> int:
    """
    Number of payment periods in a year for a payment frequency
    Unrecognised frequencies fall back to monthly
    """
    try:
        return PERIODS_PER_YEAR[PaymentFrequency(frequency)]
    except ValueError:
        return 12


def periodic_rate(annual_rate: float, periods: int) -> float:
    """
    Effective rate per period for an annual rate
    Compounding conversion: (1 + annual) ** (1 / periods) - 1

    Args:
        annual_rate: Annual rate as a decimal fraction (0.05 for 5%)
        periods: Periods per year
    Returns:
        Effective rate per period
    """
    if periods <= 0:
        return 0.0
    return (1 + annual_rate) ** (1.0 / periods) - 1


def round_currency(amount: float) -> float:
    """Round a monetary amount to cents"""
    return round(amount, 2)


def discount_factor(rate: float, exponent: int) -> float:
    """Present value of 1 received after `exponent` periods"""
    if rate == 0:
        return 1.0
    return 1 / ((1 + rate) ** exponent)


def present_value_of_payments(
    payment: float,
    rate: float,
    periods: int,
    advance: bool = False,
    start_period: int = 1,
    final_payment_addition: float = 0.0
) -> float:
    """
    Present value of a level payment stream

    Payments in advance are discounted as an annuity-due (period i uses
    i - 1 exponents), payments in arrears as an ordinary annuity.

    Args:
        payment: Payment per period
        rate: Rate per period
        periods: Number of periods
        advance: True if payments fall at the start of each period
        start_period: First period included in the sum
        final_payment_addition: Amount added to the last period's payment (RVG)
    Returns:
        Unrounded present value, 0.0 when there are no periods
    """
    offset = 1 if advance else 0
    pv = 0.0
    for i in range(start_period, periods + 1):
        period_payment = payment + final_payment_addition if i == periods else payment
        pv += period_payment * discount_factor(rate, i - offset)
    return pv
