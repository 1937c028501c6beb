"""
Lease Schedule Generator
Builds the cashflow, amortization (liability roll-forward) and straight-line
depreciation schedules for a measured lease.

Periods are generated strictly in order: each period opens at the previous
period's closing liability.
"""

import logging
from dataclasses import replace
from datetime import date
from typing import List, Sequence, TypeVar

from ..core.models import AmortizationRow, CashflowRow, DepreciationRow
from ..utils.date_utils import period_date
from ..utils.finance import round_currency

logger = logging.getLogger(__name__)

Row = TypeVar('Row', CashflowRow, AmortizationRow, DepreciationRow)


def depreciation_per_period(initial_rou: float, periods: int) -> float:
    """Straight-line charge per period, 0 when there are no periods"""
    if periods <= 0:
        return 0.0
    return initial_rou / periods


def generate_cashflow_schedule(
    commencement: date,
    payment: float,
    periods: int,
    periods_per_year: int,
    rvg_amount: float = 0.0,
    calendar_offset: int = 0
) -> List[CashflowRow]:
    """
    One row per payment period; the final period's rent includes the RVG

    Args:
        commencement: Date of period 1 in the payment calendar
        payment: Fixed payment per period
        periods: Number of periods to generate
        periods_per_year: Payment periods per year
        rvg_amount: Residual value guarantee added to the final rent
        calendar_offset: Periods already elapsed in the calendar before row 1
    Returns:
        Rows numbered 1..periods
    """
    schedule = []
    for i in range(1, periods + 1):
        rent = payment + rvg_amount if i == periods else payment
        schedule.append(CashflowRow(
            period=i,
            date=period_date(commencement, i + calendar_offset, periods_per_year),
            rent=rent,
        ))
    return schedule


def _scheduled_payment(period: int, periods: int, payment: float, rvg_amount: float,
                       has_prepayment: bool) -> float:
    # With a prepayment in advance, amortization period i settles cashflow i + 1:
    # the second-to-last period carries the final rent and RVG, the last pays nothing.
    if has_prepayment:
        if period == periods:
            return 0.0
        if period == periods - 1:
            return payment + rvg_amount
        return payment
    if period == periods:
        return payment + rvg_amount
    return payment


def generate_amortization_schedule(
    initial_liability: float,
    payment: float,
    rate: float,
    periods: int,
    initial_rou: float,
    rvg_amount: float = 0.0,
    has_prepayment: bool = False
) -> List[AmortizationRow]:
    """
    Liability roll-forward with ROU carrying amount and the current /
    non-current split of the closing liability

    interest = opening x rate, principal = payment - interest,
    closing = opening - principal (floored at 0)
    """
    if periods <= 0:
        return []

    depreciation = round_currency(depreciation_per_period(initial_rou, periods))
    opening = initial_liability
    remaining_asset = initial_rou

    rolled = []
    for i in range(1, periods + 1):
        period_payment = _scheduled_payment(i, periods, payment, rvg_amount, has_prepayment)
        interest = round_currency(opening * rate)
        principal = round_currency(period_payment - interest)
        closing = max(0.0, round_currency(opening - principal))
        remaining_asset = round_currency(remaining_asset - depreciation)

        rolled.append(AmortizationRow(
            period=i,
            payment=period_payment,
            interest=interest,
            principal=principal,
            remaining_liability=closing,
            depreciation=depreciation,
            remaining_asset=max(0.0, remaining_asset),
        ))
        opening = closing

    return split_current_liability(rolled)


def split_current_liability(schedule: Sequence[AmortizationRow]) -> List[AmortizationRow]:
    """
    Current portion = closing(i) - closing(i + 1), non-current = closing(i + 1);
    the final period is entirely current
    """
    split = []
    last = len(schedule) - 1
    for i, row in enumerate(schedule):
        if i < last:
            next_closing = schedule[i + 1].remaining_liability
            current = round_currency(row.remaining_liability - next_closing)
            non_current = next_closing
        else:
            current = row.remaining_liability
            non_current = 0.0
        split.append(replace(row, current_liability=current, non_current_liability=non_current))
    return split


def generate_depreciation_schedule(initial_rou: float, periods: int) -> List[DepreciationRow]:
    charge = round_currency(depreciation_per_period(initial_rou, periods))
    return [DepreciationRow(period=i, depreciation=charge) for i in range(1, periods + 1)]


def renumber_schedule(schedule: Sequence[Row], offset: int) -> List[Row]:
    """New rows with period numbers shifted by offset; the input is left untouched"""
    return [replace(row, period=row.period + offset) for row in schedule]
