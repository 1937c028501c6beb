"""
Date utilities for lease accounting
"""

from datetime import date, datetime
from dateutil.relativedelta import relativedelta
from typing import Optional, Union

DAYS_PER_YEAR = 365.25


def add_months(d: date, months: int) -> date:
    """
    Add months to a date - similar to EDATE in Excel
    Days past the end of the target month clamp to its last day
    """
    return d + relativedelta(months=months)


def months_per_period(periods_per_year: int) -> int:
    """Calendar months covered by one payment period"""
    return 12 // periods_per_year if periods_per_year > 0 else 1


def period_date(commencement: date, period: int, periods_per_year: int) -> date:
    """Calendar date of a 1-based payment period counted from commencement"""
    return add_months(commencement, (period - 1) * months_per_period(periods_per_year))


def whole_months_between(start_date: date, end_date: date) -> int:
    """Completed calendar months from start_date to end_date (negative if end is earlier)"""
    delta = relativedelta(end_date, start_date)
    return delta.years * 12 + delta.months


def year_fraction(start_date: date, end_date: date) -> float:
    """
    Calculate year fraction between two dates
    Whole calendar months count as twelfths, leftover days on a 365.25-day year
    """
    delta = relativedelta(end_date, start_date)
    return delta.years + delta.months / 12 + delta.days / DAYS_PER_YEAR


def parse_date(value: Union[str, date, None]) -> Optional[date]:
    """Parse an ISO date string; dates pass through, blanks give None"""
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value)[:10], '%Y-%m-%d').date()
    except (ValueError, TypeError):
        return None
