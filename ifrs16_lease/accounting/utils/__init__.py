"""
Utility functions for lease accounting
"""

from .date_utils import (
    add_months,
    period_date,
    year_fraction,
    parse_date,
)

from .finance import (
    periods_per_year,
    periodic_rate,
    present_value_of_payments,
    round_currency,
)

from .journal_generator import (
    JournalGenerator,
    generate_lease_journal,
)

__all__ = [
    # Date utilities
    'add_months',
    'period_date',
    'year_fraction',
    'parse_date',

    # Finance utilities
    'periods_per_year',
    'periodic_rate',
    'present_value_of_payments',
    'round_currency',

    # Journal generation
    'JournalGenerator',
    'generate_lease_journal',
]
