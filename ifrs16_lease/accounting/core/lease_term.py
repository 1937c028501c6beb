"""
Lease term resolution
Applies the reasonably-certain threshold to renewal and termination options
"""

import re
from typing import Union

from .models import LeaseTerms, LeaseTermResolution

REASONABLY_CERTAIN = 0.5

_LEADING_NUMBER = re.compile(r'^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?')


def parse_option_years(value: Union[str, float, int, None]) -> float:
    """
    Parse a string-encoded option point in years
    Leading numeric text is used ("2 years" -> 2.0); anything else is 0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    match = _LEADING_NUMBER.match(str(value))
    if not match:
        return 0.0
    return float(match.group(0))


def resolve_lease_term(
    non_cancellable_years: float,
    renewal_years: float = 0.0,
    renewal_likelihood: float = 0.0,
    termination_point_years: float = 0.0,
    termination_likelihood: float = 0.0
) -> LeaseTermResolution:
    """
    Determine the effective lease term in years

    Priority:
      1. Termination point > 0 and reasonably certain: non-cancellable + termination point
         (renewal is ignored)
      2. Renewal > 0 and reasonably certain: non-cancellable + renewal
      3. Non-cancellable period only
    """
    termination_years = termination_point_years + non_cancellable_years if termination_point_years > 0 else 0.0

    if termination_point_years > 0 and termination_likelihood >= REASONABLY_CERTAIN:
        total_years = termination_years
    elif renewal_years > 0 and renewal_likelihood >= REASONABLY_CERTAIN:
        total_years = non_cancellable_years + renewal_years
    else:
        total_years = non_cancellable_years

    return LeaseTermResolution(
        lease_term_years=float(total_years),
        non_cancellable_years=float(non_cancellable_years),
        renewal_years=float(renewal_years),
        termination_years=float(termination_years),
    )


def resolve_terms(terms: LeaseTerms) -> LeaseTermResolution:
    return resolve_lease_term(
        terms.non_cancellable_years,
        terms.renewal_option_years,
        terms.renewal_option_likelihood,
        terms.termination_option_point,
        terms.termination_option_likelihood,
    )
