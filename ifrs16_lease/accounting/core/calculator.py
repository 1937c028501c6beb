"""
IFRS 16 lease calculator
Measures the lease liability and ROU asset at commencement and builds the
schedules and journal entries from them.

calculate() is the single entry point: leases flagged with has_modification
are routed to the remeasurement engine in lease_modifications.
"""

import logging
from dataclasses import replace

from .exceptions import MissingModificationDataError
from .lease_term import resolve_terms
from .models import CalculationResult, LeaseTerms
from ..schedule.generator import (
    generate_amortization_schedule,
    generate_cashflow_schedule,
    generate_depreciation_schedule,
)
from ..utils.finance import (
    periodic_rate,
    periods_per_year,
    present_value_of_payments,
    round_currency,
)
from ..utils.journal_generator import generate_lease_journal

logger = logging.getLogger(__name__)


def total_periods(lease_term_years: float, frequency) -> int:
    return int(round(lease_term_years * periods_per_year(frequency)))


def calculate_initial_liability(terms: LeaseTerms, periods: int, rate: float) -> float:
    """
    Present value of the contractual payment stream

    - Advance payments are discounted as an annuity-due
    - With a prepayment in advance, period 1 is already settled and excluded
    - A reasonably certain RVG is added to the final payment
    - Sale proceeds above (below) fair value increase (decrease) the liability
    """
    start_period = 2 if terms.has_advance_prepayment else 1
    pv = present_value_of_payments(
        terms.fixed_payment,
        rate,
        periods,
        advance=terms.is_advance,
        start_period=start_period,
        final_payment_addition=terms.rvg_amount,
    )
    liability = round_currency(pv)

    fair_value = terms.fair_value or 0.0
    sales_proceeds = terms.sales_proceeds or 0.0
    if fair_value > 0 and sales_proceeds > 0 and sales_proceeds != fair_value:
        liability = round_currency(liability + (sales_proceeds - fair_value))

    return liability


def calculate_initial_rou(terms: LeaseTerms, initial_liability: float) -> float:
    """
    ROU = liability + initial direct costs + prepayments - incentives,
    or liability / fair value x carrying amount when both are set
    """
    fair_value = terms.fair_value or 0.0
    carrying_amount = terms.carrying_amount or 0.0
    if fair_value > 0 and carrying_amount > 0:
        return round_currency(initial_liability / fair_value * carrying_amount)

    return round_currency(
        initial_liability
        + terms.initial_direct_costs
        + terms.prepayments_before_commencement
        - terms.lease_incentives
    )


def calculate_unmodified(terms: LeaseTerms) -> CalculationResult:
    """Measure a lease from commencement over its resolved term"""
    term = resolve_terms(terms)
    ppy = periods_per_year(terms.frequency)
    periods = total_periods(term.lease_term_years, terms.frequency)
    rate = periodic_rate(terms.effective_ibr, ppy)

    logger.debug(f"Lease {terms.contract_id or '-'}: term={term.lease_term_years}y, "
                 f"periods={periods}, rate/period={rate:.6f}")

    initial_liability = calculate_initial_liability(terms, periods, rate)
    initial_rou = calculate_initial_rou(terms, initial_liability)

    cashflow_schedule = generate_cashflow_schedule(
        terms.commencement_date, terms.fixed_payment, periods, ppy, terms.rvg_amount
    )
    amortization_schedule = generate_amortization_schedule(
        initial_liability,
        terms.fixed_payment,
        rate,
        periods,
        initial_rou,
        terms.rvg_amount,
        has_prepayment=terms.has_advance_prepayment,
    )
    depreciation_schedule = generate_depreciation_schedule(initial_rou, periods)
    journal_entries = generate_lease_journal(
        terms.commencement_date, initial_liability, initial_rou, amortization_schedule,
        currency=terms.currency,
    )

    total_interest = round_currency(sum(row.interest for row in amortization_schedule))
    total_depreciation = round_currency(sum(row.depreciation for row in depreciation_schedule))

    logger.debug(f"Lease {terms.contract_id or '-'}: liability={initial_liability:,.2f}, "
                 f"ROU={initial_rou:,.2f}")

    return CalculationResult(
        initial_liability=initial_liability,
        initial_rou=initial_rou,
        total_interest=total_interest,
        total_depreciation=total_depreciation,
        cashflow_schedule=cashflow_schedule,
        amortization_schedule=amortization_schedule,
        depreciation_schedule=depreciation_schedule,
        journal_entries=journal_entries,
        lease_term_years=term.lease_term_years,
        non_cancellable_years=term.non_cancellable_years,
        renewal_years=term.renewal_years,
        termination_years=term.termination_years,
    )


def strip_modification(terms: LeaseTerms) -> LeaseTerms:
    """Copy of the terms without modification metadata"""
    return replace(
        terms,
        has_modification=False,
        original_terms=None,
        modified_terms=None,
        modification_date=None,
    )


def calculate(terms: LeaseTerms, floor_rou_at_zero: bool = False) -> CalculationResult:
    """
    Calculate IFRS 16 measurement, schedules and journal entries

    Args:
        terms: Lease terms; when has_modification is set, original_terms,
            modified_terms and modification_date must all be present
        floor_rou_at_zero: On remeasurement, clamp a negative ROU at 0 and
            recognise the excess in profit or loss
    Returns:
        A new CalculationResult
    Raises:
        MissingModificationDataError: modification requested without its metadata
    """
    if not terms.has_modification:
        return calculate_unmodified(terms)

    missing = [name for name, value in (
        ('original_terms', terms.original_terms),
        ('modified_terms', terms.modified_terms),
        ('modification_date', terms.modification_date),
    ) if value is None]
    if missing:
        raise MissingModificationDataError(f"Missing modification metadata: {', '.join(missing)}")

    # Imported here: lease_modifications re-invokes calculate_unmodified
    from .lease_modifications import calculate_with_modification
    return calculate_with_modification(terms, floor_rou_at_zero=floor_rou_at_zero)
