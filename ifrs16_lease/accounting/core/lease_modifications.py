"""
Lease Modification Handler
Remeasures a lease from the modification date forward (IFRS 16.44-46)

History up to the modification date is preserved exactly as originally
calculated; the remaining periods are remeasured under the new terms and
appended, numbered to continue after the last preserved period.
"""

import logging
import re
from dataclasses import replace
from datetime import date
from typing import Optional

from .calculator import calculate_unmodified, strip_modification
from .exceptions import ModificationValidationError
from .models import (
    CalculationResult,
    DepreciationRow,
    LeaseTerms,
    ModificationEvent,
    ModificationSummary,
    PaymentTiming,
)
from ..schedule.generator import (
    generate_amortization_schedule,
    generate_cashflow_schedule,
    renumber_schedule,
)
from ..utils.date_utils import months_per_period, whole_months_between, year_fraction
from ..utils.finance import (
    periodic_rate,
    periods_per_year,
    present_value_of_payments,
    round_currency,
)
from ..utils.journal_generator import generate_lease_journal

logger = logging.getLogger(__name__)

_VERSION_SUFFIX = re.compile(r'-v(\d+)$')


def calculate_with_modification(terms: LeaseTerms, floor_rou_at_zero: bool = False) -> CalculationResult:
    """
    Split the original calculation at the modification date and remeasure
    the remainder

    Steps:
      1. Periods elapsed at the modification date, on the original frequency
      2. Keep those periods of the original schedules unchanged
      3. Liability and ROU at the end of the last kept period become the
         opening balances (initial values if nothing was kept)
      4. Remeasure the remaining periods with the new payment and IBR
      5. ROU absorbs the liability change (IFRS 16.44)
      6. Append the new schedules, renumbered, and recompute totals

    Initial liability and ROU of the result stay the original ones.
    """
    original = strip_modification(terms.original_terms)
    changes = terms.modified_terms
    modification_date = terms.modification_date
    commencement = terms.commencement_date

    ppy = periods_per_year(original.frequency)
    original_calc = calculate_unmodified(original)
    total_periods = len(original_calc.amortization_schedule)

    years_elapsed = max(0.0, year_fraction(commencement, modification_date))
    months_elapsed = max(0, whole_months_between(commencement, modification_date))
    periods_elapsed = min(months_elapsed // months_per_period(ppy), total_periods)

    preserved_schedule = original_calc.amortization_schedule[:periods_elapsed]
    preserved_cashflow = original_calc.cashflow_schedule[:periods_elapsed]

    if preserved_schedule:
        liability_at_modification = preserved_schedule[-1].remaining_liability
        rou_at_modification = preserved_schedule[-1].remaining_asset
    else:
        liability_at_modification = original_calc.initial_liability
        rou_at_modification = original_calc.initial_rou

    remaining_years = max(0.0, original_calc.lease_term_years - years_elapsed)
    remaining_periods = total_periods - periods_elapsed

    new_payment = changes.fixed_payment if changes.fixed_payment is not None else original.fixed_payment
    new_ibr = changes.ibr_annual if changes.ibr_annual is not None else original.effective_ibr
    new_timing = changes.timing or original.timing
    rate = periodic_rate(new_ibr, ppy)
    rvg_amount = original.rvg_amount

    # A prepaid first rent keeps the schedule one cashflow ahead: the final
    # period stays empty, so only remaining_periods - 1 payments are left
    prepaid = original.has_advance_prepayment and new_timing == PaymentTiming.ADVANCE

    new_liability = round_currency(present_value_of_payments(
        new_payment,
        rate,
        remaining_periods,
        advance=(new_timing == PaymentTiming.ADVANCE),
        start_period=2 if prepaid else 1,
        final_payment_addition=rvg_amount,
    ))

    liability_adjustment = round_currency(new_liability - liability_at_modification)
    new_rou = round_currency(rou_at_modification + liability_adjustment)
    gain_in_profit_or_loss = 0.0
    if floor_rou_at_zero and new_rou < 0:
        gain_in_profit_or_loss = -new_rou
        new_rou = 0.0

    logger.info(f"Remeasuring {terms.contract_id or 'lease'} at {modification_date.isoformat()}: "
                f"{periods_elapsed} periods kept, {remaining_periods} remeasured, "
                f"liability {liability_at_modification:,.2f} -> {new_liability:,.2f}, "
                f"ROU {rou_at_modification:,.2f} -> {new_rou:,.2f}")

    new_schedule = generate_amortization_schedule(
        new_liability,
        new_payment,
        rate,
        remaining_periods,
        new_rou,
        rvg_amount,
        has_prepayment=prepaid,
    )
    new_cashflow = generate_cashflow_schedule(
        commencement,
        new_payment,
        remaining_periods,
        ppy,
        rvg_amount,
        calendar_offset=periods_elapsed,
    )

    merged_schedule = list(preserved_schedule) + renumber_schedule(new_schedule, periods_elapsed)
    merged_cashflow = list(preserved_cashflow) + renumber_schedule(new_cashflow, periods_elapsed)
    depreciation_schedule = [
        DepreciationRow(period=row.period, depreciation=row.depreciation) for row in merged_schedule
    ]

    total_interest = round_currency(sum(row.interest for row in merged_schedule))
    total_depreciation = round_currency(sum(row.depreciation for row in merged_schedule))

    journal_entries = generate_lease_journal(
        commencement,
        original_calc.initial_liability,
        original_calc.initial_rou,
        merged_schedule,
        currency=terms.currency,
        modification_date=modification_date,
        liability_adjustment=liability_adjustment,
        gain_in_profit_or_loss=gain_in_profit_or_loss,
    )

    summary = ModificationSummary(
        modification_type=terms.modification_type,
        modification_date=modification_date,
        reason=terms.modification_reason,
        preserved_periods=periods_elapsed,
        modification_period=periods_elapsed + 1,
        years_elapsed=years_elapsed,
        remaining_years=remaining_years,
        remaining_periods=remaining_periods,
        liability_at_modification=liability_at_modification,
        rou_at_modification=rou_at_modification,
        new_liability=new_liability,
        new_rou=new_rou,
        rou_adjustment=round_currency(new_rou - rou_at_modification),
        gain_in_profit_or_loss=round_currency(gain_in_profit_or_loss),
    )

    return CalculationResult(
        initial_liability=original_calc.initial_liability,
        initial_rou=original_calc.initial_rou,
        total_interest=total_interest,
        total_depreciation=total_depreciation,
        cashflow_schedule=merged_cashflow,
        amortization_schedule=merged_schedule,
        depreciation_schedule=depreciation_schedule,
        journal_entries=journal_entries,
        lease_term_years=original_calc.lease_term_years,
        non_cancellable_years=original_calc.non_cancellable_years,
        renewal_years=original_calc.renewal_years,
        termination_years=original_calc.termination_years,
        modification=summary,
    )


def apply_modification(terms: LeaseTerms, event: ModificationEvent) -> LeaseTerms:
    """
    Build the modification request for calculate() from a contract's current
    terms and a modification event
    """
    original = strip_modification(terms)
    return replace(
        original,
        has_modification=True,
        original_terms=original,
        modified_terms=event.changes,
        modification_date=event.modification_date,
        modification_type=event.modification_type,
        modification_reason=event.reason,
    )


def validate_modification_event(event: ModificationEvent, commencement: date,
                                today: Optional[date] = None,
                                current_terms: Optional[LeaseTerms] = None) -> None:
    """
    Checks the modification dialog applies before a modification is accepted

    With current_terms, values equal to the contract's own count as unchanged.

    Raises:
        ModificationValidationError: dates out of order or nothing changed
    """
    today = today or date.today()

    if event.modification_date < commencement:
        raise ModificationValidationError("Modification date cannot be before commencement date")
    if event.modification_date > today:
        raise ModificationValidationError("Modification date cannot be in the future")
    if event.agreement_date is not None:
        if event.agreement_date > today:
            raise ModificationValidationError("Agreement date cannot be in the future")
        if event.modification_date < event.agreement_date:
            raise ModificationValidationError("Modification date cannot be before agreement date")
    if event.changes.is_empty():
        raise ModificationValidationError("Please enter at least one value to modify")
    if current_terms is not None and event.changes.relative_to(current_terms).is_empty():
        raise ModificationValidationError("No changes detected. Please modify at least one value.")


def generate_version_id(base_contract_id: str, version: int) -> str:
    """
    Generate version ID from base contract ID and version number
    Example: contract-123 + version 2 = contract-123-v2
    """
    if version == 1:
        return base_contract_id
    return f"{base_contract_id}-v{version}"


def extract_base_contract_id(contract_id: str) -> str:
    """contract-123-v2 => contract-123"""
    return _VERSION_SUFFIX.sub('', contract_id)


def extract_version(contract_id: str) -> int:
    """contract-123-v2 => 2, unversioned ids are version 1"""
    match = _VERSION_SUFFIX.search(contract_id)
    return int(match.group(1)) if match else 1
