"""
Tests for initial measurement: liability, ROU asset and schedules
"""

from dataclasses import replace
from datetime import date

import pytest

from ifrs16_lease.accounting import calculate
from ifrs16_lease.accounting.core.calculator import calculate_initial_rou
from ifrs16_lease.accounting.core.models import (
    DEFAULT_IBR_ANNUAL,
    LeaseTerms,
    PaymentFrequency,
    PaymentTiming,
)
from ifrs16_lease.accounting.utils.finance import periodic_rate


class TestInitialLiability:

    def test_ordinary_annuity_scenario(self, annual_arrears_terms):
        result = calculate(annual_arrears_terms)
        assert result.initial_liability == pytest.approx(432947.67, abs=0.01)
        assert len(result.amortization_schedule) == 5
        assert result.amortization_schedule[-1].remaining_liability == pytest.approx(0.0, abs=0.05)

    def test_zero_rate_is_undiscounted_sum(self):
        terms = LeaseTerms(
            commencement_date=date(2024, 1, 1),
            fixed_payment=2500.0,
            frequency=PaymentFrequency.QUARTERLY,
            timing=PaymentTiming.ARREARS,
            ibr_annual=0.0,
            non_cancellable_years=3,
        )
        result = calculate(terms)
        assert result.initial_liability == 12 * 2500.0
        assert result.total_interest == 0.0

    def test_advance_worth_more_than_arrears(self, annual_arrears_terms):
        arrears = calculate(annual_arrears_terms)
        advance = calculate(replace(annual_arrears_terms, timing=PaymentTiming.ADVANCE))
        assert advance.initial_liability > arrears.initial_liability
        assert advance.initial_liability == pytest.approx(arrears.initial_liability * 1.05, abs=0.05)

    def test_prepayment_in_advance_skips_first_payment(self, annual_arrears_terms):
        terms = replace(
            annual_arrears_terms,
            timing=PaymentTiming.ADVANCE,
            prepayments_before_commencement=50000.0,
        )
        four_year_arrears = calculate(replace(annual_arrears_terms, non_cancellable_years=4))

        result = calculate(terms)

        assert result.initial_liability == pytest.approx(four_year_arrears.initial_liability, abs=0.01)
        assert result.initial_rou == pytest.approx(result.initial_liability + 50000.0, abs=0.01)

    def test_residual_value_guarantee_only_when_reasonably_certain(self, annual_arrears_terms):
        base = calculate(annual_arrears_terms)
        uncertain = calculate(replace(annual_arrears_terms, rvg_expected=20000.0))
        certain = calculate(replace(annual_arrears_terms, rvg_expected=20000.0, rvg_reasonably_certain=True))

        assert uncertain.initial_liability == base.initial_liability
        assert certain.initial_liability == pytest.approx(
            base.initial_liability + 20000.0 / 1.05 ** 5, abs=0.02
        )

    def test_sale_proceeds_above_fair_value_increase_liability(self, annual_arrears_terms):
        base = calculate(annual_arrears_terms)
        above = calculate(replace(annual_arrears_terms, fair_value=500000.0, sales_proceeds=550000.0))
        below = calculate(replace(annual_arrears_terms, fair_value=500000.0, sales_proceeds=480000.0))

        assert above.initial_liability == pytest.approx(base.initial_liability + 50000.0, abs=0.01)
        assert below.initial_liability == pytest.approx(base.initial_liability - 20000.0, abs=0.01)

    def test_zero_payment_gives_zero_liability(self, annual_arrears_terms):
        result = calculate(replace(annual_arrears_terms, fixed_payment=0.0))
        assert result.initial_liability == 0.0
        assert all(row.interest == 0.0 for row in result.amortization_schedule)

    def test_zero_term_gives_empty_schedules(self, annual_arrears_terms):
        result = calculate(replace(annual_arrears_terms, non_cancellable_years=0, initial_direct_costs=1000.0))

        assert result.initial_liability == 0.0
        assert result.initial_rou == 1000.0
        assert result.cashflow_schedule == []
        assert result.amortization_schedule == []
        assert result.depreciation_schedule == []
        assert result.total_depreciation == 0.0

    def test_missing_ibr_uses_default(self, annual_arrears_terms):
        result = calculate(replace(annual_arrears_terms, ibr_annual=None))
        expected = sum(100000.0 / (1 + DEFAULT_IBR_ANNUAL) ** i for i in range(1, 6))
        assert result.initial_liability == pytest.approx(expected, abs=0.01)

    def test_result_reports_term_components(self, annual_arrears_terms):
        result = calculate(replace(
            annual_arrears_terms,
            renewal_option_years=3,
            renewal_option_likelihood=0.9,
        ))
        assert result.lease_term_years == 8
        assert result.non_cancellable_years == 5
        assert result.renewal_years == 3
        assert result.termination_years == 0
        assert len(result.cashflow_schedule) == 8


class TestInitialROU:

    @pytest.mark.parametrize("idc, prepayments, incentives", [
        (0.0, 0.0, 0.0),
        (5000.0, 0.0, 0.0),
        (0.0, 0.0, 7500.0),
        (1200.0, 3000.0, 800.0),
    ])
    def test_additive_identity(self, annual_arrears_terms, idc, prepayments, incentives):
        terms = replace(
            annual_arrears_terms,
            initial_direct_costs=idc,
            prepayments_before_commencement=prepayments,
            lease_incentives=incentives,
        )
        result = calculate(terms)
        assert result.initial_rou == pytest.approx(
            result.initial_liability + idc + prepayments - incentives, abs=0.01
        )

    def test_fair_value_allocation_overrides_additive_formula(self, annual_arrears_terms):
        terms = replace(
            annual_arrears_terms,
            initial_direct_costs=5000.0,
            fair_value=600000.0,
            carrying_amount=300000.0,
        )
        assert calculate_initial_rou(terms, 400000.0) == 200000.0

    def test_carrying_amount_without_fair_value_is_ignored(self, annual_arrears_terms):
        terms = replace(annual_arrears_terms, initial_direct_costs=5000.0, carrying_amount=300000.0)
        assert calculate_initial_rou(terms, 400000.0) == 405000.0


class TestSchedules:

    def test_amortization_closes_to_initial_liability(self, annual_arrears_terms):
        result = calculate(annual_arrears_terms)
        total_principal = sum(row.principal for row in result.amortization_schedule)
        assert total_principal == pytest.approx(result.initial_liability, abs=0.05)

    def test_monthly_amortization_closes(self):
        terms = LeaseTerms(
            commencement_date=date(2024, 3, 1),
            fixed_payment=1500.0,
            frequency=PaymentFrequency.MONTHLY,
            timing=PaymentTiming.ARREARS,
            ibr_annual=0.08,
            non_cancellable_years=10,
        )
        result = calculate(terms)
        periods = len(result.amortization_schedule)
        total_principal = sum(row.principal for row in result.amortization_schedule)

        assert periods == 120
        assert total_principal == pytest.approx(result.initial_liability, abs=0.01 * periods)
        assert result.amortization_schedule[-1].remaining_liability == pytest.approx(0.0, abs=0.01 * periods)

    def test_interest_is_opening_balance_times_rate(self, annual_arrears_terms):
        result = calculate(annual_arrears_terms)
        rate = periodic_rate(0.05, 1)
        opening = result.initial_liability
        for row in result.amortization_schedule:
            assert row.interest == round(opening * rate, 2)
            assert row.principal == round(row.payment - row.interest, 2)
            opening = row.remaining_liability

    def test_current_and_non_current_split(self, annual_arrears_terms):
        schedule = calculate(annual_arrears_terms).amortization_schedule
        for current_row, next_row in zip(schedule, schedule[1:]):
            assert current_row.non_current_liability == next_row.remaining_liability
            assert current_row.current_liability == pytest.approx(
                current_row.remaining_liability - next_row.remaining_liability, abs=0.01
            )
        assert schedule[-1].current_liability == schedule[-1].remaining_liability
        assert schedule[-1].non_current_liability == 0.0

    def test_advance_roll_forward_leaves_accrued_residual(self, annual_arrears_terms):
        # Interest accrues on the opening balance before each rent is paid,
        # so only Arrears and prepaid-Advance schedules amortize to zero
        result = calculate(replace(annual_arrears_terms, timing=PaymentTiming.ADVANCE))
        residual = result.amortization_schedule[-1].remaining_liability
        assert residual == pytest.approx(100000.0 * (1.05 ** 5 - 1), abs=0.05)

    def test_prepayment_regime_shifts_payments(self, annual_arrears_terms):
        terms = replace(
            annual_arrears_terms,
            timing=PaymentTiming.ADVANCE,
            prepayments_before_commencement=50000.0,
            rvg_expected=10000.0,
            rvg_reasonably_certain=True,
        )
        schedule = calculate(terms).amortization_schedule

        assert [row.payment for row in schedule] == [100000.0, 100000.0, 100000.0, 110000.0, 0.0]
        assert schedule[-2].remaining_liability == pytest.approx(0.0, abs=0.05)

    def test_straight_line_depreciation(self, annual_arrears_terms):
        result = calculate(replace(annual_arrears_terms, initial_direct_costs=2052.33))
        per_period = round(result.initial_rou / 5, 2)

        assert [row.depreciation for row in result.depreciation_schedule] == [per_period] * 5
        assert result.total_depreciation == pytest.approx(result.initial_rou, abs=0.05)
        assert result.amortization_schedule[-1].remaining_asset == pytest.approx(0.0, abs=0.05)

    def test_cashflow_dates_follow_frequency(self):
        terms = LeaseTerms(
            commencement_date=date(2025, 1, 31),
            fixed_payment=900.0,
            frequency=PaymentFrequency.QUARTERLY,
            timing=PaymentTiming.ADVANCE,
            ibr_annual=0.06,
            non_cancellable_years=1,
            rvg_expected=100.0,
            rvg_reasonably_certain=True,
        )
        cashflow = calculate(terms).cashflow_schedule

        assert [row.period for row in cashflow] == [1, 2, 3, 4]
        assert [row.date for row in cashflow] == [
            date(2025, 1, 31), date(2025, 4, 30), date(2025, 7, 31), date(2025, 10, 31)
        ]
        assert [row.rent for row in cashflow] == [900.0, 900.0, 900.0, 1000.0]

    def test_result_serializes_dates_as_iso_strings(self, annual_arrears_terms):
        data = calculate(annual_arrears_terms).to_dict()
        assert data['cashflow_schedule'][0]['date'] == '2020-01-01'
        assert data['journal_entries'][0]['date'] == '2020-01-01'
        assert data['modification'] is None

    def test_terms_with_extra_fields_are_hashable(self, annual_arrears_terms):
        terms = replace(annual_arrears_terms, extra_fields={'LesseeName': 'Acme Ltd'})
        same = replace(annual_arrears_terms, extra_fields={'LesseeName': 'Acme Ltd'})
        assert hash(terms) == hash(same)
        assert {terms, same} == {terms}

    def test_calculation_is_repeatable(self, annual_arrears_terms):
        assert calculate(annual_arrears_terms) == calculate(annual_arrears_terms)
