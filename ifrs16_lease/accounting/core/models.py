"""
Data models for the IFRS 16 lease engine
Lease terms in, calculation results out
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, List, Dict, Any


# Used when a lease carries no IBR at all; an explicit 0 stays 0
DEFAULT_IBR_ANNUAL = 0.14


class PaymentFrequency(str, Enum):
    MONTHLY = "Monthly"
    QUARTERLY = "Quarterly"
    SEMIANNUAL = "Semiannual"
    ANNUAL = "Annual"


class PaymentTiming(str, Enum):
    ADVANCE = "Advance"
    ARREARS = "Arrears"


class ModificationType(str, Enum):
    AMENDMENT = "amendment"
    TERMINATION = "termination"


@dataclass(frozen=True)
class TermChanges:
    """Fields changed by a modification - None means unchanged"""
    fixed_payment: Optional[float] = None
    ibr_annual: Optional[float] = None
    timing: Optional[PaymentTiming] = None

    def is_empty(self) -> bool:
        return self.fixed_payment is None and self.ibr_annual is None and self.timing is None

    def relative_to(self, terms: 'LeaseTerms') -> 'TermChanges':
        """Only the fields whose value differs from the current terms"""
        return TermChanges(
            fixed_payment=None if self.fixed_payment == terms.fixed_payment else self.fixed_payment,
            ibr_annual=None if self.ibr_annual == terms.effective_ibr else self.ibr_annual,
            timing=None if self.timing == terms.timing else self.timing,
        )

    def to_dict(self) -> dict:
        changes = {}
        if self.fixed_payment is not None:
            changes['fixed_payment'] = self.fixed_payment
        if self.ibr_annual is not None:
            changes['ibr_annual'] = self.ibr_annual
        if self.timing is not None:
            changes['timing'] = self.timing.value
        return changes


@dataclass(frozen=True)
class LeaseTerms:
    """Contractual terms of one lease - immutable for the duration of a calculation"""

    commencement_date: date

    # Payments
    fixed_payment: float = 0.0
    frequency: PaymentFrequency = PaymentFrequency.MONTHLY
    timing: PaymentTiming = PaymentTiming.ADVANCE
    ibr_annual: Optional[float] = None

    # Lease term and options
    non_cancellable_years: float = 0.0
    renewal_option_years: float = 0.0
    renewal_option_likelihood: float = 0.0
    termination_option_point: float = 0.0  # years, parsed once at the boundary
    termination_option_likelihood: float = 0.0

    # Initial measurement adjustments
    initial_direct_costs: float = 0.0
    prepayments_before_commencement: float = 0.0
    lease_incentives: float = 0.0

    # Residual value guarantee
    rvg_expected: float = 0.0
    rvg_reasonably_certain: bool = False

    # Asset valuation
    fair_value: Optional[float] = None
    carrying_amount: Optional[float] = None
    sales_proceeds: Optional[float] = None

    # Identification (not used in measurement)
    contract_id: str = ""
    currency: str = "NGN"
    extra_fields: Dict[str, str] = field(default_factory=dict, hash=False)

    # Modification metadata - selects the remeasurement path in calculate()
    has_modification: bool = False
    original_terms: Optional['LeaseTerms'] = None
    modified_terms: Optional[TermChanges] = None
    modification_date: Optional[date] = None
    modification_type: ModificationType = ModificationType.AMENDMENT
    modification_reason: str = ""

    @property
    def effective_ibr(self) -> float:
        return DEFAULT_IBR_ANNUAL if self.ibr_annual is None else self.ibr_annual

    @property
    def rvg_amount(self) -> float:
        """RVG included in the payment stream, only when reasonably certain"""
        return self.rvg_expected if self.rvg_reasonably_certain else 0.0

    @property
    def is_advance(self) -> bool:
        return self.timing == PaymentTiming.ADVANCE

    @property
    def has_advance_prepayment(self) -> bool:
        return self.is_advance and self.prepayments_before_commencement > 0


@dataclass(frozen=True)
class ModificationEvent:
    """A change to a running lease as captured by the modification dialog"""
    modification_date: date
    changes: TermChanges
    reason: str = ""
    modification_type: ModificationType = ModificationType.AMENDMENT
    agreement_date: Optional[date] = None

    def to_dict(self) -> dict:
        return {
            'modification_date': self.modification_date.isoformat(),
            'changes': self.changes.to_dict(),
            'reason': self.reason,
            'modification_type': self.modification_type.value,
            'agreement_date': self.agreement_date.isoformat() if self.agreement_date else None,
        }


@dataclass(frozen=True)
class LeaseTermResolution:
    """Effective lease term plus the components it was derived from"""
    lease_term_years: float
    non_cancellable_years: float
    renewal_years: float
    termination_years: float


@dataclass(frozen=True)
class CashflowRow:
    period: int
    date: date
    rent: float

    def to_dict(self) -> dict:
        return {
            'period': self.period,
            'date': self.date.isoformat(),
            'rent': self.rent,
        }


@dataclass(frozen=True)
class AmortizationRow:
    """One period of the liability roll-forward with the ROU carrying amount"""
    period: int
    payment: float
    interest: float
    principal: float
    remaining_liability: float  # closing liability
    depreciation: float
    remaining_asset: float  # closing ROU
    current_liability: float = 0.0
    non_current_liability: float = 0.0

    def to_dict(self) -> dict:
        return {
            'period': self.period,
            'payment': self.payment,
            'interest': self.interest,
            'principal': self.principal,
            'remaining_liability': self.remaining_liability,
            'depreciation': self.depreciation,
            'remaining_asset': self.remaining_asset,
            'current_liability': self.current_liability,
            'non_current_liability': self.non_current_liability,
        }


@dataclass(frozen=True)
class DepreciationRow:
    period: int
    depreciation: float

    def to_dict(self) -> dict:
        return {'period': self.period, 'depreciation': self.depreciation}


@dataclass(frozen=True)
class JournalEntry:
    """Single journal line"""
    date: date
    account: str
    debit: float = 0.0
    credit: float = 0.0
    memo: str = ""
    currency: str = "NGN"

    def to_dict(self) -> dict:
        return {
            'date': self.date.isoformat(),
            'account': self.account,
            'debit': self.debit,
            'credit': self.credit,
            'memo': self.memo,
            'currency': self.currency,
        }


@dataclass(frozen=True)
class ModificationSummary:
    """Remeasurement figures behind a modified result"""
    modification_type: ModificationType
    modification_date: date
    reason: str
    preserved_periods: int
    modification_period: int  # first remeasured period
    years_elapsed: float
    remaining_years: float
    remaining_periods: int
    liability_at_modification: float
    rou_at_modification: float
    new_liability: float
    new_rou: float
    rou_adjustment: float
    gain_in_profit_or_loss: float = 0.0

    def to_dict(self) -> dict:
        return {
            'modification_type': self.modification_type.value,
            'modification_date': self.modification_date.isoformat(),
            'reason': self.reason,
            'preserved_periods': self.preserved_periods,
            'modification_period': self.modification_period,
            'years_elapsed': self.years_elapsed,
            'remaining_years': self.remaining_years,
            'remaining_periods': self.remaining_periods,
            'liability_at_modification': self.liability_at_modification,
            'rou_at_modification': self.rou_at_modification,
            'new_liability': self.new_liability,
            'new_rou': self.new_rou,
            'rou_adjustment': self.rou_adjustment,
            'gain_in_profit_or_loss': self.gain_in_profit_or_loss,
        }


@dataclass(frozen=True)
class CalculationResult:
    """Output of one calculation call - never mutated after creation"""
    initial_liability: float
    initial_rou: float
    total_interest: float
    total_depreciation: float
    cashflow_schedule: List[CashflowRow] = field(default_factory=list)
    amortization_schedule: List[AmortizationRow] = field(default_factory=list)
    depreciation_schedule: List[DepreciationRow] = field(default_factory=list)
    journal_entries: List[JournalEntry] = field(default_factory=list)
    lease_term_years: float = 0.0
    non_cancellable_years: float = 0.0
    renewal_years: float = 0.0
    termination_years: float = 0.0
    modification: Optional[ModificationSummary] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses"""
        return {
            'initial_liability': self.initial_liability,
            'initial_rou': self.initial_rou,
            'total_interest': self.total_interest,
            'total_depreciation': self.total_depreciation,
            'cashflow_schedule': [row.to_dict() for row in self.cashflow_schedule],
            'amortization_schedule': [row.to_dict() for row in self.amortization_schedule],
            'depreciation_schedule': [row.to_dict() for row in self.depreciation_schedule],
            'journal_entries': [entry.to_dict() for entry in self.journal_entries],
            'lease_term_years': self.lease_term_years,
            'non_cancellable_years': self.non_cancellable_years,
            'renewal_years': self.renewal_years,
            'termination_years': self.termination_years,
            'modification': self.modification.to_dict() if self.modification else None,
        }
