"""
Lease accounting engine
Lease terms in, liability / ROU measurement, schedules and journal entries out
"""

from .core.calculator import calculate
from .core.exceptions import (
    LeaseCalculationError,
    MissingModificationDataError,
    InvalidLeaseDataError,
    ModificationValidationError,
)
from .core.lease_modifications import apply_modification, validate_modification_event
from .core.models import (
    LeaseTerms,
    TermChanges,
    ModificationEvent,
    ModificationType,
    PaymentFrequency,
    PaymentTiming,
    CalculationResult,
)

__all__ = [
    'calculate',
    'apply_modification',
    'validate_modification_event',
    'LeaseCalculationError',
    'MissingModificationDataError',
    'InvalidLeaseDataError',
    'ModificationValidationError',
    'LeaseTerms',
    'TermChanges',
    'ModificationEvent',
    'ModificationType',
    'PaymentFrequency',
    'PaymentTiming',
    'CalculationResult',
]
