"""
Exceptions raised by the lease engine and its payload boundary
"""


class LeaseCalculationError(Exception):
    """Base exception for all lease engine errors."""


class MissingModificationDataError(LeaseCalculationError, ValueError):
    """Raised when the modification path is requested without its metadata."""


class InvalidLeaseDataError(LeaseCalculationError, ValueError):
    """Raised when a lease payload is missing required structure."""


class ModificationValidationError(LeaseCalculationError, ValueError):
    """Raised when a modification event fails the dialog's date and value checks."""
