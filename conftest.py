"""Pytest configuration and fixtures."""

from datetime import date

import pytest

from ifrs16_lease.accounting.core.models import LeaseTerms, PaymentFrequency, PaymentTiming


@pytest.fixture
def annual_arrears_terms() -> LeaseTerms:
    """$100,000 a year in arrears for 5 years at 5%, no options."""
    return LeaseTerms(
        commencement_date=date(2020, 1, 1),
        fixed_payment=100000.0,
        frequency=PaymentFrequency.ANNUAL,
        timing=PaymentTiming.ARREARS,
        ibr_annual=0.05,
        non_cancellable_years=5,
        contract_id="LC-001",
        currency="USD",
    )


@pytest.fixture
def lease_payload() -> dict:
    """Contract-form payload for the same lease."""
    return {
        "ContractID": "LC-001",
        "CommencementDate": "2020-01-01",
        "Currency": "USD",
        "FixedPaymentPerPeriod": 100000,
        "PaymentFrequency": "Annual",
        "PaymentTiming": "Arrears",
        "NonCancellableYears": 5,
        "IBR_Annual": 0.05,
        "RenewalOptionYears": 0,
        "RenewalOptionLikelihood": 0,
        "TerminationOptionPoint": "",
        "TerminationOptionLikelihood": 0,
        "InitialDirectCosts": 0,
        "PrepaymentsBeforeCommencement": 0,
        "LeaseIncentives": 0,
        "LesseeName": "Acme Ltd",
    }


@pytest.fixture
def app():
    from ifrs16_lease.app import create_app

    return create_app('testing')


@pytest.fixture
def client(app):
    return app.test_client()
