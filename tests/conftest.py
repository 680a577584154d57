"""Canonical test fixtures used across engine and API tests.

Fixture: $300K loan, 30yr fixed, at 4.5% (no fees) and 6.5% ($5K fees).
"""

import pytest
from datetime import date
from decimal import Decimal

from src.models.loan import LoanParameters, RecurringCosts


@pytest.fixture
def standard_loan() -> LoanParameters:
    """$300K at 4.5% for 30 years, no fees."""
    return LoanParameters(
        principal=Decimal("300000"),
        annual_rate_percent=Decimal("4.5"),
        term_months=360,
        origination_date=date(2024, 1, 15),
    )


@pytest.fixture
def fee_loan() -> LoanParameters:
    """$300K at 6.5% for 30 years with $5K finance fees."""
    return LoanParameters(
        principal=Decimal("300000"),
        annual_rate_percent=Decimal("6.5"),
        term_months=360,
        finance_fees=Decimal("5000"),
        origination_date=date(2024, 1, 15),
    )


@pytest.fixture
def zero_rate_loan() -> LoanParameters:
    """$100K interest-free over 10 years."""
    return LoanParameters(
        principal=Decimal("100000"),
        annual_rate_percent=Decimal("0"),
        term_months=120,
        origination_date=date(2024, 1, 15),
    )


@pytest.fixture
def piti_loan() -> LoanParameters:
    """$300K at 6.5% with taxes, insurance, PMI and HOA."""
    return LoanParameters(
        principal=Decimal("300000"),
        annual_rate_percent=Decimal("6.5"),
        term_months=360,
        recurring_costs=RecurringCosts(
            property_tax=Decimal("4800"),
            insurance=Decimal("1200"),
            pmi=Decimal("50"),
            hoa_fees=Decimal("25"),
        ),
        origination_date=date(2024, 1, 15),
    )
