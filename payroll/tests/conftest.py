"""
Test configuration and fixtures for payroll tests.
"""

import pytest

from payroll.tests.helpers import JANUARY_2024, standard_rules


@pytest.fixture
def rules():
    """Standard supplement rule set"""
    return standard_rules()


@pytest.fixture
def january():
    return JANUARY_2024


@pytest.fixture
def payroll_service(payroll_settings):
    """Provide PayrollCalculationService configured from test settings."""
    from payroll.services.payroll_service import PayrollCalculationService

    return PayrollCalculationService()
