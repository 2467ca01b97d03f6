"""
Global pytest configuration and fixtures
"""

import pytest


@pytest.fixture
def payroll_settings(settings):
    """Pin the payroll engine settings for tests that depend on them"""
    settings.PAYROLL_DEFAULT_HOURLY_RATE = "250"
    settings.SICK_LEAVE_HOURS_PER_DAY = "7.5"
    settings.SICK_LEAVE_PERCENTAGE_AVERAGING = "legacy"
    settings.PAYROLL_BATCH_MAX_WORKERS = 2
    return settings


@pytest.fixture
def api_user():
    """Unsaved user for force_authenticate; no database access needed"""
    from django.contrib.auth.models import User

    return User(username="payroll-admin", is_staff=True)


@pytest.fixture
def api_client(api_user):
    from rest_framework.test import APIClient

    client = APIClient()
    client.force_authenticate(user=api_user)
    return client


@pytest.fixture
def anonymous_client():
    from rest_framework.test import APIClient

    return APIClient()
