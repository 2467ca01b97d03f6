"""
Tests for core exception handling - custom exception handler and API error classes.
"""

import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

from rest_framework import status
from rest_framework.exceptions import NotAuthenticated, NotFound
from rest_framework.exceptions import ValidationError as DRFValidationError

from django.core.exceptions import ValidationError
from django.http import Http404
from django.test import RequestFactory, SimpleTestCase

from core.exceptions import (
    APIError,
    CalculationError,
    custom_exception_handler,
    format_error_details,
    get_error_code,
    get_error_message,
)
from payroll.services.contracts import InvalidTimeError
from payroll.services.contracts import ValidationError as CalculationValidationError

ENVELOPE_KEYS = {"error", "code", "message", "details", "error_id"}


class CustomExceptionHandlerTest(SimpleTestCase):
    """Tests for custom_exception_handler function"""

    def setUp(self):
        self.factory = RequestFactory()

    def create_context(self, path="/api/v1/payroll/shift-cost/"):
        return {"request": self.factory.post(path)}

    @patch("core.exceptions.logger")
    def test_drf_exception_handling(self, mock_logger):
        response = custom_exception_handler(
            NotFound(detail="Resource not found"), self.create_context()
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(set(response.data), ENVELOPE_KEYS)
        self.assertTrue(response.data["error"])
        self.assertEqual(response.data["code"], "RESOURCE_NOT_FOUND")
        self.assertEqual(response.data["message"], "Resource not found")
        self.assertEqual(len(response.data["error_id"]), 8)
        mock_logger.warning.assert_called_once()

    @patch("core.exceptions.logger")
    def test_serializer_validation_error_keeps_field_details(self, mock_logger):
        exc = DRFValidationError({"shift": {"start": ["Invalid time"]}})

        response = custom_exception_handler(exc, self.create_context())

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "VALIDATION_ERROR")
        self.assertIn("shift", response.data["details"])

    @patch("core.exceptions.logger")
    def test_not_authenticated(self, mock_logger):
        response = custom_exception_handler(NotAuthenticated(), self.create_context())

        self.assertEqual(response.data["code"], "AUTHENTICATION_REQUIRED")

    @patch("core.exceptions.logger")
    def test_engine_validation_error_is_bad_request(self, mock_logger):
        exc = CalculationValidationError("Payroll period start 2024-02-01 is after end")

        response = custom_exception_handler(exc, self.create_context())

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "VALIDATION_ERROR")
        self.assertIn("is after end", response.data["details"])

    @patch("core.exceptions.logger")
    def test_invalid_time_error_is_bad_request(self, mock_logger):
        response = custom_exception_handler(
            InvalidTimeError("Invalid time '25:00'"), self.create_context()
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "VALIDATION_ERROR")

    @patch("core.exceptions.logger")
    def test_django_validation_error(self, mock_logger):
        exc = ValidationError({"percentage": ["Out of range"]})

        response = custom_exception_handler(exc, self.create_context())

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["details"], {"percentage": ["Out of range"]})

    @patch("core.exceptions.logger")
    def test_http404(self, mock_logger):
        response = custom_exception_handler(Http404(), self.create_context())

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "RESOURCE_NOT_FOUND")

    @patch("core.exceptions.logger")
    def test_calculation_error_carries_own_status(self, mock_logger):
        exc = CalculationError(
            "Invalid payroll configuration",
            code="CONFIGURATION_ERROR",
            details={"setting": "PAYROLL_DEFAULT_HOURLY_RATE"},
        )

        response = custom_exception_handler(exc, self.create_context())

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data["code"], "CONFIGURATION_ERROR")
        self.assertEqual(
            response.data["details"], {"setting": "PAYROLL_DEFAULT_HOURLY_RATE"}
        )
        mock_logger.error.assert_not_called()

    @patch("core.exceptions.logger")
    def test_unexpected_exception_is_logged_with_traceback(self, mock_logger):
        response = custom_exception_handler(
            RuntimeError("boom"), self.create_context()
        )

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["code"], "INTERNAL_SERVER_ERROR")
        self.assertIsNone(response.data["details"])
        _, kwargs = mock_logger.error.call_args
        self.assertTrue(kwargs["exc_info"])


class ErrorHelpersTest(SimpleTestCase):
    def test_get_error_code_unknown(self):
        self.assertEqual(get_error_code(KeyError()), "UNKNOWN_ERROR")

    def test_get_error_message_prefers_detail(self):
        self.assertEqual(get_error_message({"detail": "Nope"}), "Nope")

    def test_get_error_message_non_field_errors(self):
        self.assertEqual(
            get_error_message({"non_field_errors": ["Break too long"]}),
            "Break too long",
        )

    def test_get_error_message_first_field(self):
        self.assertEqual(get_error_message({"amount": ["Required"]}), "Required")

    def test_format_error_details_drops_detail(self):
        self.assertIsNone(format_error_details({"detail": "x"}))
        self.assertEqual(format_error_details(["a"]), ["a"])

    def test_api_error_defaults(self):
        exc = APIError("Bad input")
        self.assertEqual(exc.code, "API_ERROR")
        self.assertEqual(exc.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIsNone(exc.details)


class ImportOrderTest(SimpleTestCase):
    """core.exceptions and payroll.services import each other's names"""

    project_root = Path(__file__).resolve().parents[2]

    def run_fresh(self, code):
        env = {**os.environ, "DJANGO_SETTINGS_MODULE": "vaktlonn.settings_test"}
        return subprocess.run(
            [sys.executable, "-c", code],
            cwd=self.project_root,
            env=env,
            capture_output=True,
            text=True,
        )

    def test_exceptions_imported_first(self):
        result = self.run_fresh(
            "import django; django.setup(); "
            "import core.exceptions; import payroll.services"
        )

        self.assertEqual(result.returncode, 0, result.stderr)

    def test_services_imported_first(self):
        result = self.run_fresh(
            "import django; django.setup(); "
            "import payroll.services; import core.exceptions"
        )

        self.assertEqual(result.returncode, 0, result.stderr)
