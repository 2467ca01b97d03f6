# vaktlonn/logging_filters.py
"""
Log filter that keeps personal data out of payroll log output.

Sick-leave and wage logs are the ones most likely to carry identifying data:
birth numbers from absence records, bank accounts from pay runs, and names.
The filter scrubs the message, its arguments and any ``extra`` fields.
"""

import logging
import re
from typing import Any, Mapping

REDACTION = "****"

SENSITIVE_KEYS = frozenset(
    {
        "password",
        "token",
        "authorization",
        "email",
        "phone",
        "birth_number",
        "national_id",
        "bank_account",
        "account_number",
        "employee_name",
        "full_name",
    }
)

# Attributes every LogRecord carries; only extra fields are inspected
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {
    "message",
    "asctime",
}

_PATTERNS = (
    # email, domain kept
    (re.compile(r"[A-Za-z0-9._%+-]+@([A-Za-z0-9.-]+\.[A-Za-z]{2,})"), r"***@\1"),
    # bank account, 1234.56.78901
    (re.compile(r"\b\d{4}[.\s]\d{2}[.\s]\d{5}\b"), REDACTION),
    # fødselsnummer / D-number, 11 digits with optional space after the date
    (re.compile(r"\b\d{6}\s?\d{5}\b"), REDACTION),
    (re.compile(r"(?:Bearer\s+)?[A-Za-z0-9\-_]{20,}"), REDACTION),
)


def redact_text(text: str) -> str:
    for pattern, replacement in _PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def redact(value: Any) -> Any:
    """Redact strings, mappings and sequences; numbers pass through"""
    if value is None or isinstance(value, (int, float, bool)):
        return value
    if isinstance(value, Mapping):
        return {
            key: REDACTION if _is_sensitive(key) else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple, set)):
        return type(value)(redact(item) for item in value)
    return redact_text(str(value))


def _is_sensitive(key: Any) -> bool:
    return isinstance(key, str) and key.lower() in SENSITIVE_KEYS


class PIIRedactorFilter(logging.Filter):
    """Redact PII in the message, its args and extra record fields."""

    def filter(self, record: logging.LogRecord) -> bool:
        try:
            record.msg = redact(record.msg)
            if record.args:
                if isinstance(record.args, Mapping):
                    record.args = redact(record.args)
                else:
                    record.args = tuple(redact(arg) for arg in record.args)

            for key, value in list(vars(record).items()):
                if key in _RECORD_ATTRS:
                    continue
                setattr(record, key, REDACTION if _is_sensitive(key) else redact(value))
        except Exception:
            # a failing filter must not drop the log line
            pass
        return True
