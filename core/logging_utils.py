"""
Utilities for safe logging with automatic PII data masking
"""

import hashlib
import re
from typing import Union


def mask_name(full_name: str) -> str:
    """
    Masks full name for safe logging

    Args:
        full_name: Full name to mask

    Returns:
        Initials (e.g., K.N.)
    """
    if not full_name or not full_name.strip():
        return "[no_name]"

    parts = full_name.strip().split()
    if len(parts) == 1:
        return f"{parts[0][0]}."
    return f"{parts[0][0]}.{parts[-1][0]}."


def public_emp_id(employee_id: Union[int, str], salt: str = "vaktlonn_emp") -> str:
    """
    Create safe public employee identifier for logging

    Employee ids arrive from the absence store as UUID strings or integers;
    both are hashed so log lines cannot be joined back to a person.

    Args:
        employee_id: Employee ID
        salt: Salt for hashing to prevent reverse lookup

    Returns:
        Safe public employee identifier (emp_0123456789ab)
    """
    if employee_id is None or employee_id == "":
        return "emp_anon"

    hash_input = f"{salt}:{employee_id}"
    hash_obj = hashlib.blake2b(hash_input.encode(), digest_size=6)
    return f"emp_{hash_obj.hexdigest()}"


def err_tag(exc: BaseException) -> str:
    """
    Extract safe error tag from exception for logging

    Args:
        exc: Exception instance

    Returns:
        Safe error tag with sanitized message content
    """
    # Check if exception has safe message attributes
    for attr in ("safe_message", "public_message"):
        msg = getattr(exc, attr, None)
        if msg:
            return str(msg)[:120]

    text = str(exc)

    # Simple sanitization from emails and long tokens
    text = re.sub(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}", "***@***", text)
    text = re.sub(r"\b(?:Bearer\s+)?[A-Za-z0-9._-]{16,}\b", "****", text)

    # Limit length
    return text[:120] if text.strip() else exc.__class__.__name__
