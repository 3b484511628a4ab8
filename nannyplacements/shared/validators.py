"""Shared validation utilities"""

import re
import uuid
from typing import Optional


def validate_uuid(value: Optional[str]) -> bool:
    """Validate UUID format"""
    try:
        uuid.UUID(str(value))
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def validate_sa_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a South African phone number to E.164 format.

    Accepts local numbers (0821234567) and international ones (+27821234567,
    27 82 123 4567).

    Returns:
        Normalized phone number (+27XXXXXXXXX)

    Raises:
        ValueError: If phone number is invalid
    """
    if not phone:
        return phone

    digits = re.sub(r"\D", "", phone)

    if digits.startswith("27") and len(digits) == 11:
        digits = digits[2:]
    elif digits.startswith("0") and len(digits) == 10:
        digits = digits[1:]

    if len(digits) != 9:
        raise ValueError("Phone number must be a valid South African number")

    return f"+27{digits}"


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_choice(value: Optional[str], choices: tuple, field: str) -> Optional[str]:
    """Ensure value is one of the allowed choices; None passes through"""
    if value is None:
        return value
    if value not in choices:
        raise ValueError(f"Invalid {field}. Must be one of: {', '.join(choices)}")
    return value
