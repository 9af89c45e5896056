"""Shared validation utilities"""

import re
from typing import Optional

from .. import config
from .phone import normalize_to_e164


def validate_phone(phone: Optional[str]) -> Optional[str]:
    """
    Validate and normalize a phone number to E.164 format.

    Args:
        phone: Phone number string in various formats

    Returns:
        Normalized phone number in E.164 format, or the input unchanged when blank

    Raises:
        ValueError: If the phone number cannot be normalized
    """
    if not phone or not phone.strip():
        return phone

    normalized = normalize_to_e164(phone, config.DEFAULT_PHONE_COUNTRY)
    if not normalized:
        raise ValueError("Phone number must contain 7 to 15 digits")

    return normalized


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    # Basic email validation pattern
    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def validate_us_state(state: Optional[str]) -> Optional[str]:
    """Normalize a two-letter state code to upper case"""
    if not state:
        return state

    state = state.strip().upper()
    if not re.match(r"^[A-Z]{2}$", state):
        raise ValueError("State must be a two-letter code")

    return state
