"""Phone number normalization and display helpers"""

import re
from typing import Optional

E164_PATTERN = re.compile(r"^\+[0-9]{7,15}$")
NON_DIGITS = re.compile(r"[^0-9]")


def _digits(value: str) -> str:
    return NON_DIGITS.sub("", value)


def normalize_to_e164(raw: Optional[str], default_country: Optional[str] = "US") -> Optional[str]:
    """
    Normalize a free-form phone number to E.164 format.

    Args:
        raw: Phone number string in any format (punctuation, spaces, +1 prefix...)
        default_country: Country assumed for 10-digit local numbers. Only "US" is supported.

    Returns:
        E.164 string (+ followed by 7-15 digits), or None if the input cannot be normalized
    """
    if not raw:
        return None

    value = raw.strip()

    # Already E.164 - return unchanged so normalization is idempotent
    if E164_PATTERN.match(value):
        return value

    digits = _digits(value)
    if not digits:
        return None

    # US number with country code
    if len(digits) == 11 and digits.startswith("1"):
        return f"+{digits}"

    # US local number
    if len(digits) == 10 and default_country == "US":
        return f"+1{digits}"

    # Best-effort international fallback, no per-country length rules
    if 7 <= len(digits) <= 15:
        return f"+{digits}"

    return None


def format_phone_display(raw: Optional[str]) -> str:
    """
    Format a phone number for display.

    US numbers render as (AAA) BBB-CCCC, anything else is echoed back trimmed.
    Blank input renders as "-".
    """
    value = (raw or "").strip()
    if not value:
        return "-"

    digits = _digits(value)
    if len(digits) == 11 and digits.startswith("1"):
        digits = digits[1:]

    if len(digits) == 10:
        return f"({digits[:3]}) {digits[3:6]}-{digits[6:]}"

    return value


def normalize_or_raw(raw: Optional[str], default_country: Optional[str] = "US") -> Optional[str]:
    """Normalize to E.164, falling back to the trimmed raw value"""
    if raw is None:
        return None
    return normalize_to_e164(raw, default_country) or raw.strip()


def normalize_for_import(raw: str, default_country: Optional[str] = "US") -> str:
    """
    Normalize a phone number coming from a spreadsheet import.

    More aggressive than normalize_to_e164: long digit strings that the
    E.164 rules reject are reduced to their last 10 digits and treated as US.
    """
    e164 = normalize_to_e164(raw, default_country)
    if e164:
        return e164

    digits = _digits(raw or "")
    if len(digits) >= 10:
        return f"+1{digits[-10:]}"

    return (raw or "").strip()


def phone_match_key(phone: Optional[str]) -> Optional[str]:
    """Last 10 digits of a phone number, used to match numbers stored in different formats"""
    digits = _digits(phone or "")
    if len(digits) < 10:
        return None
    return digits[-10:]


def mask_phone(phone: Optional[str]) -> Optional[str]:
    """Mask a stored phone number for display, keeping the last four digits"""
    if not phone:
        return None
    return f"***-***-{phone[-4:]}"
