"""Pure helpers shared by the domain routers (no database or HTTP access)"""

from .customer_type import CustomerType, classify_customer, classify_from_history
from .phone import format_phone_display, normalize_to_e164
from .profile_completion import (
    ProfileCompletion,
    check_completion,
    completion_percentage,
    is_profile_complete,
)

__all__ = [
    "CustomerType",
    "ProfileCompletion",
    "check_completion",
    "classify_customer",
    "classify_from_history",
    "completion_percentage",
    "format_phone_display",
    "is_profile_complete",
    "normalize_to_e164",
]
