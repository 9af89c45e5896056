"""
Profile completion rubric for detailer onboarding.

Eight equally weighted checks decide whether a business profile is ready to be
listed in public search. No partial credit within a check: three of four
address components still fails "location".
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

CHECK_NAMES = (
    "businessName",
    "description",
    "services",
    "hours",
    "location",
    "images",
    "contact",
    "socialMedia",
)

DAYS_PER_WEEK = 7

NEXT_STEP_HINTS = {
    "businessName": "Add your business name",
    "description": "Write a short description of your business",
    "services": "Add at least one service",
    "hours": "Set your business hours for all seven days",
    "location": "Complete your business address",
    "images": "Upload at least one portfolio image",
    "contact": "Add your email and phone number",
    "socialMedia": "Link your Instagram, TikTok or website",
}

COMPLETE_MESSAGE = "Your profile is complete! Well done."


class ProfileCompletion(BaseModel):
    businessName: bool
    description: bool
    services: bool
    hours: bool
    location: bool
    images: bool
    contact: bool
    socialMedia: bool


def _field(profile: Any, name: str) -> Any:
    if profile is None:
        return None
    if isinstance(profile, Mapping):
        return profile.get(name)
    return getattr(profile, name, None)


def _has_text(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _non_empty_list(value: Any) -> bool:
    return isinstance(value, (list, tuple)) and len(value) > 0


def check_completion(profile: Any) -> ProfileCompletion:
    """Evaluate every rubric check against a detailer (model instance or dict)"""
    hours = _field(profile, "business_hours")

    return ProfileCompletion(
        businessName=_has_text(_field(profile, "business_name")),
        description=_has_text(_field(profile, "description")),
        services=_non_empty_list(_field(profile, "services")),
        hours=isinstance(hours, (list, tuple)) and len(hours) == DAYS_PER_WEEK,
        location=all(
            bool(_field(profile, name)) for name in ("address", "city", "state", "zip_code")
        ),
        images=_non_empty_list(_field(profile, "images")),
        contact=bool(_field(profile, "email")) and _has_text(_field(profile, "phone")),
        socialMedia=any(bool(_field(profile, name)) for name in ("instagram", "tiktok", "website")),
    )


def is_profile_complete(profile: Any) -> bool:
    return all(check_completion(profile).model_dump().values())


def completion_percentage(profile: Any) -> int:
    checks = check_completion(profile).model_dump()
    completed = sum(1 for passed in checks.values() if passed)
    # Half-up rounding (7/8 -> 88); round() would use banker's rounding
    return (200 * completed + len(checks)) // (2 * len(checks))


def missing_fields(profile: Any) -> list[str]:
    checks = check_completion(profile).model_dump()
    return [name for name in CHECK_NAMES if not checks[name]]


def next_step_message(missing: list[str]) -> str:
    if not missing:
        return COMPLETE_MESSAGE
    return f"Next step: {NEXT_STEP_HINTS[missing[0]]}"
