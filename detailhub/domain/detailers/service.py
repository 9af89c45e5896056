"""Detailer service - Profile management and onboarding scoring"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import Detailer
from ...shared.phone import format_phone_display
from ...shared.profile_completion import (
    check_completion,
    completion_percentage,
    is_profile_complete,
    missing_fields,
    next_step_message,
)
from .repository import DetailerRepository
from .schemas import (
    DetailerProfileResponse,
    DetailerProfileUpdate,
    ProfileCompletionResponse,
    PublicDetailerResponse,
)

logger = logging.getLogger(__name__)

# Request field -> model column
PROFILE_FIELD_MAP = {
    "businessName": "business_name",
    "firstName": "first_name",
    "lastName": "last_name",
    "description": "description",
    "services": "services",
    "businessHours": "business_hours",
    "images": "images",
    "address": "address",
    "city": "city",
    "state": "state",
    "zipCode": "zip_code",
    "email": "email",
    "phone": "phone",
    "instagram": "instagram",
    "tiktok": "tiktok",
    "website": "website",
    "twilioPhoneNumber": "twilio_phone_number",
    "smsEnabled": "sms_enabled",
}


def build_completion(detailer: Detailer) -> ProfileCompletionResponse:
    missing = missing_fields(detailer)
    return ProfileCompletionResponse(
        checks=check_completion(detailer),
        percentage=completion_percentage(detailer),
        isComplete=not missing,
        missing=missing,
        message=next_step_message(missing),
    )


def to_profile_response(detailer: Detailer) -> DetailerProfileResponse:
    return DetailerProfileResponse(
        id=detailer.id,
        publicId=detailer.public_id,
        businessName=detailer.business_name,
        firstName=detailer.first_name,
        lastName=detailer.last_name,
        description=detailer.description,
        services=detailer.services or [],
        businessHours=detailer.business_hours or [],
        images=detailer.images or [],
        address=detailer.address,
        city=detailer.city,
        state=detailer.state,
        zipCode=detailer.zip_code,
        email=detailer.email,
        phone=detailer.phone,
        phoneDisplay=format_phone_display(detailer.phone),
        instagram=detailer.instagram,
        tiktok=detailer.tiktok,
        website=detailer.website,
        twilioPhoneNumber=detailer.twilio_phone_number,
        smsEnabled=bool(detailer.sms_enabled),
        completion=build_completion(detailer),
        updated_at=detailer.updated_at,
    )


def to_public_response(detailer: Detailer) -> PublicDetailerResponse:
    return PublicDetailerResponse(
        id=detailer.id,
        publicId=detailer.public_id,
        businessName=detailer.business_name,
        description=detailer.description,
        services=detailer.services or [],
        businessHours=detailer.business_hours or [],
        images=detailer.images or [],
        city=detailer.city,
        state=detailer.state,
        phoneDisplay=format_phone_display(detailer.phone),
        instagram=detailer.instagram,
        tiktok=detailer.tiktok,
        website=detailer.website,
    )


class DetailerService:
    """Service layer for detailer business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = DetailerRepository()

    def update_profile(self, detailer: Detailer, data: DetailerProfileUpdate) -> Detailer:
        updates = {}
        for field, value in data.model_dump(exclude_unset=True).items():
            # Blank strings clear the field
            if isinstance(value, str) and not value.strip():
                value = None
            updates[PROFILE_FIELD_MAP[field]] = value

        if "sms_enabled" in updates and updates["sms_enabled"] is None:
            updates["sms_enabled"] = False

        before = completion_percentage(detailer)
        try:
            detailer = self.repo.update(self.db, detailer, **updates)
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"⚠️ Profile update conflict for detailer {detailer.id}: {e.orig}")
            raise HTTPException(
                status_code=400, detail="Twilio phone number is already in use"
            ) from e

        after = completion_percentage(detailer)
        logger.info(
            f"📥 Updated profile for detailer {detailer.id} ({len(updates)} fields, completion {before}% -> {after}%)"
        )
        return detailer

    def search_public(
        self,
        city: Optional[str] = None,
        state: Optional[str] = None,
        query: Optional[str] = None,
    ) -> list[Detailer]:
        """Search listing - incomplete profiles are never shown"""
        candidates = self.repo.search_active(self.db, city=city, state=state, query=query)
        listed = [d for d in candidates if is_profile_complete(d)]
        logger.info(f"📊 Detailer search: {len(listed)} of {len(candidates)} profiles complete")
        return listed

    def get_public(self, detailer_id: int) -> Detailer:
        detailer = self.repo.get_by_id(self.db, detailer_id)
        if not detailer or not detailer.is_active or not is_profile_complete(detailer):
            raise HTTPException(status_code=404, detail="Detailer not found")
        return detailer
