"""Detailer domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator

from ...shared.profile_completion import ProfileCompletion
from ...shared.validators import validate_email, validate_phone, validate_us_state


class DetailerProfileUpdate(BaseModel):
    """Schema for a partial profile update"""

    model_config = ConfigDict(extra="forbid")

    businessName: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    description: Optional[str] = None
    services: Optional[list[Union[str, dict[str, Any]]]] = None
    businessHours: Optional[list[dict[str, Any]]] = None
    images: Optional[list[str]] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    instagram: Optional[str] = None
    tiktok: Optional[str] = None
    website: Optional[str] = None
    twilioPhoneNumber: Optional[str] = None
    smsEnabled: Optional[bool] = None

    @field_validator("phone", "twilioPhoneNumber")
    @classmethod
    def validate_phone_fields(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)

    @field_validator("state")
    @classmethod
    def validate_state_field(cls, v):
        return validate_us_state(v)

    @field_validator("businessHours")
    @classmethod
    def validate_business_hours(cls, v):
        if v is not None and len(v) > 7:
            raise ValueError("Business hours can have at most one entry per weekday")
        return v


class ProfileCompletionResponse(BaseModel):
    checks: ProfileCompletion
    percentage: int
    isComplete: bool
    missing: list[str]
    message: str


class DetailerProfileResponse(BaseModel):
    id: int
    publicId: Optional[str] = None
    businessName: Optional[str] = None
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    description: Optional[str] = None
    services: list[Any] = []
    businessHours: list[Any] = []
    images: list[str] = []
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zipCode: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    phoneDisplay: str = "-"
    instagram: Optional[str] = None
    tiktok: Optional[str] = None
    website: Optional[str] = None
    twilioPhoneNumber: Optional[str] = None
    smsEnabled: bool = False
    completion: ProfileCompletionResponse
    updated_at: Optional[datetime] = None


class PublicDetailerResponse(BaseModel):
    """Public listing - only fields shown on search results and booking pages"""

    id: int
    publicId: Optional[str] = None
    businessName: str
    description: Optional[str] = None
    services: list[Any] = []
    businessHours: list[Any] = []
    images: list[str] = []
    city: Optional[str] = None
    state: Optional[str] = None
    phoneDisplay: str
    instagram: Optional[str] = None
    tiktok: Optional[str] = None
    website: Optional[str] = None
