"""Customer domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ...shared.validators import validate_email

MAX_IMPORT_ROWS = 5000


class CustomerUpsert(BaseModel):
    """Schema for creating or updating a customer keyed by phone"""

    customerPhone: str = Field(..., min_length=1, max_length=32)
    customerName: Optional[str] = None
    customerEmail: Optional[str] = None
    address: Optional[str] = None
    locationType: Optional[str] = None
    customerType: Optional[Literal["new", "returning"]] = None
    vehicle: Optional[str] = None
    vehicleYear: Optional[int] = Field(None, ge=1900, le=2100)
    vehicleMake: Optional[str] = None
    vehicleModel: Optional[str] = None
    services: Optional[list[str]] = None
    data: Optional[dict[str, Any]] = None

    @field_validator("customerPhone")
    @classmethod
    def validate_phone_present(cls, v):
        if not v.strip():
            raise ValueError("Customer phone is required")
        return v

    @field_validator("customerEmail")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)


class CustomerUpdate(BaseModel):
    """Schema for updating an existing customer"""

    customerPhone: Optional[str] = Field(None, max_length=32)
    customerName: Optional[str] = None
    customerEmail: Optional[str] = None
    address: Optional[str] = None
    locationType: Optional[str] = None
    customerType: Optional[Literal["new", "returning"]] = None
    vehicle: Optional[str] = None
    vehicleYear: Optional[int] = Field(None, ge=1900, le=2100)
    vehicleMake: Optional[str] = None
    vehicleModel: Optional[str] = None
    services: Optional[list[str]] = None
    data: Optional[dict[str, Any]] = None

    @field_validator("customerEmail")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(v)


class CustomerResponse(BaseModel):
    """Schema for customer response"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    customerPhone: str
    customerPhoneDisplay: str
    customerName: Optional[str] = None
    customerEmail: Optional[str] = None
    address: Optional[str] = None
    locationType: Optional[str] = None
    customerType: Literal["new", "returning"]
    storedCustomerType: Optional[str] = None
    completedServices: int = 0
    lastCompletedServiceAt: Optional[datetime] = None
    vehicle: Optional[str] = None
    vehicleYear: Optional[int] = None
    vehicleMake: Optional[str] = None
    vehicleModel: Optional[str] = None
    services: list[str] = []
    data: Optional[dict[str, Any]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CustomerImportRow(BaseModel):
    """One spreadsheet row; unknown columns are kept in the customer's data"""

    model_config = ConfigDict(extra="allow")

    phone: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    locationType: Optional[str] = None
    vehicle: Optional[str] = None
    services: Optional[list[str]] = None
    notes: Optional[str] = None
    visitCount: Optional[int] = Field(None, ge=0)
    firstVisit: Optional[str] = None
    lastVisit: Optional[str] = None


class CustomerImportRequest(BaseModel):
    rows: list[CustomerImportRow] = Field(..., max_length=MAX_IMPORT_ROWS)


class CustomerImportResult(BaseModel):
    created: int = 0
    updated: int = 0
    skipped: int = 0
    errors: list[str] = []
