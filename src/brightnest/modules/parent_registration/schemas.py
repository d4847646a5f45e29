"""
Parent Registration Schemas

Pydantic schemas for the public registration flow.
"""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PublicSchoolResponse(BaseModel):
    """A school as listed in the public directory."""

    id: str
    name: str
    programs_offered: list[str] = Field(default_factory=list)
    capacity: int = 0
    address: str | None = None
    phone: str | None = None
    email: str | None = None


class AvailabilityResponse(BaseModel):
    program_capacity: int
    enrolled_count: int
    waitlist_count: int
    available_seats: int
    has_availability: bool


class CreateWaitlistEntryRequest(BaseModel):
    """Request body for POST /parent-registration/waitlist."""

    lead_id: UUID
    school_id: UUID
    program: str = Field(..., min_length=1, max_length=100)

    @field_validator("program")
    @classmethod
    def strip_program(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("program must not be blank")
        return v


class WaitlistEntryCreatedResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    lead_id: str
    school_id: str
    program: str
    position: int
    priority_score: int
    status: str


class WaitlistPaymentSessionRequest(BaseModel):
    """Request body for POST /parent-registration/waitlist/payment-session."""

    lead_id: UUID
    school_id: UUID
    amount: Decimal = Field(..., ge=0)
    currency: str = Field("usd", min_length=3, max_length=3)
    payment_type: str | None = Field(None, max_length=50)
    description: str | None = Field(None, max_length=500)


class WaitlistPaymentSessionResponse(BaseModel):
    """Redirect URL for payment; empty because the form is handled inline."""

    url: str = ""


class UploadDocumentResponse(BaseModel):
    success: bool
    document_id: str
    file_url: str


class PublicUploadDocumentResponse(UploadDocumentResponse):
    document_type: str
