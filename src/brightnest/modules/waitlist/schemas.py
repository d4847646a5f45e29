"""
Waitlist Schemas

Pydantic schemas for waitlist requests and responses.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class WaitlistEntryResponse(BaseModel):
    """A single waitlist entry as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    lead_id: str
    school_id: str
    program: str
    position: int
    priority_score: int
    status: str
    created_at: datetime | None = None


class WaitlistItem(BaseModel):
    """Row in the staff waitlist table."""

    id: str
    lead_id: str
    child_name: str
    parent_name: str
    email: str
    program: str
    school: str
    school_id: str
    position: int
    status: str
    priority: str
    priority_score: int = Field(..., ge=1, le=10)
    date_added: datetime | None = None
    last_updated: datetime | None = None
    notes: str


class ProgramBreakdown(BaseModel):
    program: str
    count: int


class WaitlistSchoolSummary(BaseModel):
    id: str
    name: str
    total_waitlist: int
    program_breakdown: list[ProgramBreakdown]


class WaitlistStats(BaseModel):
    total_waitlisted: int
    total_schools: int


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class WaitlistListResponse(BaseModel):
    """Response for GET /waitlist."""

    waitlist: list[WaitlistItem]
    schools: list[WaitlistSchoolSummary]
    stats: WaitlistStats
    pagination: Pagination


class WaitlistCountResponse(BaseModel):
    count: int


class UpdateWaitlistStatusRequest(BaseModel):
    status: str = Field(..., min_length=1, max_length=50)


class UpdateWaitlistPositionRequest(BaseModel):
    position: int


class UpdateWaitlistEntryRequest(BaseModel):
    """Staff edit of notes and/or priority (1-10 scale)."""

    notes: str | None = Field(None, max_length=2000)
    priority_score: int | None = Field(None, ge=1, le=10)


class ParentWaitlistItem(BaseModel):
    """Entry in a parent's own waitlist view."""

    id: str
    child_name: str
    program: str
    school_id: str
    school: str
    position: int
    status: str
    priority: str
    priority_score: int
    date_applied: datetime | None = None
    estimated_time: str
    last_updated: datetime | None = None
    notes: str | None = None
    sibling_enrolled: bool
    tour_scheduled: datetime | None = None
