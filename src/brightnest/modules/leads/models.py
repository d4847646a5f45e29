"""
Lead Models

A lead is a prospective enrollment record prior to confirmed admission.
"""

from enum import Enum

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from brightnest.modules.shared import BaseModel


class LeadStatus(str, Enum):
    """
    Known lead statuses.

    ``lead_status`` is stored as free text, so rows may hold values outside
    this enum; comparisons are always done on the lowercased string.
    """

    NEW = "new"
    CONTACTED = "contacted"
    INTERESTED = "interested"
    TOURED = "toured"
    WAITLISTED = "waitlisted"
    APPROVED_FOR_REGISTRATION = "approved_for_registration"
    INVOICE_SENT = "invoice_sent"
    CONFIRMED = "confirmed"
    CONVERTED = "converted"
    ENROLLED = "enrolled"
    REGISTERED = "registered"
    DECLINED = "declined"


class Lead(BaseModel):
    """Prospective enrollment for a child at a school."""

    __tablename__ = "leads"

    # ON DELETE CASCADE: leads have no meaning without their school
    school_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
    )
    program: Mapped[str | None] = mapped_column(String(100), nullable=True)
    lead_status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=LeadStatus.NEW.value,
    )

    # Family
    parent_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    parent_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    child_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_leads_school_program", "school_id", "program"),
        Index("ix_leads_parent_email", "parent_email"),
    )

    def __repr__(self) -> str:
        return f"<Lead(id={self.id}, school_id={self.school_id}, status={self.lead_status})>"
