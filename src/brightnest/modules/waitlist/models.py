"""
Waitlist Models

Waitlist entries queue a lead for a seat in a (school, program). Positions
come from a per-(school, program) sequence row so that concurrent
submissions never share a position.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from brightnest.core.database import Base
from brightnest.modules.leads.models import LeadStatus
from brightnest.modules.shared import BaseModel

if TYPE_CHECKING:
    from brightnest.modules.leads.models import Lead
    from brightnest.modules.schools.models import School


class WaitlistEntry(BaseModel):
    """
    A queued request for a seat.

    ``position`` is assigned once at creation and only changes through an
    explicit staff reorder. ``status`` shares the lead status vocabulary.
    """

    __tablename__ = "waitlist"

    # At most one entry per lead
    lead_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("leads.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    school_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("schools.id", ondelete="CASCADE"),
        nullable=False,
    )
    program: Mapped[str] = mapped_column(String(100), nullable=False)

    position: Mapped[int] = mapped_column("waitlist_position", Integer, nullable=False)
    # 0-100; staff edit it on a 1-10 scale
    priority_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default=LeadStatus.WAITLISTED.value,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    offer_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Relationships
    lead: Mapped["Lead"] = relationship("Lead", lazy="selectin")
    school: Mapped["School"] = relationship("School", lazy="selectin")

    __table_args__ = (
        Index("ix_waitlist_school_program", "school_id", "program"),
        Index("ix_waitlist_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<WaitlistEntry(id={self.id}, school_id={self.school_id}, "
            f"program={self.program}, position={self.position})>"
        )


class WaitlistSequence(Base):
    """Last position handed out for a (school, program) waitlist."""

    __tablename__ = "waitlist_sequences"

    school_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("schools.id", ondelete="CASCADE"),
        primary_key=True,
    )
    program: Mapped[str] = mapped_column(String(100), primary_key=True)
    last_position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
