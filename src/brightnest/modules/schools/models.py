"""
School Models

Each school is a tenant in the multi-tenant architecture. Schools are
created by administrative onboarding and are read-only to the registration
flow.
"""

from enum import Enum

from sqlalchemy import Integer, String, Text
from sqlalchemy.dialects.postgresql import ENUM, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from brightnest.modules.shared import BaseModel


class SchoolStatus(str, Enum):
    """Status of a school tenant."""

    ACTIVE = "active"
    INACTIVE = "inactive"


class School(BaseModel):
    """
    School tenant model.

    ``capacity`` is the total seat ceiling across all programs; the
    availability calculation splits it evenly over ``programs_offered``.
    """

    __tablename__ = "schools"

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        index=True,
    )
    capacity: Mapped[int | None] = mapped_column(
        Integer,
        nullable=True,
    )
    programs_offered: Mapped[list[str] | None] = mapped_column(
        JSONB,
        nullable=True,
    )

    # Contact
    address: Mapped[str | None] = mapped_column(
        Text,
        nullable=True,
    )
    phone: Mapped[str | None] = mapped_column(
        String(20),
        nullable=True,
    )
    email: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
    )

    status: Mapped[SchoolStatus] = mapped_column(
        ENUM(
            SchoolStatus,
            name="school_status",
            create_type=True,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=SchoolStatus.ACTIVE,
    )

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name={self.name}, status={self.status.value})>"
