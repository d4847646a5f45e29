"""
Lead Repository

Database operations for leads used by the registration flow.
"""

from collections.abc import Iterable
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from brightnest.modules.leads.models import Lead
from brightnest.modules.shared.filters import status_in


class LeadRepository:
    """Repository for lead database operations."""

    @staticmethod
    async def get_by_id(db: AsyncSession, lead_id: str | UUID) -> Lead | None:
        """Get a lead by ID."""
        result = await db.execute(select(Lead).where(Lead.id == str(lead_id)))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_for_school(
        db: AsyncSession,
        lead_id: str | UUID,
        school_id: str | UUID,
    ) -> Lead | None:
        """
        Get a lead only if it belongs to the given school.

        Returns:
            Lead instance, or None if it does not exist or belongs elsewhere
        """
        result = await db.execute(
            select(Lead).where(
                Lead.id == str(lead_id),
                Lead.school_id == str(school_id),
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    async def count_by_program_and_statuses(
        db: AsyncSession,
        school_id: str | UUID,
        normalized_program: str,
        statuses: Iterable[str],
    ) -> int:
        """
        Count a school's leads for a program whose status is in ``statuses``.

        Program and status are compared case-insensitively; callers pass the
        program already trimmed and lowercased and statuses in lowercase.
        """
        result = await db.execute(
            select(func.count())
            .select_from(Lead)
            .where(
                Lead.school_id == str(school_id),
                func.lower(Lead.program) == normalized_program,
                status_in(Lead.lead_status, statuses),
            )
        )
        return result.scalar() or 0
