"""
School Repository

Read-only database operations for the school directory.
"""

import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from brightnest.modules.schools.models import School, SchoolStatus

logger = logging.getLogger(__name__)


class SchoolRepository:
    """Repository for school database operations."""

    @staticmethod
    async def get_by_id(db: AsyncSession, school_id: str | UUID) -> School | None:
        """
        Get a school by ID.

        Args:
            db: Database session
            school_id: School UUID

        Returns:
            School instance or None if not found
        """
        result = await db.execute(select(School).where(School.id == str(school_id)))
        return result.scalar_one_or_none()

    @staticmethod
    async def list_active(db: AsyncSession) -> list[School]:
        """
        List active schools ordered by name.

        Args:
            db: Database session

        Returns:
            Active School instances
        """
        result = await db.execute(
            select(School).where(School.status == SchoolStatus.ACTIVE).order_by(School.name.asc())
        )
        return list(result.scalars().all())
