"""
Seed Demo School

Creates a demo school for local development and prints a staff access
token scoped to it, so the waitlist endpoints can be exercised right away.

Usage:
    python scripts/seed_demo_school.py
"""

import asyncio
import sys
import uuid
from pathlib import Path

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from brightnest.core.config import settings
from brightnest.core.security import create_access_token
from brightnest.modules.schools.models import School, SchoolStatus


async def seed_demo_school() -> None:
    """Create the demo school if it doesn't exist."""

    name = "BrightNest Demo Academy"
    programs = ["Infant", "Toddler", "Preschool", "Pre-K"]
    capacity = 120

    engine = create_async_engine(settings.database_url, echo=False)
    async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with async_session() as db:
        result = await db.execute(select(School).where(School.name == name))
        school = result.scalar_one_or_none()

        if school:
            print(f"Demo school already exists: {name}")
        else:
            school = School(
                name=name,
                capacity=capacity,
                programs_offered=programs,
                address="100 Main Street",
                phone="555-0100",
                email="office@demo.brightnest.dev",
                status=SchoolStatus.ACTIVE,
            )
            db.add(school)
            await db.commit()
            await db.refresh(school)
            print("Demo school created successfully!")

        print(f"  ID: {school.id}")
        print(f"  Programs: {', '.join(school.programs_offered or [])}")
        print(f"  Capacity: {school.capacity}")

        token = create_access_token(
            str(uuid.uuid4()),
            claims={
                "email": "admin@demo.brightnest.dev",
                "role": "school_admin",
                "school_id": school.id,
                "name": "Demo Admin",
            },
        )
        print(f"  Staff token: {token}")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(seed_demo_school())
