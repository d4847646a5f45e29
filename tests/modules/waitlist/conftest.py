"""
Fixtures for waitlist tests.
"""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from brightnest.core.auth import AuthUser
from brightnest.modules.leads.models import Lead, LeadStatus
from brightnest.modules.schools.models import School
from brightnest.modules.waitlist.models import WaitlistEntry

SCHOOL_A = "11111111-1111-1111-1111-111111111111"
SCHOOL_B = "22222222-2222-2222-2222-222222222222"


@pytest.fixture
def mock_db():
    """Create a mock database session."""
    db = AsyncMock()
    db.commit = AsyncMock()
    db.refresh = AsyncMock()
    db.rollback = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    db.add = MagicMock()
    return db


@pytest.fixture
def super_admin():
    return AuthUser(
        id=uuid4(),
        email="root@brightnest.test",
        role="super_admin",
    )


@pytest.fixture
def school_admin():
    return AuthUser(
        id=uuid4(),
        email="director@sunnydays.test",
        role="school_admin",
        school_id=SCHOOL_A,
    )


@pytest.fixture
def parent_user():
    return AuthUser(
        id=uuid4(),
        email="Maria@Example.com",
        role="parent",
    )


@pytest.fixture
def make_entry():
    """Factory for fully populated waitlist entries."""
    base_time = datetime(2026, 9, 1, 9, 0, tzinfo=UTC)
    counter = {"n": 0}

    def _make(
        *,
        school_id: str = SCHOOL_A,
        school_name: str = "Sunny Days Academy",
        program: str = "Toddler",
        position: int = 1,
        priority_score: int = 0,
        status: str = LeadStatus.WAITLISTED.value,
        lead_status: str = LeadStatus.WAITLISTED.value,
        child_name: str | None = "Sofia Lopez",
        notes: str | None = None,
    ) -> MagicMock:
        counter["n"] += 1

        lead = MagicMock(spec=Lead)
        lead.id = str(uuid4())
        lead.lead_status = lead_status
        lead.child_name = child_name
        lead.parent_name = "Maria Lopez"
        lead.parent_email = "maria@example.com"
        lead.notes = None

        school = MagicMock(spec=School)
        school.id = school_id
        school.name = school_name

        entry = MagicMock(spec=WaitlistEntry)
        entry.id = str(uuid4())
        entry.lead_id = lead.id
        entry.lead = lead
        entry.school_id = school_id
        entry.school = school
        entry.program = program
        entry.position = position
        entry.priority_score = priority_score
        entry.status = status
        entry.notes = notes
        entry.offer_date = None
        entry.created_at = base_time + timedelta(hours=counter["n"])
        entry.updated_at = entry.created_at
        return entry

    return _make
