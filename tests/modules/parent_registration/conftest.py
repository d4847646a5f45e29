"""
Fixtures for parent registration tests.
"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from brightnest.core.storage import StoredObject
from brightnest.modules.documents.models import StudentDocument
from brightnest.modules.leads.models import Lead, LeadStatus
from brightnest.modules.parent_registration.service import UploadedFile
from brightnest.modules.schools.models import School, SchoolStatus
from brightnest.modules.waitlist.models import WaitlistEntry


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
def school_id():
    return str(uuid4())


@pytest.fixture
def lead_id():
    return str(uuid4())


@pytest.fixture
def sample_school(school_id):
    """An active school with capacity 100 split over two programs."""
    school = MagicMock(spec=School)
    school.id = school_id
    school.name = "Sunny Days Academy"
    school.capacity = 100
    school.programs_offered = ["Infant", "Toddler"]
    school.address = "12 Oak Lane"
    school.phone = "555-0101"
    school.email = "office@sunnydays.test"
    school.status = SchoolStatus.ACTIVE
    return school


@pytest.fixture
def sample_lead(lead_id, school_id):
    lead = MagicMock(spec=Lead)
    lead.id = lead_id
    lead.school_id = school_id
    lead.program = "Toddler"
    lead.lead_status = LeadStatus.NEW.value
    lead.parent_name = "Maria Lopez"
    lead.parent_email = "maria@example.com"
    lead.child_name = "Sofia Lopez"
    lead.notes = None
    return lead


@pytest.fixture
def make_waitlist_entry(lead_id, school_id):
    """Factory for waitlist entries on the Toddler list."""

    def _make(position: int = 1, entry_lead_id: str | None = None) -> MagicMock:
        entry = MagicMock(spec=WaitlistEntry)
        entry.id = str(uuid4())
        entry.lead_id = entry_lead_id or lead_id
        entry.school_id = school_id
        entry.program = "Toddler"
        entry.position = position
        entry.priority_score = 0
        entry.status = LeadStatus.WAITLISTED.value
        entry.created_at = datetime.now(UTC)
        return entry

    return _make


@pytest.fixture
def sample_document():
    document = MagicMock(spec=StudentDocument)
    document.id = str(uuid4())
    return document


@pytest.fixture
def mock_storage():
    """Configured storage whose put_object echoes the key back."""

    async def _put_object(key: str, body: bytes, content_type: str) -> StoredObject:
        return StoredObject(key=key, url=f"https://docs-bucket.s3.us-east-1.amazonaws.com/{key}")

    storage = MagicMock()
    storage.is_configured = True
    storage.put_object = AsyncMock(side_effect=_put_object)
    return storage


@pytest.fixture
def unconfigured_storage():
    storage = MagicMock()
    storage.is_configured = False
    storage.put_object = AsyncMock()
    return storage


@pytest.fixture
def pdf_file():
    return UploadedFile(
        filename="immunizations.pdf",
        content_type="application/pdf",
        data=b"%PDF-1.7 test document",
    )


@pytest.fixture
def text_file():
    return UploadedFile(
        filename="notes.txt",
        content_type="text/plain",
        data=b"plain text",
    )
