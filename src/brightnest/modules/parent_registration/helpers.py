"""
Parent Registration Helpers

Pure rules used by the registration service: status sets behind the
availability counts, the per-program capacity split, upload validation
limits, object key layout and document categories.
"""

import math
import time
import uuid

from brightnest.modules.documents.models import DocumentCategory
from brightnest.modules.leads.models import LeadStatus

# Lead statuses that occupy a seat
ENROLLED_LEAD_STATUSES = frozenset(
    {
        LeadStatus.CONVERTED.value,
        LeadStatus.ENROLLED.value,
        LeadStatus.CONFIRMED.value,
        LeadStatus.APPROVED_FOR_REGISTRATION.value,
        LeadStatus.INVOICE_SENT.value,
    }
)

# Waitlist statuses that count as still waiting
WAITLIST_ACTIVE_STATUSES = frozenset(
    {
        LeadStatus.WAITLISTED.value,
        LeadStatus.NEW.value,
    }
)

DEFAULT_SCHOOL_CAPACITY = 100

ALLOWED_MIME_TYPES = frozenset(
    {
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "image/jpeg",
        "image/jpg",
        "image/png",
    }
)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10 MiB

PUBLIC_INTAKE_PREFIX = "public-intake"
PUBLIC_INTAKE_NOTE = "Uploaded via public intake form"

DOCUMENT_CATEGORY_BY_TYPE: dict[str, DocumentCategory] = {
    "enrollment_packet": DocumentCategory.REQUIRED,
    "shot_records": DocumentCategory.REQUIRED,
    "physical_records": DocumentCategory.REQUIRED,
}


def normalize_program(program: str) -> str:
    return program.strip().lower()


def compute_program_capacity(capacity: int | None, programs_offered: list[str] | None) -> int:
    """
    Split a school's seats evenly across its programs.

    A missing or zero capacity counts as 100 seats and a school with no
    programs counts as offering one. The result is never below 1.
    """
    program_count = len(programs_offered or []) or 1
    return max(1, math.floor((capacity or DEFAULT_SCHOOL_CAPACITY) / program_count))


def compute_available_seats(program_capacity: int, enrolled_count: int) -> int:
    return max(program_capacity - enrolled_count, 0)


def file_extension(filename: str) -> str:
    """Text after the last dot, or the whole name when there is none."""
    return filename.rsplit(".", 1)[-1]


def build_object_key(
    lead_id: str,
    document_type: str,
    filename: str,
    public: bool = False,
) -> str:
    """
    Build the storage key for an uploaded document.

    Format: ``[public-intake/]<lead_id>/<document_type>_<epoch_ms>_<uuid4>.<ext>``
    """
    epoch_ms = int(time.time() * 1000)
    key = f"{lead_id}/{document_type}_{epoch_ms}_{uuid.uuid4()}.{file_extension(filename)}"
    if public:
        return f"{PUBLIC_INTAKE_PREFIX}/{key}"
    return key


def document_category_for(document_type: str) -> DocumentCategory:
    return DOCUMENT_CATEGORY_BY_TYPE.get(document_type, DocumentCategory.OPTIONAL)
