"""
Parent Registration Service Layer

Business logic behind the public registration flow.

This module implements:
1. School directory: active schools for the public picker
2. Availability: per-program seat capacity and occupancy
3. Waitlist submission:
   - Idempotent by lead (an existing entry is returned unchanged)
   - Positions come from an atomic per-(school, program) sequence
   - Confirmation email to the parent (failure never fails the request)
4. Payment session: records a pending transaction for inline capture
5. Document intake: validated upload to object storage plus a document record

Failure model:
- Storage misconfiguration is reported per request, never at startup
- An object stored before a failed document insert is not cleaned up
"""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from brightnest.core.email import send_waitlist_confirmation
from brightnest.core.storage import STORAGE_PROVIDER, get_storage
from brightnest.modules.documents import repository as document_repository
from brightnest.modules.leads.repository import LeadRepository
from brightnest.modules.parent_registration.helpers import (
    ALLOWED_MIME_TYPES,
    ENROLLED_LEAD_STATUSES,
    MAX_UPLOAD_BYTES,
    PUBLIC_INTAKE_NOTE,
    WAITLIST_ACTIVE_STATUSES,
    build_object_key,
    compute_available_seats,
    compute_program_capacity,
    document_category_for,
    normalize_program,
)
from brightnest.modules.parent_registration.schemas import (
    AvailabilityResponse,
    PublicSchoolResponse,
    PublicUploadDocumentResponse,
    UploadDocumentResponse,
    WaitlistPaymentSessionResponse,
)
from brightnest.modules.payments import repository as transaction_repository
from brightnest.modules.schools.repository import SchoolRepository
from brightnest.modules.waitlist import repository as waitlist_repository
from brightnest.modules.waitlist.models import WaitlistEntry

logger = logging.getLogger(__name__)


# ============================================
# Exceptions
# ============================================


class RegistrationServiceError(Exception):
    """Base exception for parent registration errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class SchoolNotFoundError(RegistrationServiceError):
    def __init__(self):
        super().__init__(
            message="School not found",
            error_code="SCHOOL_NOT_FOUND",
            status_code=404,
        )


class LeadNotFoundError(RegistrationServiceError):
    def __init__(self, message: str = "Lead not found"):
        super().__init__(
            message=message,
            error_code="LEAD_NOT_FOUND",
            status_code=404,
        )


class StorageNotConfiguredError(RegistrationServiceError):
    def __init__(self):
        super().__init__(
            message="Document storage is not configured",
            error_code="STORAGE_NOT_CONFIGURED",
            status_code=400,
        )


class FileRequiredError(RegistrationServiceError):
    def __init__(self):
        super().__init__(
            message="File is required",
            error_code="FILE_REQUIRED",
            status_code=400,
        )


class InvalidFileTypeError(RegistrationServiceError):
    def __init__(self):
        super().__init__(
            message="Invalid file type. Only PDF, DOC, DOCX, JPG, and PNG files are allowed.",
            error_code="INVALID_FILE_TYPE",
            status_code=400,
        )


class FileTooLargeError(RegistrationServiceError):
    def __init__(self):
        super().__init__(
            message="File size exceeds 10MB limit",
            error_code="FILE_TOO_LARGE",
            status_code=400,
        )


@dataclass
class UploadedFile:
    """An uploaded file already read into memory."""

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


# ============================================
# School Directory & Availability
# ============================================


async def get_public_schools(db: AsyncSession) -> list[PublicSchoolResponse]:
    """List active schools ordered by name."""
    schools = await SchoolRepository.list_active(db)

    return [
        PublicSchoolResponse(
            id=school.id,
            name=school.name,
            programs_offered=school.programs_offered or [],
            capacity=school.capacity if school.capacity is not None else 0,
            address=school.address,
            phone=school.phone,
            email=school.email,
        )
        for school in schools
    ]


async def check_availability(
    db: AsyncSession,
    school_id: str,
    program: str,
) -> AvailabilityResponse:
    """
    Compute seat availability for one program at a school.

    Capacity is the school's total split evenly across its programs.
    Occupancy counts leads in an enrolled-equivalent status; the waitlist
    count is informational and does not reduce available seats.

    Raises:
        SchoolNotFoundError: If the school does not exist
    """
    school = await SchoolRepository.get_by_id(db, school_id)
    if not school:
        raise SchoolNotFoundError()

    normalized_program = normalize_program(program)
    program_capacity = compute_program_capacity(school.capacity, school.programs_offered)

    enrolled_count = await LeadRepository.count_by_program_and_statuses(
        db, school.id, normalized_program, ENROLLED_LEAD_STATUSES
    )
    waitlist_count = await waitlist_repository.count_by_program_and_statuses(
        db, school.id, normalized_program, WAITLIST_ACTIVE_STATUSES
    )

    available_seats = compute_available_seats(program_capacity, enrolled_count)

    return AvailabilityResponse(
        program_capacity=program_capacity,
        enrolled_count=enrolled_count,
        waitlist_count=waitlist_count,
        available_seats=available_seats,
        has_availability=available_seats > 0,
    )


# ============================================
# Waitlist Submission
# ============================================


async def create_waitlist_entry(
    db: AsyncSession,
    lead_id: str,
    school_id: str,
    program: str,
) -> WaitlistEntry:
    """
    Put a lead on a school's waitlist for a program.

    Idempotent by lead: if the lead already has an entry it is returned
    unchanged and no position is allocated. A concurrent submission for the
    same lead that loses the unique-constraint race also gets the winner's
    entry back.

    Raises:
        LeadNotFoundError: If the lead does not exist
        SchoolNotFoundError: If the school does not exist
    """
    existing = await waitlist_repository.get_by_lead_id(db, lead_id)
    if existing:
        logger.info(f"Waitlist entry already exists for lead {lead_id}: {existing.id}")
        return existing

    lead = await LeadRepository.get_by_id(db, lead_id)
    if not lead:
        raise LeadNotFoundError()

    school = await SchoolRepository.get_by_id(db, school_id)
    if not school:
        raise SchoolNotFoundError()

    try:
        position = await waitlist_repository.allocate_position(db, school_id, program)
        entry = await waitlist_repository.create(
            db,
            lead_id=lead_id,
            school_id=school_id,
            program=program,
            position=position,
        )
    except IntegrityError:
        await db.rollback()
        existing = await waitlist_repository.get_by_lead_id(db, lead_id)
        if existing:
            logger.info(f"Concurrent waitlist submission for lead {lead_id}; returning {existing.id}")
            return existing
        raise

    logger.info(
        f"Lead {lead_id} added to {program} waitlist at school {school_id} "
        f"in position {entry.position}"
    )

    # Send confirmation email (non-blocking - log error but don't fail the request)
    if lead.parent_email:
        try:
            email_sent = await send_waitlist_confirmation(
                to_email=lead.parent_email,
                parent_name=lead.parent_name,
                child_name=lead.child_name,
                school_name=school.name,
                program=program,
                position=entry.position,
            )
            if not email_sent:
                logger.error(f"Failed to send waitlist confirmation for entry {entry.id}")
        except Exception as e:
            logger.error(f"Exception sending waitlist confirmation for entry {entry.id}: {e}")

    return entry


# ============================================
# Payment Session
# ============================================


async def create_waitlist_payment_session(
    db: AsyncSession,
    *,
    lead_id: str,
    school_id: str,
    amount: Decimal,
    currency: str,
    payment_type: str | None = None,
    description: str | None = None,
) -> WaitlistPaymentSessionResponse:
    """
    Record a pending waitlist fee transaction.

    The payment form is rendered inline by the frontend, so no redirect URL
    is produced; the transaction is completed by the capture flow.

    Raises:
        LeadNotFoundError: If the lead does not exist
    """
    lead = await LeadRepository.get_by_id(db, lead_id)
    if not lead:
        raise LeadNotFoundError()

    await transaction_repository.create_pending(
        db,
        school_id=school_id,
        amount=amount,
        currency=currency,
        payment_type=payment_type,
        description=description,
        metadata={"lead_id": lead_id, "school_id": school_id},
    )

    return WaitlistPaymentSessionResponse(url="")


# ============================================
# Document Intake
# ============================================


def require_storage():
    """
    Return the document storage, or fail before any upload work is done.

    Raises:
        StorageNotConfiguredError: If storage is not configured
    """
    storage = get_storage()
    if not storage.is_configured:
        logger.warning("Document upload rejected: storage is not configured")
        raise StorageNotConfiguredError()
    return storage


async def upload_document(
    db: AsyncSession,
    *,
    lead_id: str,
    school_id: str,
    document_type: str,
    file: UploadedFile | None,
    uploader_id: str | None = None,
) -> UploadDocumentResponse:
    """
    Store a document for a lead on behalf of an authenticated user.

    Ownership, type and size are not checked here; the caller is trusted.
    The uploader defaults to the lead id.

    Raises:
        StorageNotConfiguredError: If storage is not configured
        FileRequiredError: If no file was sent
    """
    storage = require_storage()

    if file is None:
        raise FileRequiredError()

    object_key = build_object_key(lead_id, document_type, file.filename)
    stored = await storage.put_object(object_key, file.data, file.content_type)

    document = await document_repository.create(
        db,
        student_id=lead_id,
        school_id=school_id,
        document_type=document_type,
        category=document_category_for(document_type),
        file_name=file.filename,
        file_path=stored.key,
        file_url=stored.url,
        storage_provider=STORAGE_PROVIDER,
        file_size=file.size,
        mime_type=file.content_type,
        uploaded_by=uploader_id or lead_id,
        upload_date=datetime.now(UTC),
    )

    return UploadDocumentResponse(
        success=True,
        document_id=document.id,
        file_url=stored.url,
    )


async def upload_public_document(
    db: AsyncSession,
    *,
    lead_id: str,
    school_id: str,
    document_type: str,
    file: UploadedFile | None,
) -> PublicUploadDocumentResponse:
    """
    Store a document sent from the public intake form.

    Every check runs before anything is written to storage:
    the lead must belong to the school, the MIME type must be allowed and
    the file must be at most 10 MiB.

    Raises:
        StorageNotConfiguredError: If storage is not configured
        FileRequiredError: If no file was sent
        LeadNotFoundError: If the lead is absent or belongs to another school
        InvalidFileTypeError: If the MIME type is not allowed
        FileTooLargeError: If the file is over the size limit
    """
    storage = require_storage()

    if file is None:
        raise FileRequiredError()

    lead = await LeadRepository.get_for_school(db, lead_id, school_id)
    if not lead:
        raise LeadNotFoundError("Lead not found or does not belong to the specified school")

    if file.content_type not in ALLOWED_MIME_TYPES:
        logger.warning(f"Public upload rejected for lead {lead_id}: type {file.content_type}")
        raise InvalidFileTypeError()

    if file.size > MAX_UPLOAD_BYTES:
        logger.warning(f"Public upload rejected for lead {lead_id}: {file.size} bytes")
        raise FileTooLargeError()

    object_key = build_object_key(lead_id, document_type, file.filename, public=True)
    stored = await storage.put_object(object_key, file.data, file.content_type)

    document = await document_repository.create(
        db,
        student_id=lead_id,
        school_id=school_id,
        document_type=document_type,
        category=document_category_for(document_type),
        file_name=file.filename,
        file_path=stored.key,
        file_url=stored.url,
        storage_provider=STORAGE_PROVIDER,
        file_size=file.size,
        mime_type=file.content_type,
        uploaded_by=lead_id,
        upload_date=datetime.now(UTC),
        notes=PUBLIC_INTAKE_NOTE,
    )

    logger.info(
        f"Public document uploaded: {document.id} for lead {lead_id} at school {school_id}"
    )

    return PublicUploadDocumentResponse(
        success=True,
        document_id=document.id,
        file_url=stored.url,
        document_type=document_type,
    )
