"""
Parent Registration Router

API endpoints for the parent-facing registration flow. Everything except
the authenticated document upload is public, since families use it before
they have an account.

Endpoints:
- GET /parent-registration/schools - Active school directory
- GET /parent-registration/schools/{id}/availability - Seat availability for a program
- POST /parent-registration/waitlist - Join a program waitlist
- POST /parent-registration/waitlist/payment-session - Start a waitlist fee payment
- POST /parent-registration/documents - Upload a document (authenticated)
- POST /parent-registration/documents/public - Upload a document from the intake form

Security:
- Public write endpoints are rate limited per client IP (Redis, memory fallback)
- Public uploads must name a lead that belongs to the school
- Public uploads are limited to PDF, DOC, DOCX, JPG and PNG up to 10MB
"""

import logging
from uuid import UUID

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    Query,
    Request,
    UploadFile,
    status,
)
from sqlalchemy.ext.asyncio import AsyncSession

from brightnest.core.auth import AuthUser, get_current_user
from brightnest.core.database import get_db
from brightnest.core.rate_limit import enforce_public_rate_limit
from brightnest.modules.parent_registration import service
from brightnest.modules.parent_registration.helpers import MAX_UPLOAD_BYTES
from brightnest.modules.parent_registration.schemas import (
    AvailabilityResponse,
    CreateWaitlistEntryRequest,
    PublicSchoolResponse,
    PublicUploadDocumentResponse,
    UploadDocumentResponse,
    WaitlistEntryCreatedResponse,
    WaitlistPaymentSessionRequest,
    WaitlistPaymentSessionResponse,
)
from brightnest.modules.parent_registration.service import (
    FileTooLargeError,
    RegistrationServiceError,
    UploadedFile,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# (requests, window seconds) per client IP
RATE_LIMIT_WAITLIST = (10, 600)
RATE_LIMIT_PAYMENT_SESSION = (10, 600)
RATE_LIMIT_PUBLIC_UPLOAD = (20, 600)


def _handle_service_error(e: RegistrationServiceError) -> None:
    """Convert service errors to HTTPExceptions."""
    raise HTTPException(
        status_code=e.status_code,
        detail={
            "error": e.error_code,
            "message": e.message,
        },
    )


def _internal_error() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "INTERNAL_ERROR",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


async def _read_upload(
    file: UploadFile | None,
    max_bytes: int | None = None,
) -> UploadedFile | None:
    """
    Read an uploaded file into memory.

    With ``max_bytes`` set, a file whose reported size is over the limit is
    rejected unread, and otherwise at most one byte past the limit is read
    so the size check downstream still sees an oversized file.

    Raises:
        FileTooLargeError: If the reported size is over ``max_bytes``
    """
    if file is None:
        return None

    if max_bytes is None:
        data = await file.read()
    else:
        if file.size is not None and file.size > max_bytes:
            raise FileTooLargeError()
        data = await file.read(max_bytes + 1)

    return UploadedFile(
        filename=file.filename or "upload",
        content_type=file.content_type or "application/octet-stream",
        data=data,
    )


@router.get(
    "/schools",
    response_model=list[PublicSchoolResponse],
    summary="List Schools",
    description="List active schools, ordered by name, with their programs and capacity.",
)
async def list_schools(
    db: AsyncSession = Depends(get_db),
) -> list[PublicSchoolResponse]:
    try:
        return await service.get_public_schools(db)
    except Exception as e:
        logger.exception(f"Unexpected error listing schools: {e}")
        raise _internal_error() from e


@router.get(
    "/schools/{school_id}/availability",
    response_model=AvailabilityResponse,
    summary="Check Program Availability",
    description="""
Check seat availability for a program at a school.

The school's capacity (100 if unset) is split evenly across its programs.
Leads that are converted, enrolled, confirmed, approved for registration or
invoiced count against the seats.
""",
    responses={
        404: {"description": "School not found"},
    },
)
async def check_availability(
    school_id: UUID,
    program: str = Query(..., min_length=1, max_length=100, description="Program name"),
    db: AsyncSession = Depends(get_db),
) -> AvailabilityResponse:
    try:
        return await service.check_availability(db, str(school_id), program)
    except RegistrationServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Unexpected error checking availability: {e}")
        raise _internal_error() from e


@router.post(
    "/waitlist",
    response_model=WaitlistEntryCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Join Waitlist",
    description="""
Add a lead to a program waitlist.

**Idempotent:** submitting again for the same lead returns the existing
entry unchanged.
""",
    responses={
        404: {"description": "Lead or school not found"},
        429: {"description": "Too many submissions from this client"},
    },
)
async def create_waitlist_entry(
    request: Request,
    data: CreateWaitlistEntryRequest,
    db: AsyncSession = Depends(get_db),
) -> WaitlistEntryCreatedResponse:
    await enforce_public_rate_limit(request, "waitlist", *RATE_LIMIT_WAITLIST)

    try:
        entry = await service.create_waitlist_entry(
            db, str(data.lead_id), str(data.school_id), data.program
        )
        return WaitlistEntryCreatedResponse.model_validate(entry)
    except RegistrationServiceError as e:
        logger.warning(f"Waitlist submission rejected: {e.message}")
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Unexpected error creating waitlist entry: {e}")
        raise _internal_error() from e


@router.post(
    "/waitlist/payment-session",
    response_model=WaitlistPaymentSessionResponse,
    summary="Start Waitlist Payment",
    description="""
Record a pending transaction for the waitlist fee.

Returns an empty `url`: the payment form is completed inline by the client.
""",
    responses={
        404: {"description": "Lead not found"},
        429: {"description": "Too many requests from this client"},
    },
)
async def create_waitlist_payment_session(
    request: Request,
    data: WaitlistPaymentSessionRequest,
    db: AsyncSession = Depends(get_db),
) -> WaitlistPaymentSessionResponse:
    await enforce_public_rate_limit(request, "payment_session", *RATE_LIMIT_PAYMENT_SESSION)

    try:
        return await service.create_waitlist_payment_session(
            db,
            lead_id=str(data.lead_id),
            school_id=str(data.school_id),
            amount=data.amount,
            currency=data.currency,
            payment_type=data.payment_type,
            description=data.description,
        )
    except RegistrationServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Unexpected error creating payment session: {e}")
        raise _internal_error() from e


@router.post(
    "/documents",
    response_model=UploadDocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Document",
    description="Upload a document for a lead. Requires a bearer token.",
    responses={
        400: {"description": "Missing file or storage not configured"},
        401: {"description": "Unauthorized - invalid or missing token"},
    },
)
async def upload_document(
    lead_id: UUID = Form(...),
    school_id: UUID = Form(...),
    document_type: str = Form(..., max_length=100),
    file: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
) -> UploadDocumentResponse:
    try:
        service.require_storage()
        upload = await _read_upload(file)

        return await service.upload_document(
            db,
            lead_id=str(lead_id),
            school_id=str(school_id),
            document_type=document_type,
            file=upload,
            uploader_id=str(user.id),
        )
    except RegistrationServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Unexpected error uploading document: {e}")
        raise _internal_error() from e


@router.post(
    "/documents/public",
    response_model=PublicUploadDocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload Intake Document",
    description="""
Upload a document from the public intake form.

**Validation:**
- The lead must exist and belong to `school_id`
- Allowed types: PDF, DOC, DOCX, JPG, PNG
- Maximum size: 10MB
""",
    responses={
        400: {"description": "Missing file, invalid type, too large, or storage not configured"},
        404: {"description": "Lead not found for this school"},
        429: {"description": "Too many uploads from this client"},
    },
)
async def upload_public_document(
    request: Request,
    lead_id: UUID = Form(...),
    school_id: UUID = Form(...),
    document_type: str = Form(..., max_length=100),
    file: UploadFile | None = File(None),
    db: AsyncSession = Depends(get_db),
) -> PublicUploadDocumentResponse:
    await enforce_public_rate_limit(request, "public_upload", *RATE_LIMIT_PUBLIC_UPLOAD)

    try:
        # Storage and size are checked before the body is buffered
        service.require_storage()
        upload = await _read_upload(file, max_bytes=MAX_UPLOAD_BYTES)

        return await service.upload_public_document(
            db,
            lead_id=str(lead_id),
            school_id=str(school_id),
            document_type=document_type,
            file=upload,
        )
    except RegistrationServiceError as e:
        logger.warning(f"Public upload rejected for lead {lead_id}: {e.message}")
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Unexpected error uploading public document: {e}")
        raise _internal_error() from e
