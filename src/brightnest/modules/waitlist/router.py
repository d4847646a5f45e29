"""
Waitlist Router

API endpoints for school staff to manage waitlists, plus the parent's own
waitlist view.

Endpoints:
- GET /waitlist - List waitlist entries with filters and pagination
- GET /waitlist/count - Count waitlist entries
- GET /waitlist/parent - Waitlist entries for the caller's children
- PATCH /waitlist/{id}/status - Change an entry's status
- PATCH /waitlist/{id}/position - Move an entry within its list
- PATCH /waitlist/{id} - Update notes and/or priority

Security:
- Staff endpoints require a JWT with a school staff role
- Non-super-admin staff only see their own school
- The parent view is keyed on the email claim of the token
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from brightnest.core.auth import AuthUser, get_current_staff_user, get_current_user
from brightnest.core.database import get_db
from brightnest.modules.waitlist import service
from brightnest.modules.waitlist.repository import SORT_BY_POSITION
from brightnest.modules.waitlist.schemas import (
    ParentWaitlistItem,
    UpdateWaitlistEntryRequest,
    UpdateWaitlistPositionRequest,
    UpdateWaitlistStatusRequest,
    WaitlistCountResponse,
    WaitlistEntryResponse,
    WaitlistListResponse,
)
from brightnest.modules.waitlist.service import WaitlistServiceError

logger = logging.getLogger(__name__)

router = APIRouter()


def _handle_service_error(e: WaitlistServiceError) -> None:
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
            "message": "An unexpected error occurred.",
        },
    )


@router.get(
    "",
    response_model=WaitlistListResponse,
    summary="List Waitlist",
    description="""
Get a paginated waitlist with per-school summaries.

**Filters:**
- `school_id` / `school_ids`: Restrict to schools (comma-separated for `school_ids`)
- `program`: Case-insensitive program match
- `status`: Exact entry status
- `search`: Child name, parent name or parent email

**Sorting:**
- `sort_by`: position, priority or date. Default: position
- `sort_order`: asc or desc. Default: asc

**Access:** School staff. Non-super-admin staff only see their own school.
""",
)
async def list_waitlist(
    school_id: UUID | None = Query(None, description="Filter by school"),
    school_ids: str | None = Query(None, description="Comma-separated school ids"),
    program: str | None = Query(None, max_length=100, description="Filter by program"),
    status_filter: str | None = Query(None, alias="status", description="Filter by status"),
    search: str | None = Query(None, min_length=1, max_length=100, description="Search term"),
    sort_by: str = Query(SORT_BY_POSITION, description="Column to sort by"),
    sort_order: str = Query("asc", description="Sort direction (asc/desc)"),
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(
        service.DEFAULT_PAGE_SIZE,
        ge=1,
        description="Page size (capped at 500)",
    ),
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_staff_user),
) -> WaitlistListResponse:
    try:
        result = await service.list_waitlist(
            db,
            user,
            school_id=str(school_id) if school_id else None,
            school_ids=school_ids,
            program=program,
            status=status_filter,
            search=search,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )

        logger.info(
            f"Staff {user.id} listed waitlist: "
            f"total={result.pagination.total}, returned={len(result.waitlist)}"
        )
        return result

    except WaitlistServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error listing waitlist: {e}")
        raise _internal_error() from e


@router.get(
    "/count",
    response_model=WaitlistCountResponse,
    summary="Count Waitlist Entries",
)
async def count_waitlist(
    status_filter: str | None = Query(None, alias="status", description="Filter by status"),
    school_id: UUID | None = Query(None, description="Filter by school"),
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_staff_user),
) -> WaitlistCountResponse:
    try:
        count = await service.count_waitlist(
            db,
            user,
            status=status_filter,
            school_id=str(school_id) if school_id else None,
        )
        return WaitlistCountResponse(count=count)

    except WaitlistServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error counting waitlist: {e}")
        raise _internal_error() from e


@router.get(
    "/parent",
    response_model=list[ParentWaitlistItem],
    summary="Get My Waitlist Entries",
    description="""
Get waitlist entries for the authenticated parent's children.

Entries are matched on the parent email in the token. Children who are
already enrolled or registered are omitted.
""",
)
async def get_parent_waitlist(
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_user),
) -> list[ParentWaitlistItem]:
    try:
        return await service.get_parent_waitlist(db, user)

    except WaitlistServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error getting parent waitlist: {e}")
        raise _internal_error() from e


@router.patch(
    "/{entry_id}/status",
    response_model=WaitlistEntryResponse,
    summary="Update Waitlist Status",
)
async def update_waitlist_status(
    entry_id: UUID,
    request: UpdateWaitlistStatusRequest,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_staff_user),
) -> WaitlistEntryResponse:
    try:
        entry = await service.update_entry_status(db, user, str(entry_id), request.status)
        return WaitlistEntryResponse.model_validate(entry)

    except WaitlistServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error updating waitlist status: {e}")
        raise _internal_error() from e


@router.patch(
    "/{entry_id}/position",
    response_model=WaitlistEntryResponse,
    summary="Move Waitlist Entry",
    description="""
Move an entry to a new position within its (school, program) list.

Entries in between shift by one and the list is renumbered 1..n.
""",
)
async def update_waitlist_position(
    entry_id: UUID,
    request: UpdateWaitlistPositionRequest,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_staff_user),
) -> WaitlistEntryResponse:
    try:
        entry = await service.update_entry_position(db, user, str(entry_id), request.position)
        return WaitlistEntryResponse.model_validate(entry)

    except WaitlistServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error moving waitlist entry: {e}")
        raise _internal_error() from e


@router.patch(
    "/{entry_id}",
    response_model=WaitlistEntryResponse,
    summary="Update Waitlist Entry",
    description="Update notes and/or priority. `priority_score` is on a 1-10 scale.",
)
async def update_waitlist_entry(
    entry_id: UUID,
    request: UpdateWaitlistEntryRequest,
    db: AsyncSession = Depends(get_db),
    user: AuthUser = Depends(get_current_staff_user),
) -> WaitlistEntryResponse:
    try:
        entry = await service.update_entry_details(
            db,
            user,
            str(entry_id),
            notes=request.notes,
            priority_score=request.priority_score,
        )
        return WaitlistEntryResponse.model_validate(entry)

    except WaitlistServiceError as e:
        _handle_service_error(e)
    except Exception as e:
        logger.exception(f"Error updating waitlist entry: {e}")
        raise _internal_error() from e
