"""
Waitlist Service Layer

Staff and parent views over the waitlist.

This module implements:
1. Staff listing with filters, sorting, pagination and per-school summaries
2. Counting entries for dashboards
3. Staff edits: status, position (with renumbering), notes and priority
4. The parent's own waitlist view with display positions and wait estimates

Access rules:
- super_admin may see every school and filter freely
- other staff are limited to the school in their token
"""

import logging
import math
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from brightnest.core.auth import AuthUser
from brightnest.modules.waitlist import repository
from brightnest.modules.waitlist.helpers import (
    PARENT_HIDDEN_LEAD_STATUSES,
    estimate_wait_time,
    from_ui_priority,
    is_terminal_status,
    normalize_status,
    parent_facing_status,
    parent_priority_label,
    staff_priority_label,
    to_ui_priority,
)
from brightnest.modules.waitlist.models import WaitlistEntry
from brightnest.modules.waitlist.schemas import (
    Pagination,
    ParentWaitlistItem,
    ProgramBreakdown,
    WaitlistItem,
    WaitlistListResponse,
    WaitlistSchoolSummary,
    WaitlistStats,
)

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 500
SUPER_ADMIN_ROLE = "super_admin"
SIBLING_PRIORITY_THRESHOLD = 50


class WaitlistServiceError(Exception):
    """Base exception for waitlist service errors."""

    def __init__(self, message: str, error_code: str, status_code: int = 400):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        super().__init__(message)


class WaitlistEntryNotFoundError(WaitlistServiceError):
    def __init__(self, entry_id: str | None = None):
        message = (
            f"Waitlist entry {entry_id} not found" if entry_id else "Waitlist entry not found"
        )
        super().__init__(
            message=message,
            error_code="WAITLIST_ENTRY_NOT_FOUND",
            status_code=404,
        )


class NoSchoolAssignedError(WaitlistServiceError):
    def __init__(self):
        super().__init__(
            message="User does not have a school assigned",
            error_code="NO_SCHOOL_ASSIGNED",
            status_code=401,
        )


class SchoolAccessDeniedError(WaitlistServiceError):
    def __init__(self):
        super().__init__(
            message="You do not have access to the requested school",
            error_code="SCHOOL_ACCESS_DENIED",
            status_code=403,
        )


class ParentEmailRequiredError(WaitlistServiceError):
    def __init__(self):
        super().__init__(
            message="Parent email is required to view waitlist information",
            error_code="PARENT_EMAIL_REQUIRED",
            status_code=400,
        )


class InvalidPositionError(WaitlistServiceError):
    def __init__(self, position: int):
        super().__init__(
            message=f"Position must be 1 or greater, got {position}",
            error_code="INVALID_POSITION",
            status_code=400,
        )


class InvalidSchoolIdError(WaitlistServiceError):
    def __init__(self, school_id: str):
        super().__init__(
            message=f"Invalid school id: {school_id}",
            error_code="INVALID_SCHOOL_ID",
            status_code=400,
        )


def _split_ids(raw: str) -> list[str]:
    ids = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        try:
            ids.append(str(UUID(part)))
        except ValueError as e:
            raise InvalidSchoolIdError(part) from e
    return ids


def resolve_school_filters(
    user: AuthUser,
    school_id: str | None = None,
    school_ids: str | None = None,
) -> list[str] | None:
    """
    Work out which schools a staff query may cover.

    Args:
        user: The authenticated staff user
        school_id: A single requested school
        school_ids: Comma-separated requested schools (wins over school_id)

    Returns:
        School ids to filter by, or None for "all schools" (super_admin only)

    Raises:
        NoSchoolAssignedError: If a non-super-admin has no school
        InvalidSchoolIdError: If school_ids contains a malformed id
        SchoolAccessDeniedError: If none of the requested schools are accessible
    """
    if user.role == SUPER_ADMIN_ROLE:
        if school_ids:
            return _split_ids(school_ids)
        return [school_id] if school_id else None

    if not user.school_id:
        raise NoSchoolAssignedError()

    accessible = {user.school_id}

    if school_ids:
        valid_ids = [sid for sid in _split_ids(school_ids) if sid in accessible]
        if not valid_ids:
            raise SchoolAccessDeniedError()
        return valid_ids

    if school_id:
        if school_id not in accessible:
            raise SchoolAccessDeniedError()
        return [school_id]

    return sorted(accessible)


def _ensure_entry_access(user: AuthUser, entry: WaitlistEntry) -> None:
    if user.role == SUPER_ADMIN_ROLE:
        return
    if entry.school_id != user.school_id:
        raise SchoolAccessDeniedError()


def _entry_to_item(entry: WaitlistEntry) -> WaitlistItem:
    lead = entry.lead
    school = entry.school
    return WaitlistItem(
        id=entry.id,
        lead_id=entry.lead_id,
        child_name=(lead.child_name if lead else None) or "Unknown Child",
        parent_name=(lead.parent_name if lead else None) or "Unknown Parent",
        email=(lead.parent_email if lead else None) or "",
        program=entry.program,
        school=(school.name if school else None) or "Unknown School",
        school_id=entry.school_id,
        position=entry.position,
        status=entry.status,
        priority=staff_priority_label(entry.priority_score or 0),
        priority_score=to_ui_priority(entry.priority_score),
        date_added=entry.created_at,
        last_updated=entry.updated_at,
        notes=entry.notes or (lead.notes if lead else None) or "",
    )


def build_school_summaries(items: list[WaitlistItem]) -> list[WaitlistSchoolSummary]:
    """Group a page of waitlist items by school with per-program counts."""
    summaries: dict[str, WaitlistSchoolSummary] = {}

    for item in items:
        summary = summaries.get(item.school_id)
        if summary is None:
            summary = WaitlistSchoolSummary(
                id=item.school_id,
                name=item.school,
                total_waitlist=0,
                program_breakdown=[],
            )
            summaries[item.school_id] = summary

        summary.total_waitlist += 1

        for breakdown in summary.program_breakdown:
            if breakdown.program == item.program:
                breakdown.count += 1
                break
        else:
            summary.program_breakdown.append(ProgramBreakdown(program=item.program, count=1))

    return list(summaries.values())


async def list_waitlist(
    db: AsyncSession,
    user: AuthUser,
    *,
    school_id: str | None = None,
    school_ids: str | None = None,
    program: str | None = None,
    status: str | None = None,
    search: str | None = None,
    sort_by: str = repository.SORT_BY_POSITION,
    sort_order: str = "asc",
    page: int = 1,
    limit: int = DEFAULT_PAGE_SIZE,
) -> WaitlistListResponse:
    """
    Get a page of the waitlist for staff.

    ``limit`` is capped at 500.

    Returns:
        WaitlistListResponse with items, per-school summaries, stats and pagination
    """
    page = max(page, 1)
    take = min(limit or DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE)
    skip = (page - 1) * take

    schools_filter = resolve_school_filters(user, school_id, school_ids)

    entries, total = await repository.get_waitlist_for_staff(
        db,
        school_ids=schools_filter,
        program=program,
        status=status,
        search=search,
        sort_by=sort_by,
        sort_order=sort_order,
        skip=skip,
        limit=take,
    )

    items = [_entry_to_item(entry) for entry in entries]
    schools = build_school_summaries(items)

    return WaitlistListResponse(
        waitlist=items,
        schools=schools,
        stats=WaitlistStats(total_waitlisted=total, total_schools=len(schools)),
        pagination=Pagination(
            page=page,
            limit=take,
            total=total,
            total_pages=max(1, math.ceil(total / take)),
        ),
    )


async def count_waitlist(
    db: AsyncSession,
    user: AuthUser,
    *,
    status: str | None = None,
    school_id: str | None = None,
) -> int:
    """Count waitlist entries visible to the user."""
    schools_filter = resolve_school_filters(user, school_id)
    return await repository.count(db, status=status, school_ids=schools_filter)


async def _get_entry(db: AsyncSession, entry_id: str) -> WaitlistEntry:
    entry = await repository.get_by_id(db, entry_id)
    if not entry:
        raise WaitlistEntryNotFoundError(entry_id)
    return entry


async def update_entry_status(
    db: AsyncSession,
    user: AuthUser,
    entry_id: str,
    status: str,
) -> WaitlistEntry:
    """
    Set an entry's status.

    Raises:
        WaitlistEntryNotFoundError: If the entry does not exist
        SchoolAccessDeniedError: If the entry belongs to another school
    """
    entry = await _get_entry(db, entry_id)
    _ensure_entry_access(user, entry)

    entry = await repository.update_status(db, entry, normalize_status(status))
    logger.info(f"Waitlist entry {entry_id} status set to {entry.status} by {user.id}")
    return entry


async def update_entry_position(
    db: AsyncSession,
    user: AuthUser,
    entry_id: str,
    position: int,
) -> WaitlistEntry:
    """
    Move an entry within its (school, program) list.

    No-op if the entry is already at ``position``. Positions of the whole
    list are compacted to 1..n afterwards.

    Raises:
        InvalidPositionError: If position is below 1
        WaitlistEntryNotFoundError: If the entry does not exist
    """
    if position < 1:
        raise InvalidPositionError(position)

    entry = await _get_entry(db, entry_id)
    _ensure_entry_access(user, entry)

    if entry.position == position:
        return entry

    old_position = entry.position
    await repository.move_to_position(db, entry, position)
    logger.info(
        f"Waitlist entry {entry_id} moved from position {old_position} to {position} by {user.id}"
    )
    return entry


async def update_entry_details(
    db: AsyncSession,
    user: AuthUser,
    entry_id: str,
    *,
    notes: str | None = None,
    priority_score: int | None = None,
) -> WaitlistEntry:
    """
    Update notes and/or priority.

    ``priority_score`` is on the 1-10 UI scale and stored multiplied by 10.
    """
    entry = await _get_entry(db, entry_id)
    _ensure_entry_access(user, entry)

    stored_priority = from_ui_priority(priority_score) if priority_score is not None else None
    return await repository.update_details(
        db,
        entry,
        notes=notes,
        priority_score=stored_priority,
    )


def build_parent_view(entries: list[WaitlistEntry]) -> list[ParentWaitlistItem]:
    """
    Turn a parent's entries into display items.

    Entries must already be ordered by priority desc, created_at asc.
    Leads that are enrolled or registered are dropped. Live entries get a
    display position counted within their (school, program); terminal
    entries keep their stored position.
    """
    visible = [
        entry
        for entry in entries
        if normalize_status(entry.lead.lead_status if entry.lead else None)
        not in PARENT_HIDDEN_LEAD_STATUSES
    ]

    positions: dict[str, int] = {}
    items: list[ParentWaitlistItem] = []

    for entry in visible:
        key = f"{entry.school_id or 'unknown'}:{entry.program or 'unknown'}"
        position = entry.position or 0
        if not is_terminal_status(entry.status):
            position = positions.get(key, 0) + 1
            positions[key] = position

        priority_score = entry.priority_score or 0
        lead = entry.lead
        items.append(
            ParentWaitlistItem(
                id=entry.id,
                child_name=(lead.child_name if lead else None) or "Unknown Child",
                program=entry.program,
                school_id=entry.school_id,
                school=(entry.school.name if entry.school else None) or "Unknown School",
                position=position,
                status=parent_facing_status(entry.status),
                priority=parent_priority_label(priority_score),
                priority_score=priority_score,
                date_applied=entry.created_at,
                estimated_time=estimate_wait_time(position),
                last_updated=entry.updated_at,
                notes=entry.notes or (lead.notes if lead else None),
                sibling_enrolled=priority_score >= SIBLING_PRIORITY_THRESHOLD,
                tour_scheduled=entry.offer_date,
            )
        )

    return items


async def get_parent_waitlist(db: AsyncSession, user: AuthUser) -> list[ParentWaitlistItem]:
    """
    Get the waitlist entries for the caller's own children.

    Raises:
        ParentEmailRequiredError: If the token carries no email
    """
    if not user.email:
        raise ParentEmailRequiredError()

    entries = await repository.get_by_parent_email(db, user.email)
    return build_parent_view(entries)
