"""
Waitlist Repository

Database operations for waitlist entries and their position sequences.

Design Principles:
- Position allocation is a single atomic statement (no count-then-insert)
- Reordering runs inside one transaction and leaves positions compacted
- Program and status filters used by availability are case-insensitive
"""

from collections.abc import Iterable

from sqlalchemy import asc, desc, func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from brightnest.modules.leads.models import Lead, LeadStatus
from brightnest.modules.shared.filters import status_in
from brightnest.modules.waitlist.models import WaitlistEntry, WaitlistSequence

SORT_BY_POSITION = "position"
SORT_BY_PRIORITY = "priority"
SORT_BY_DATE = "date"


async def get_by_id(db: AsyncSession, id: str) -> WaitlistEntry | None:
    """Get waitlist entry by ID."""
    return await db.get(WaitlistEntry, id)


async def get_by_lead_id(db: AsyncSession, lead_id: str) -> WaitlistEntry | None:
    """Get the waitlist entry created for a lead, if any."""
    result = await db.execute(select(WaitlistEntry).where(WaitlistEntry.lead_id == lead_id))
    return result.scalar_one_or_none()


async def allocate_position(db: AsyncSession, school_id: str, program: str) -> int:
    """
    Atomically take the next position for a (school, program) waitlist.

    The first allocation for a pair seeds the sequence from the highest
    existing position, so entries created before the sequence existed are
    never shadowed. Later allocations increment the row in place.

    Not committed: the caller commits together with the entry insert so a
    failed insert does not consume a position.
    """
    seed = (
        select(func.coalesce(func.max(WaitlistEntry.position), 0) + 1)
        .where(
            WaitlistEntry.school_id == school_id,
            WaitlistEntry.program == program,
        )
        .scalar_subquery()
    )

    stmt = (
        pg_insert(WaitlistSequence)
        .values(school_id=school_id, program=program, last_position=seed)
        .on_conflict_do_update(
            index_elements=[WaitlistSequence.school_id, WaitlistSequence.program],
            set_={"last_position": WaitlistSequence.last_position + 1},
        )
        .returning(WaitlistSequence.last_position)
    )

    result = await db.execute(stmt)
    return result.scalar_one()


async def create(
    db: AsyncSession,
    *,
    lead_id: str,
    school_id: str,
    program: str,
    position: int,
) -> WaitlistEntry:
    """Create a new waitlist entry with default priority and WAITLISTED status."""
    entry = WaitlistEntry(
        lead_id=lead_id,
        school_id=school_id,
        program=program,
        position=position,
        priority_score=0,
        status=LeadStatus.WAITLISTED.value,
    )

    db.add(entry)
    await db.commit()
    await db.refresh(entry)

    return entry


async def count_by_program_and_statuses(
    db: AsyncSession,
    school_id: str,
    normalized_program: str,
    statuses: Iterable[str],
) -> int:
    """Count entries for a (school, program) whose lowercased status is in ``statuses``."""
    result = await db.execute(
        select(func.count())
        .select_from(WaitlistEntry)
        .where(
            WaitlistEntry.school_id == school_id,
            func.lower(WaitlistEntry.program) == normalized_program,
            status_in(WaitlistEntry.status, statuses),
        )
    )
    return result.scalar() or 0


async def get_waitlist_for_staff(
    db: AsyncSession,
    *,
    school_ids: list[str] | None = None,
    program: str | None = None,
    status: str | None = None,
    search: str | None = None,
    sort_by: str = SORT_BY_POSITION,
    sort_order: str = "asc",
    skip: int = 0,
    limit: int = 100,
) -> tuple[list[WaitlistEntry], int]:
    """
    Get a filtered, sorted page of waitlist entries.

    Args:
        db: Database session
        school_ids: Restrict to these schools (None = all schools)
        program: Case-insensitive substring match on program
        status: Exact status match
        search: Case-insensitive match on child name, parent name or email
        sort_by: "position", "priority" or "date"
        sort_order: "asc" or "desc"
        skip: Offset for pagination
        limit: Page size

    Returns:
        Tuple of (entries on this page, total matching entries)
    """
    query = select(WaitlistEntry).outerjoin(Lead, WaitlistEntry.lead_id == Lead.id)

    if school_ids:
        query = query.where(WaitlistEntry.school_id.in_(school_ids))

    if program:
        query = query.where(WaitlistEntry.program.ilike(f"%{program}%"))

    if status:
        query = query.where(WaitlistEntry.status == status)

    if search:
        search_pattern = f"%{search}%"
        query = query.where(
            or_(
                Lead.child_name.ilike(search_pattern),
                Lead.parent_name.ilike(search_pattern),
                Lead.parent_email.ilike(search_pattern),
            )
        )

    count_query = select(func.count()).select_from(query.subquery())
    total_result = await db.execute(count_query)
    total = total_result.scalar() or 0

    direction = desc if sort_order.lower() == "desc" else asc
    if sort_by == SORT_BY_PRIORITY:
        query = query.order_by(direction(WaitlistEntry.priority_score), asc(WaitlistEntry.position))
    elif sort_by == SORT_BY_DATE:
        query = query.order_by(direction(WaitlistEntry.created_at))
    else:
        query = query.order_by(direction(WaitlistEntry.position))

    query = query.offset(skip).limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all()), total


async def count(
    db: AsyncSession,
    *,
    status: str | None = None,
    school_ids: list[str] | None = None,
) -> int:
    """Count entries, optionally by status and school."""
    query = select(func.count()).select_from(WaitlistEntry)
    if status:
        query = query.where(WaitlistEntry.status == status)
    if school_ids:
        query = query.where(WaitlistEntry.school_id.in_(school_ids))

    result = await db.execute(query)
    return result.scalar() or 0


async def get_by_parent_email(db: AsyncSession, email: str) -> list[WaitlistEntry]:
    """
    Get entries whose lead's parent email matches (case-insensitive).

    Ordered by priority (highest first), then oldest first.
    """
    result = await db.execute(
        select(WaitlistEntry)
        .join(Lead, WaitlistEntry.lead_id == Lead.id)
        .where(func.lower(Lead.parent_email) == email.lower())
        .order_by(desc(WaitlistEntry.priority_score), asc(WaitlistEntry.created_at))
    )
    return list(result.scalars().all())


async def update_status(db: AsyncSession, entry: WaitlistEntry, status: str) -> WaitlistEntry:
    entry.status = status
    await db.commit()
    await db.refresh(entry)
    return entry


async def update_details(
    db: AsyncSession,
    entry: WaitlistEntry,
    *,
    notes: str | None = None,
    priority_score: int | None = None,
) -> WaitlistEntry:
    """Update notes and/or the stored (0-100) priority score."""
    if notes is not None:
        entry.notes = notes
    if priority_score is not None:
        entry.priority_score = priority_score

    await db.commit()
    await db.refresh(entry)
    return entry


async def move_to_position(db: AsyncSession, entry: WaitlistEntry, new_position: int) -> None:
    """
    Move an entry to ``new_position`` within its (school, program) list.

    Entries between the old and new positions shift by one, then the whole
    list is renumbered 1..n (by position, then created_at) so no gaps or
    duplicates remain. Everything is committed as one transaction.
    """
    old_position = entry.position
    same_list = (
        WaitlistEntry.school_id == entry.school_id,
        WaitlistEntry.program == entry.program,
    )

    try:
        if new_position < old_position:
            # Moving up: push the entries in between down
            await db.execute(
                update(WaitlistEntry)
                .where(
                    *same_list,
                    WaitlistEntry.position >= new_position,
                    WaitlistEntry.position < old_position,
                )
                .values(position=WaitlistEntry.position + 1)
                .execution_options(synchronize_session=False)
            )
        else:
            # Moving down: pull the entries in between up
            await db.execute(
                update(WaitlistEntry)
                .where(
                    *same_list,
                    WaitlistEntry.position > old_position,
                    WaitlistEntry.position <= new_position,
                )
                .values(position=WaitlistEntry.position - 1)
                .execution_options(synchronize_session=False)
            )

        await db.execute(
            update(WaitlistEntry)
            .where(WaitlistEntry.id == entry.id)
            .values(position=new_position)
            .execution_options(synchronize_session=False)
        )

        result = await db.execute(
            select(WaitlistEntry.id, WaitlistEntry.position)
            .where(*same_list)
            .order_by(asc(WaitlistEntry.position), asc(WaitlistEntry.created_at))
        )
        for index, row in enumerate(result.all(), start=1):
            if row.position != index:
                await db.execute(
                    update(WaitlistEntry)
                    .where(WaitlistEntry.id == row.id)
                    .values(position=index)
                    .execution_options(synchronize_session=False)
                )

        await db.commit()
    except Exception:
        await db.rollback()
        raise

    await db.refresh(entry)
