"""
Unit tests for the waitlist service layer.

These tests cover:
- School scoping for staff queries
- Listing (page size cap, summaries, pagination)
- Status, position and detail updates
- The parent waitlist view
"""

from unittest.mock import AsyncMock, patch

import pytest
from pydantic import ValidationError

from brightnest.modules.waitlist.schemas import UpdateWaitlistEntryRequest
from brightnest.modules.waitlist.service import (
    MAX_PAGE_SIZE,
    InvalidPositionError,
    InvalidSchoolIdError,
    NoSchoolAssignedError,
    ParentEmailRequiredError,
    SchoolAccessDeniedError,
    WaitlistEntryNotFoundError,
    build_parent_view,
    count_waitlist,
    get_parent_waitlist,
    list_waitlist,
    resolve_school_filters,
    update_entry_details,
    update_entry_position,
    update_entry_status,
)

SERVICE = "brightnest.modules.waitlist.service"

SCHOOL_A = "11111111-1111-1111-1111-111111111111"
SCHOOL_B = "22222222-2222-2222-2222-222222222222"


class TestResolveSchoolFilters:
    """Tests for staff school scoping."""

    def test_super_admin_sees_all_by_default(self, super_admin):
        assert resolve_school_filters(super_admin) is None

    def test_super_admin_can_filter(self, super_admin):
        assert resolve_school_filters(super_admin, school_id=SCHOOL_B) == [SCHOOL_B]
        assert resolve_school_filters(super_admin, school_ids=f"{SCHOOL_A}, {SCHOOL_B}") == [
            SCHOOL_A,
            SCHOOL_B,
        ]

    def test_staff_limited_to_own_school(self, school_admin):
        assert resolve_school_filters(school_admin) == [SCHOOL_A]
        assert resolve_school_filters(school_admin, school_id=SCHOOL_A) == [SCHOOL_A]

    def test_staff_requesting_other_school_is_denied(self, school_admin):
        with pytest.raises(SchoolAccessDeniedError):
            resolve_school_filters(school_admin, school_id=SCHOOL_B)

    def test_staff_school_ids_are_intersected(self, school_admin):
        assert resolve_school_filters(school_admin, school_ids=f"{SCHOOL_B},{SCHOOL_A}") == [
            SCHOOL_A
        ]
        with pytest.raises(SchoolAccessDeniedError):
            resolve_school_filters(school_admin, school_ids=SCHOOL_B)

    def test_staff_without_school(self, school_admin):
        school_admin.school_id = None
        with pytest.raises(NoSchoolAssignedError):
            resolve_school_filters(school_admin)


class TestListWaitlist:
    @pytest.mark.asyncio
    async def test_limit_is_capped(self, mock_db, super_admin):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_waitlist_for_staff = AsyncMock(return_value=([], 0))

            result = await list_waitlist(mock_db, super_admin, limit=5000)

        kwargs = mock_repo.get_waitlist_for_staff.call_args.kwargs
        assert kwargs["limit"] == MAX_PAGE_SIZE
        assert result.pagination.limit == 500
        assert result.pagination.total_pages == 1

    @pytest.mark.asyncio
    async def test_builds_items_summaries_and_pagination(self, mock_db, super_admin, make_entry):
        entries = [
            make_entry(position=1, priority_score=80),
            make_entry(position=2, program="Infant"),
            make_entry(position=1, school_id=SCHOOL_B, school_name="Acorn House"),
        ]

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_waitlist_for_staff = AsyncMock(return_value=(entries, 7))

            result = await list_waitlist(mock_db, super_admin, page=2, limit=3)

        kwargs = mock_repo.get_waitlist_for_staff.call_args.kwargs
        assert kwargs["skip"] == 3
        assert kwargs["school_ids"] is None

        assert len(result.waitlist) == 3
        first = result.waitlist[0]
        assert first.priority == "High"
        assert first.priority_score == 8
        assert first.school == "Sunny Days Academy"
        assert result.waitlist[1].priority_score == 1

        summaries = {summary.id: summary for summary in result.schools}
        assert summaries[SCHOOL_A].total_waitlist == 2
        assert {b.program: b.count for b in summaries[SCHOOL_A].program_breakdown} == {
            "Toddler": 1,
            "Infant": 1,
        }
        assert summaries[SCHOOL_B].name == "Acorn House"

        assert result.stats.total_waitlisted == 7
        assert result.stats.total_schools == 2
        assert result.pagination.total_pages == 3

    @pytest.mark.asyncio
    async def test_staff_query_is_scoped(self, mock_db, school_admin):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_waitlist_for_staff = AsyncMock(return_value=([], 0))

            await list_waitlist(mock_db, school_admin, program="toddler", search="lopez")

        kwargs = mock_repo.get_waitlist_for_staff.call_args.kwargs
        assert kwargs["school_ids"] == [SCHOOL_A]
        assert kwargs["program"] == "toddler"
        assert kwargs["search"] == "lopez"


class TestCountWaitlist:
    @pytest.mark.asyncio
    async def test_count_passes_filters(self, mock_db, school_admin):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.count = AsyncMock(return_value=12)

            result = await count_waitlist(mock_db, school_admin, status="waitlisted")

        assert result == 12
        mock_repo.count.assert_awaited_once_with(
            mock_db, status="waitlisted", school_ids=[SCHOOL_A]
        )


class TestUpdateEntryStatus:
    @pytest.mark.asyncio
    async def test_updates_normalized_status(self, mock_db, school_admin, make_entry):
        entry = make_entry()

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=entry)
            mock_repo.update_status = AsyncMock(return_value=entry)

            await update_entry_status(mock_db, school_admin, entry.id, " Toured ")

        mock_repo.update_status.assert_awaited_once_with(mock_db, entry, "toured")

    @pytest.mark.asyncio
    async def test_missing_entry(self, mock_db, school_admin):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(WaitlistEntryNotFoundError) as exc_info:
                await update_entry_status(mock_db, school_admin, "missing", "toured")

        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_other_school_entry_is_denied(self, mock_db, school_admin, make_entry):
        entry = make_entry(school_id=SCHOOL_B)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=entry)
            mock_repo.update_status = AsyncMock()

            with pytest.raises(SchoolAccessDeniedError):
                await update_entry_status(mock_db, school_admin, entry.id, "declined")

        mock_repo.update_status.assert_not_awaited()


class TestUpdateEntryPosition:
    @pytest.mark.asyncio
    async def test_moves_entry(self, mock_db, school_admin, make_entry):
        entry = make_entry(position=5)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=entry)
            mock_repo.move_to_position = AsyncMock()

            result = await update_entry_position(mock_db, school_admin, entry.id, 2)

        assert result is entry
        mock_repo.move_to_position.assert_awaited_once_with(mock_db, entry, 2)

    @pytest.mark.asyncio
    async def test_same_position_is_noop(self, mock_db, school_admin, make_entry):
        entry = make_entry(position=3)

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=entry)
            mock_repo.move_to_position = AsyncMock()

            result = await update_entry_position(mock_db, school_admin, entry.id, 3)

        assert result is entry
        mock_repo.move_to_position.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_position_below_one_is_rejected(self, mock_db, school_admin):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock()
            mock_repo.move_to_position = AsyncMock()

            with pytest.raises(InvalidPositionError) as exc_info:
                await update_entry_position(mock_db, school_admin, "entry-1", 0)

        assert exc_info.value.status_code == 400
        mock_repo.get_by_id.assert_not_awaited()
        mock_repo.move_to_position.assert_not_awaited()


class TestUpdateEntryDetails:
    @pytest.mark.asyncio
    async def test_priority_stored_times_ten(self, mock_db, super_admin, make_entry):
        entry = make_entry()

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=entry)
            mock_repo.update_details = AsyncMock(return_value=entry)

            await update_entry_details(
                mock_db, super_admin, entry.id, notes="Sibling enrolled", priority_score=7
            )

        mock_repo.update_details.assert_awaited_once_with(
            mock_db, entry, notes="Sibling enrolled", priority_score=70
        )

    @pytest.mark.asyncio
    async def test_notes_only_leaves_priority(self, mock_db, super_admin, make_entry):
        entry = make_entry()

        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_id = AsyncMock(return_value=entry)
            mock_repo.update_details = AsyncMock(return_value=entry)

            await update_entry_details(mock_db, super_admin, entry.id, notes="Called family")

        assert mock_repo.update_details.call_args.kwargs["priority_score"] is None

    def test_ui_priority_out_of_range_is_rejected(self):
        with pytest.raises(ValidationError):
            UpdateWaitlistEntryRequest(priority_score=11)
        with pytest.raises(ValidationError):
            UpdateWaitlistEntryRequest(priority_score=0)


class TestParentView:
    """Tests for the parent-facing waitlist view."""

    def test_hides_enrolled_and_registered_leads(self, make_entry):
        entries = [
            make_entry(lead_status="waitlisted", child_name="Ava"),
            make_entry(lead_status="enrolled", child_name="Ben"),
            make_entry(lead_status="Registered", child_name="Cal"),
        ]

        items = build_parent_view(entries)

        assert [item.child_name for item in items] == ["Ava"]

    def test_display_positions_per_school_program(self, make_entry):
        entries = [
            make_entry(position=4, program="Toddler"),
            make_entry(position=9, program="Infant"),
            make_entry(position=12, program="Toddler"),
            make_entry(position=7, program="Toddler", status="declined"),
        ]

        items = build_parent_view(entries)

        assert [item.position for item in items] == [1, 1, 2, 7]
        assert items[0].estimated_time == "1-2 weeks"
        assert items[3].status == "Declined"
        assert items[3].estimated_time == "1-2 months"

    def test_priority_and_sibling_flag(self, make_entry):
        entries = [
            make_entry(priority_score=100),
            make_entry(priority_score=50),
            make_entry(priority_score=0, child_name=None),
        ]

        items = build_parent_view(entries)

        assert [item.priority for item in items] == ["High", "Sibling", "Standard"]
        assert [item.sibling_enrolled for item in items] == [True, True, False]
        assert items[2].child_name == "Unknown Child"

    @pytest.mark.asyncio
    async def test_get_parent_waitlist_uses_token_email(self, mock_db, parent_user, make_entry):
        with patch(f"{SERVICE}.repository") as mock_repo:
            mock_repo.get_by_parent_email = AsyncMock(return_value=[make_entry()])

            items = await get_parent_waitlist(mock_db, parent_user)

        mock_repo.get_by_parent_email.assert_awaited_once_with(mock_db, "Maria@Example.com")
        assert len(items) == 1
        assert items[0].school == "Sunny Days Academy"

    @pytest.mark.asyncio
    async def test_get_parent_waitlist_requires_email(self, mock_db, parent_user):
        parent_user.email = ""

        with pytest.raises(ParentEmailRequiredError):
            await get_parent_waitlist(mock_db, parent_user)


class TestSchoolIdParsing:
    def test_school_ids_are_normalized(self, super_admin):
        assert resolve_school_filters(super_admin, school_ids=SCHOOL_A.upper()) == [SCHOOL_A]

    def test_malformed_school_ids_are_rejected(self, super_admin, school_admin):
        with pytest.raises(InvalidSchoolIdError) as exc_info:
            resolve_school_filters(super_admin, school_ids=f"{SCHOOL_A},abc")
        assert exc_info.value.status_code == 400

        with pytest.raises(InvalidSchoolIdError):
            resolve_school_filters(school_admin, school_ids="abc")
