"""
Unit tests for the parent registration router.

These tests cover:
- Malformed ids rejected at the edge (422) before any database work
- Upload reading: storage is checked first and the body read is bounded
"""

from unittest.mock import AsyncMock, MagicMock, patch
from uuid import uuid4

import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient
from pydantic import ValidationError

from brightnest.core.database import get_db
from brightnest.modules.parent_registration import router as registration_router
from brightnest.modules.parent_registration.helpers import MAX_UPLOAD_BYTES
from brightnest.modules.parent_registration.schemas import (
    AvailabilityResponse,
    CreateWaitlistEntryRequest,
    WaitlistPaymentSessionRequest,
)
from brightnest.modules.parent_registration.service import FileTooLargeError

ROUTER = "brightnest.modules.parent_registration.router"
SERVICE = "brightnest.modules.parent_registration.service"


@pytest.fixture
def client(mock_db):
    app = FastAPI()
    app.include_router(registration_router.router, prefix="/parent-registration")

    async def _get_db():
        yield mock_db

    app.dependency_overrides[get_db] = _get_db
    return TestClient(app)


def _upload(size: int | None, content_type: str = "application/pdf") -> MagicMock:
    file = MagicMock()
    file.filename = "records.pdf"
    file.content_type = content_type
    file.size = size
    file.read = AsyncMock(return_value=b"x" * min(size or 0, MAX_UPLOAD_BYTES + 1))
    return file


class TestIdValidation:
    """Ids must be UUIDs; anything else never reaches the database."""

    def test_malformed_school_id_in_availability_path(self, client, mock_db):
        with patch(f"{SERVICE}.check_availability", AsyncMock()) as mock_check:
            response = client.get(
                "/parent-registration/schools/abc/availability",
                params={"program": "Toddler"},
            )

        assert response.status_code == 422
        mock_check.assert_not_awaited()
        mock_db.execute.assert_not_awaited()

    def test_valid_school_id_is_passed_as_string(self, client, mock_db):
        school_id = uuid4()
        availability = AvailabilityResponse(
            program_capacity=50,
            enrolled_count=20,
            waitlist_count=3,
            available_seats=30,
            has_availability=True,
        )

        with patch(
            f"{SERVICE}.check_availability", AsyncMock(return_value=availability)
        ) as mock_check:
            response = client.get(
                f"/parent-registration/schools/{school_id}/availability",
                params={"program": "Toddler"},
            )

        assert response.status_code == 200
        assert response.json()["available_seats"] == 30
        mock_check.assert_awaited_once_with(mock_db, str(school_id), "Toddler")

    def test_malformed_lead_id_in_waitlist_body(self, client):
        with (
            patch(f"{ROUTER}.enforce_public_rate_limit", AsyncMock()),
            patch(f"{SERVICE}.create_waitlist_entry", AsyncMock()) as mock_create,
        ):
            response = client.post(
                "/parent-registration/waitlist",
                json={"lead_id": "abc", "school_id": str(uuid4()), "program": "Toddler"},
            )

        assert response.status_code == 422
        mock_create.assert_not_awaited()

    def test_malformed_ids_in_public_upload_form(self, client):
        with (
            patch(f"{ROUTER}.enforce_public_rate_limit", AsyncMock()),
            patch(f"{SERVICE}.upload_public_document", AsyncMock()) as mock_upload,
        ):
            response = client.post(
                "/parent-registration/documents/public",
                data={"lead_id": str(uuid4()), "school_id": "abc", "document_type": "photo"},
                files={"file": ("kid.png", b"\x89PNG", "image/png")},
            )

        assert response.status_code == 422
        mock_upload.assert_not_awaited()

    def test_request_schemas_parse_uuids(self):
        lead_id = uuid4()
        request = CreateWaitlistEntryRequest(
            lead_id=str(lead_id), school_id=str(uuid4()), program=" Toddler "
        )

        assert request.lead_id == lead_id
        assert request.program == "Toddler"

        with pytest.raises(ValidationError):
            WaitlistPaymentSessionRequest(lead_id="lead-1", school_id=str(uuid4()), amount=25)


class TestReadUpload:
    """Tests for bounded reading of uploaded files."""

    @pytest.mark.asyncio
    async def test_reported_oversize_is_rejected_unread(self):
        file = _upload(size=1024 * 1024 * 1024)

        with pytest.raises(FileTooLargeError):
            await registration_router._read_upload(file, max_bytes=MAX_UPLOAD_BYTES)

        file.read.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_size_reads_at_most_one_byte_over(self):
        file = _upload(size=None)
        file.read = AsyncMock(return_value=b"x" * (MAX_UPLOAD_BYTES + 1))

        upload = await registration_router._read_upload(file, max_bytes=MAX_UPLOAD_BYTES)

        file.read.assert_awaited_once_with(MAX_UPLOAD_BYTES + 1)
        assert upload.size == MAX_UPLOAD_BYTES + 1

    @pytest.mark.asyncio
    async def test_file_at_limit_is_read(self):
        file = _upload(size=MAX_UPLOAD_BYTES)

        upload = await registration_router._read_upload(file, max_bytes=MAX_UPLOAD_BYTES)

        assert upload.size == MAX_UPLOAD_BYTES
        assert upload.content_type == "application/pdf"

    @pytest.mark.asyncio
    async def test_without_limit_reads_everything(self):
        file = _upload(size=20 * 1024 * 1024)

        await registration_router._read_upload(file)

        file.read.assert_awaited_once_with()

    @pytest.mark.asyncio
    async def test_missing_file(self):
        assert await registration_router._read_upload(None) is None


class TestPublicUploadRoute:
    @pytest.mark.asyncio
    async def test_storage_checked_before_body_is_read(self, mock_db, unconfigured_storage):
        file = _upload(size=2048)

        with (
            patch(f"{ROUTER}.enforce_public_rate_limit", AsyncMock()),
            patch(f"{SERVICE}.get_storage", return_value=unconfigured_storage),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await registration_router.upload_public_document(
                    request=MagicMock(),
                    lead_id=uuid4(),
                    school_id=uuid4(),
                    document_type="photo",
                    file=file,
                    db=mock_db,
                )

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail["error"] == "STORAGE_NOT_CONFIGURED"
        file.read.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_oversized_upload_is_400_without_read(self, mock_db, mock_storage):
        file = _upload(size=1024 * 1024 * 1024)

        with (
            patch(f"{ROUTER}.enforce_public_rate_limit", AsyncMock()),
            patch(f"{SERVICE}.get_storage", return_value=mock_storage),
        ):
            with pytest.raises(HTTPException) as exc_info:
                await registration_router.upload_public_document(
                    request=MagicMock(),
                    lead_id=uuid4(),
                    school_id=uuid4(),
                    document_type="photo",
                    file=file,
                    db=mock_db,
                )

        assert exc_info.value.status_code == 400
        assert exc_info.value.detail["error"] == "FILE_TOO_LARGE"
        file.read.assert_not_awaited()
        mock_storage.put_object.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_ids_are_passed_as_strings(self, mock_db, mock_storage):
        lead_id, school_id = uuid4(), uuid4()
        file = _upload(size=2048)

        with (
            patch(f"{ROUTER}.enforce_public_rate_limit", AsyncMock()),
            patch(f"{SERVICE}.get_storage", return_value=mock_storage),
            patch(f"{SERVICE}.upload_public_document", AsyncMock()) as mock_upload,
        ):
            await registration_router.upload_public_document(
                request=MagicMock(),
                lead_id=lead_id,
                school_id=school_id,
                document_type="photo",
                file=file,
                db=mock_db,
            )

        kwargs = mock_upload.call_args.kwargs
        assert kwargs["lead_id"] == str(lead_id)
        assert kwargs["school_id"] == str(school_id)
        assert kwargs["file"].size == 2048
