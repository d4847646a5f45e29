"""
Unit tests for waitlist emails.
"""

from unittest.mock import AsyncMock, patch

import pytest

from brightnest.core.email import send_waitlist_confirmation


class TestWaitlistConfirmation:
    @pytest.mark.asyncio
    async def test_subject_is_plain_text_and_body_is_escaped(self):
        with patch("brightnest.core.email.send_email", AsyncMock(return_value=True)) as mock_send:
            result = await send_waitlist_confirmation(
                to_email="parent@example.com",
                parent_name="Maria",
                child_name="<Ava>",
                school_name="Tom & Jerry's",
                program="Toddler",
                position=3,
            )

        assert result is True
        kwargs = mock_send.call_args.kwargs
        assert kwargs["subject"] == "You're on the waitlist at Tom & Jerry's"
        assert "Tom &amp; Jerry&#x27;s" in kwargs["html_content"]
        assert "&lt;Ava&gt;" in kwargs["html_content"]
        assert "#3" in kwargs["html_content"]

    @pytest.mark.asyncio
    async def test_missing_names_use_defaults(self):
        with patch("brightnest.core.email.send_email", AsyncMock(return_value=True)) as mock_send:
            await send_waitlist_confirmation(
                to_email="parent@example.com",
                parent_name=None,
                child_name=None,
                school_name="Acorn House",
                program="Infant",
                position=1,
            )

        html = mock_send.call_args.kwargs["html_content"]
        assert "Hi there," in html
        assert "your child has been added" in html
