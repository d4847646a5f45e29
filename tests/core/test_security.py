"""
Unit tests for token helpers and authentication dependencies.
"""

from datetime import timedelta
from unittest.mock import patch
from uuid import uuid4

import pytest
from fastapi import HTTPException

from brightnest.core.auth import (
    AuthUser,
    _is_dev_mode_safe,
    _validate_jwt_token,
    get_current_staff_user,
)
from brightnest.core.security import create_access_token, decode_token


class TestTokens:
    def test_token_carries_claims(self):
        token = create_access_token("user-1", claims={"role": "school_admin", "school_id": "s-1"})
        payload = decode_token(token)

        assert payload["sub"] == "user-1"
        assert payload["type"] == "access"
        assert payload["school_id"] == "s-1"

    def test_expired_token_is_rejected(self):
        token = create_access_token("user-1", expires_delta=timedelta(seconds=-5))
        assert decode_token(token) is None

    def test_garbage_is_rejected(self):
        assert decode_token("not-a-jwt") is None


class TestValidateJwtToken:
    @pytest.mark.asyncio
    async def test_maps_claims_to_user(self):
        user_id = uuid4()
        token = create_access_token(
            str(user_id),
            claims={"email": "staff@school.test", "role": "admissions_staff", "school_id": "s-1"},
        )

        user = await _validate_jwt_token(token)

        assert user.id == user_id
        assert user.role == "admissions_staff"
        assert user.school_id == "s-1"
        assert user.is_staff

    @pytest.mark.asyncio
    async def test_invalid_token_is_401(self):
        with pytest.raises(HTTPException) as exc_info:
            await _validate_jwt_token("not-a-jwt")
        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_non_access_token_is_401(self):
        token = create_access_token("user-1", claims={"type": "refresh"})
        with pytest.raises(HTTPException) as exc_info:
            await _validate_jwt_token(token)
        assert exc_info.value.detail["error"] == "INVALID_TOKEN_TYPE"


class TestStaffDependency:
    @pytest.mark.asyncio
    async def test_parent_is_forbidden(self):
        parent = AuthUser(id=uuid4(), email="parent@example.com", role="parent")
        with pytest.raises(HTTPException) as exc_info:
            await get_current_staff_user(parent)
        assert exc_info.value.status_code == 403

    @pytest.mark.asyncio
    async def test_staff_passes(self):
        staff = AuthUser(id=uuid4(), email="a@school.test", role="school_owner", school_id="s-1")
        assert await get_current_staff_user(staff) is staff


class TestDevelopmentTokenGate:
    """Test tokens are only honoured with an explicit development environment."""

    def test_unset_python_env_disables_test_tokens(self, monkeypatch):
        monkeypatch.delenv("PYTHON_ENV", raising=False)
        with patch("brightnest.core.auth.settings") as mock_settings:
            mock_settings.is_development = True
            mock_settings.is_production = False

            assert _is_dev_mode_safe() is False

    def test_explicit_development_enables_test_tokens(self, monkeypatch):
        monkeypatch.setenv("PYTHON_ENV", "development")
        with patch("brightnest.core.auth.settings") as mock_settings:
            mock_settings.is_development = True
            mock_settings.is_production = False

            assert _is_dev_mode_safe() is True

    @pytest.mark.parametrize("env", ["production", "staging", "testing"])
    def test_other_environments_disable_test_tokens(self, monkeypatch, env):
        monkeypatch.setenv("PYTHON_ENV", env)
        with patch("brightnest.core.auth.settings") as mock_settings:
            mock_settings.is_development = True
            mock_settings.is_production = False

            assert _is_dev_mode_safe() is False

    @pytest.mark.asyncio
    async def test_dev_token_rejected_when_gate_closed(self):
        with patch("brightnest.core.auth._DEVELOPMENT_MODE", False):
            with pytest.raises(HTTPException) as exc_info:
                await _validate_jwt_token("dev-token")

        assert exc_info.value.status_code == 401
