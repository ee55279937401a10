"""
MangaBot Backend - Bearer Token Tests
======================================

What:  Unit tests for token issuing/verification and the get_current_user guard.
"""

import base64
import json

import pytest
from fastapi.security import HTTPAuthorizationCredentials

from mangabot.exceptions import AuthenticationError
from mangabot.security import create_access_token, decode_access_token, get_current_user


def _credentials(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


def _segment(data: dict) -> str:
    return base64.urlsafe_b64encode(json.dumps(data).encode()).rstrip(b"=").decode()


class TestDecodeAccessToken:

    def test_valid_token_round_trips_claims(self):
        token = create_access_token({"sub": "ana@example.com", "scope": "api"})

        payload = decode_access_token(token)

        assert payload["sub"] == "ana@example.com"
        assert payload["scope"] == "api"
        assert isinstance(payload["exp"], int)

    def test_expired_token_is_rejected(self):
        token = create_access_token({"sub": "ana@example.com"}, expires_delta=-10)

        assert decode_access_token(token) is None

    def test_tampered_payload_is_rejected(self):
        header, _, signature = create_access_token({"sub": "ana@example.com"}).split(".")
        forged = _segment({"sub": "admin@example.com", "exp": 9999999999})

        assert decode_access_token(f"{header}.{forged}.{signature}") is None

    def test_unsigned_algorithm_is_rejected(self):
        _, payload, signature = create_access_token({"sub": "ana@example.com"}).split(".")
        header = _segment({"alg": "none", "typ": "JWT"})

        assert decode_access_token(f"{header}.{payload}.{signature}") is None

    @pytest.mark.parametrize("token", ["", "abc", "a.b", "a.b.c.d", "!!.@@.##"])
    def test_malformed_tokens_are_rejected(self, token):
        assert decode_access_token(token) is None


class TestGetCurrentUser:

    @pytest.mark.asyncio
    async def test_returns_subject(self):
        token = create_access_token({"sub": "ana@example.com"})

        assert await get_current_user(_credentials(token)) == "ana@example.com"

    @pytest.mark.asyncio
    async def test_missing_credentials(self):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user(None)

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_token(self):
        with pytest.raises(AuthenticationError, match="Token inválido o expirado"):
            await get_current_user(_credentials("not-a-token"))

    @pytest.mark.asyncio
    async def test_token_without_subject(self):
        token = create_access_token({"scope": "api"})

        with pytest.raises(AuthenticationError, match="no identifica"):
            await get_current_user(_credentials(token))
