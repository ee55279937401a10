"""
MangaBot Backend - Bearer Token Authentication
===============================================

What:  Issues and verifies HS256 JSON Web Tokens and exposes the
       `get_current_user` guard used by both resource routers.
How:   Tokens are `header.payload.signature`, each part base64url encoded,
       signed with HMAC-SHA256 over `settings.secret_key`. The payload carries
       `sub` (caller identity) and `exp` (UNIX timestamp).
Who:   main.py attaches `get_current_user` to the manga and préstamo routers;
       route handlers depend on it again to read the caller identity (FastAPI
       caches the result per request). `create_token.py` prints tokens.

The identity is only recorded in the response envelope; there is no
role-based authorization beyond "a valid token was presented".
"""

import base64
import hashlib
import hmac
import json
import time
from typing import Any, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from mangabot.config import settings
from mangabot.exceptions import AuthenticationError

# auto_error=False: a missing header reaches get_current_user, which raises
# AuthenticationError so the 401 uses the regular error envelope
bearer_scheme = HTTPBearer(auto_error=False)


def _b64_url_encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    padding = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def create_access_token(
    claims: Dict[str, Any], expires_delta: Optional[int] = None
) -> str:
    """
    Create a signed token for the given claims.

    Args:
        claims: Claims to embed, e.g. {"sub": "ana@example.com"}
        expires_delta: Lifetime in seconds; defaults to
            settings.access_token_expire_minutes

    Returns:
        The encoded token, to be sent as `Authorization: Bearer <token>`.
    """
    to_encode = dict(claims)
    lifetime = expires_delta if expires_delta is not None else settings.access_token_expire_minutes * 60
    to_encode["exp"] = int(time.time()) + lifetime

    header = {"alg": "HS256", "typ": "JWT"}
    header_b64 = _b64_url_encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
    payload_b64 = _b64_url_encode(json.dumps(to_encode, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_b64}.{payload_b64}".encode("utf-8")
    signature_b64 = _b64_url_encode(_sign(signing_input, settings.secret_key))
    return f"{header_b64}.{payload_b64}.{signature_b64}"


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """
    Verify a token's signature and expiry.

    Returns:
        The payload dict when the token is valid, otherwise None.
    """
    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_b64, payload_b64, signature_b64 = parts

    try:
        header = json.loads(_b64_url_decode(header_b64))
        actual_sig = _b64_url_decode(signature_b64)
        payload = json.loads(_b64_url_decode(payload_b64))
    except (ValueError, UnicodeDecodeError):
        return None

    if not isinstance(header, dict) or header.get("alg") != "HS256":
        return None

    expected_sig = _sign(f"{header_b64}.{payload_b64}".encode("utf-8"), settings.secret_key)
    # Constant-time comparison
    if not hmac.compare_digest(expected_sig, actual_sig):
        return None

    if not isinstance(payload, dict):
        return None
    exp = payload.get("exp")
    if not isinstance(exp, (int, float)) or exp < time.time():
        return None
    return payload


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    FastAPI dependency guarding every /api/v1 resource route.

    Returns:
        The `sub` claim of a valid bearer token.

    Raises:
        AuthenticationError: No credentials, or an invalid/expired token.
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise AuthenticationError(message="Token inválido o expirado")

    subject = payload.get("sub")
    if not subject:
        raise AuthenticationError(message="El token no identifica al usuario")
    return str(subject)
