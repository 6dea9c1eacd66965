"""Supabase Auth (GoTrue) endpoints used by the pipeline.

Only two calls are needed: the admin ``generate_link`` endpoint (service
role key) and the public ``verify`` endpoint (anon key).
"""

import logging
import time
from typing import Any

import httpx

from impersonate.core.config import Settings
from impersonate.provider.http import AuthApiError, request_json, supabase_headers

logger = logging.getLogger(__name__)


async def generate_link(
    settings: Settings,
    client: httpx.AsyncClient,
    email: str,
    link_type: str = "magiclink",
) -> dict[str, Any]:
    """Ask GoTrue to generate a sign-in link without sending any email.

    Returns:
        The decoded response; ``properties.hashed_token`` holds the token.

    Raises:
        AuthApiError: If the provider rejects the request.
    """
    key = settings.service_role_key.get_secret_value()
    data = await request_json(
        client,
        "POST",
        f"{settings.auth_url}/admin/generate_link",
        headers=supabase_headers(key),
        json={"type": link_type, "email": email},
        timeout=settings.timeout_s,
    )
    if not isinstance(data, dict):
        msg = "Unexpected generate_link response"
        raise AuthApiError(msg, payload=data)
    return data


async def verify_otp(
    settings: Settings,
    client: httpx.AsyncClient,
    token_hash: str,
    otp_type: str = "email",
) -> dict[str, Any]:
    """Exchange a hashed OTP for a session.

    Raises:
        AuthApiError: If the token is expired, used, malformed or of the
            wrong type, or the request fails.
    """
    key = settings.anon_key.get_secret_value()
    data = await request_json(
        client,
        "POST",
        f"{settings.auth_url}/verify",
        headers=supabase_headers(key),
        json={"type": otp_type, "token_hash": token_hash},
        timeout=settings.timeout_s,
    )
    if not isinstance(data, dict):
        msg = "Unexpected verify response"
        raise AuthApiError(msg, payload=data)
    return data


def session_from_response(data: dict[str, Any], now: float | None = None) -> dict[str, Any] | None:
    """Extract the session from a verify response.

    GoTrue returns the session fields at top level. ``expires_at`` is filled
    in from ``expires_in`` when the server omits it. Returns None when the
    response carries no access token.

    Raises:
        AuthApiError: If ``expires_in`` is not a number.
    """
    if not data.get("access_token"):
        return None
    session = dict(data)
    if not session.get("expires_at") and session.get("expires_in") is not None:
        try:
            expires_in = int(session["expires_in"])
        except (TypeError, ValueError) as e:
            msg = "Malformed verify response: expires_in is not a number"
            raise AuthApiError(msg, payload=data) from e
        issued = time.time() if now is None else now
        session["expires_at"] = round(issued) + expires_in
    return session
