"""Shared HTTP plumbing for the Supabase Auth and REST endpoints."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class AuthApiError(Exception):
    """A Supabase endpoint answered with an error, or could not be reached.

    ``status`` is None for transport failures. ``payload`` is the decoded
    JSON body when there is one, the raw text otherwise.
    """

    def __init__(
        self,
        message: str,
        *,
        status: int | None = None,
        code: str | None = None,
        payload: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.payload = payload

    def __str__(self) -> str:
        parts = [self.message]
        if self.status is not None:
            parts.append(f"status={self.status}")
        if self.code:
            parts.append(f"code={self.code}")
        return " ".join(parts)


def supabase_headers(api_key: str) -> dict[str, str]:
    """Headers every Supabase endpoint expects: the key as apikey and as bearer token."""
    return {
        "apikey": api_key,
        "Authorization": f"Bearer {api_key}",
    }


@asynccontextmanager
async def client_scope(client: httpx.AsyncClient | None) -> AsyncIterator[httpx.AsyncClient]:
    """Yield the injected client, or a throwaway one closed on exit."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient() as own:
        yield own


def _error_from_response(resp: httpx.Response) -> AuthApiError:
    try:
        body: Any = resp.json()
    except ValueError:
        body = resp.text

    message = f"HTTP {resp.status_code}"
    code: str | None = None
    if isinstance(body, dict):
        # GoTrue uses msg/error_code (or error/error_description),
        # PostgREST uses message/code.
        message = str(
            body.get("msg")
            or body.get("message")
            or body.get("error_description")
            or body.get("error")
            or message
        )
        raw_code = body.get("error_code") or body.get("code")
        code = str(raw_code) if raw_code is not None else None
    elif body:
        message = str(body)

    return AuthApiError(message, status=resp.status_code, code=code, payload=body)


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    headers: dict[str, str],
    timeout: float,
    json: dict[str, Any] | None = None,
    params: dict[str, str] | None = None,
) -> Any:
    """Send one request and return the decoded JSON body.

    Raises:
        AuthApiError: On transport failure, non-2xx status, or a body that
            is not JSON.
    """
    logger.debug("%s %s", method, url)
    try:
        resp = await client.request(
            method, url, headers=headers, json=json, params=params, timeout=timeout,
        )
    except httpx.HTTPError as e:
        msg = f"Request to {url} failed: {e}"
        raise AuthApiError(msg, payload=e) from e

    if resp.is_error:
        raise _error_from_response(resp)

    try:
        return resp.json()
    except ValueError as e:
        msg = f"Response from {url} is not JSON"
        raise AuthApiError(msg, status=resp.status_code, payload=resp.text) from e
