"""Orchestrator: wires directory check, link issuer, capture shim and emitter.

Data flow:
  1. Directory check (optional, caller decides)
  2. Issue token for the email
  3. Capture cookies by verifying the token
  4. Render the snippet
"""

import logging
from typing import Any

import httpx

from impersonate.core.config import Settings
from impersonate.core.schemas import CookieJar, VerificationToken
from impersonate.pipeline.issuer import LinkIssuer
from impersonate.provider.directory import UserDirectory
from impersonate.session.capture import CookieCaptureShim
from impersonate.session.verifier import SessionVerifier
from impersonate.snippet.emitter import render_output

logger = logging.getLogger(__name__)


class ImpersonationResult:
    """Outcome of one successful run."""

    def __init__(self, email: str, token: VerificationToken, jar: CookieJar) -> None:
        self.email = email
        self.token = token
        self.jar = jar

    @property
    def output(self) -> str:
        return render_output(self.jar)


async def check_user(
    settings: Settings,
    email: str,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """Return the user row for ``email``; raises if it does not exist."""
    logger.info("Checking that %s exists", email)
    return await UserDirectory(settings, client).find_user(email)


async def impersonate(
    settings: Settings,
    email: str,
    client: httpx.AsyncClient | None = None,
    *,
    verifier: SessionVerifier | None = None,
) -> ImpersonationResult:
    """Issue a token for ``email`` and capture the session cookies it yields.

    Raises:
        IssuerError: If no token could be generated.
        VerificationError: If the token was rejected.
    """
    token = await LinkIssuer(settings, client).issue_token(email)
    jar = await CookieCaptureShim(settings, client, verifier=verifier).capture_session(token)
    return ImpersonationResult(token.email, token, jar)
