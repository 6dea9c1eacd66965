"""Server-side session establishment for a verification token."""

import json
import logging
from abc import ABC, abstractmethod

import httpx

from impersonate.core.config import Settings
from impersonate.core.schemas import CookieOptions, VerificationToken
from impersonate.provider.auth import session_from_response, verify_otp
from impersonate.session.port import CookiePort
from impersonate.session.storage import CookieSessionStorage

logger = logging.getLogger(__name__)


class SessionVerifier(ABC):
    """Runs a provider's token verification, persisting the session through a port."""

    @abstractmethod
    async def verify(self, token: VerificationToken, port: CookiePort) -> None:
        """Verify ``token`` once, writing the resulting session cookies to ``port``.

        Raises:
            AuthApiError: If the provider rejects the token.
        """


class SupabaseSessionVerifier(SessionVerifier):
    """Verifies OTP token hashes against Supabase Auth.

    Behaves like a Supabase server client bound to one request: it drops any
    stale session, calls ``/verify`` once, then stores the returned session
    under ``sb-<project-ref>-auth-token``.
    """

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient,
        cookie_options: CookieOptions | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._cookie_options = cookie_options

    async def verify(self, token: VerificationToken, port: CookiePort) -> None:
        storage = CookieSessionStorage(port, self._cookie_options)
        key = self._settings.storage_key

        storage.remove_item(key)

        logger.info("Verifying %s token for %s", token.verification_type, token.email)
        data = await verify_otp(
            self._settings, self._client, token.hashed_token, token.verification_type,
        )

        session = session_from_response(data)
        if session is None:
            logger.warning("Verification succeeded but returned no session")
            return

        storage.set_item(key, json.dumps(session, separators=(",", ":")))
