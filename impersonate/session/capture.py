"""Cookie-capture shim: run the verification handshake against a fake response.

The provider's session layer is driven exactly as it would be inside a web
request, except that the request carries no cookies and the response's
cookie writes are collected into a CookieJar.
"""

import logging

import httpx

from impersonate.core.config import Settings
from impersonate.core.errors import VerificationError
from impersonate.core.schemas import CookieJar, CookieOptions, VerificationToken
from impersonate.provider.http import AuthApiError, client_scope
from impersonate.session.port import CapturingCookiePort
from impersonate.session.verifier import SessionVerifier, SupabaseSessionVerifier

logger = logging.getLogger(__name__)


class CookieCaptureShim:
    """Turns a VerificationToken into the cookies a real sign-in would set."""

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient | None = None,
        *,
        verifier: SessionVerifier | None = None,
        cookie_options: CookieOptions | None = None,
    ) -> None:
        self._settings = settings
        self._client = client
        self._verifier = verifier
        self._cookie_options = cookie_options

    async def capture_session(self, token: VerificationToken) -> CookieJar:
        """Verify ``token`` once and return the frozen jar of cookies written.

        An empty jar is a valid result.

        Raises:
            VerificationError: If the provider rejects the token. No jar is
                returned in that case.
        """
        port = CapturingCookiePort()
        try:
            if self._verifier is not None:
                await self._verifier.verify(token, port)
            else:
                async with client_scope(self._client) as client:
                    verifier = SupabaseSessionVerifier(
                        self._settings, client, self._cookie_options,
                    )
                    await verifier.verify(token, port)
        except AuthApiError as e:
            msg = "Error getting cookies from magic link hashed token"
            raise VerificationError(msg, payload=e.payload or str(e)) from e
        finally:
            port.freeze()

        jar = port.jar
        logger.info("Captured %d cookie(s)", len(jar))
        return jar
