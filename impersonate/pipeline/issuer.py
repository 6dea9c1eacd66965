"""Link issuer: obtain a single-use verification token for an email."""

import logging

import httpx

from impersonate.core.config import Settings
from impersonate.core.errors import IssuerError
from impersonate.core.schemas import VerificationToken
from impersonate.provider.auth import generate_link
from impersonate.provider.http import AuthApiError, client_scope

logger = logging.getLogger(__name__)


class LinkIssuer:
    """Generates magic-link tokens through the admin API. No email is sent."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        self._client = client

    async def issue_token(self, email: str) -> VerificationToken:
        """Return the hashed token of a freshly generated magic link.

        Raises:
            IssuerError: If ``email`` is blank or the provider fails.
        """
        email = email.strip() if isinstance(email, str) else ""
        if not email:
            msg = "email must not be empty"
            raise IssuerError(msg)

        logger.info("Generating magic link for %s", email)
        async with client_scope(self._client) as client:
            try:
                data = await generate_link(self._settings, client, email)
            except AuthApiError as e:
                msg = "Error generating magic link"
                raise IssuerError(msg, payload=e.payload or str(e)) from e

        # GoTrue returns hashed_token at top level; "properties" is the shape
        # supabase-js rebuilds on the client, accepted as a fallback.
        hashed_token = data.get("hashed_token")
        properties = data.get("properties")
        if not hashed_token and isinstance(properties, dict):
            hashed_token = properties.get("hashed_token")
        if not hashed_token or not isinstance(hashed_token, str):
            msg = "Error generating magic link: response has no hashed_token"
            raise IssuerError(msg, payload=data)

        return VerificationToken(email=email, hashed_token=hashed_token)
