"""User existence check against the project's ``public.users`` table."""

import logging
from typing import Any

import httpx

from impersonate.core.config import Settings
from impersonate.core.errors import DirectoryLookupError, UserNotFoundError
from impersonate.provider.http import AuthApiError, client_scope, request_json, supabase_headers

logger = logging.getLogger(__name__)

USERS_TABLE = "users"


class UserDirectory:
    """Looks up application users by email through PostgREST."""

    def __init__(self, settings: Settings, client: httpx.AsyncClient | None = None) -> None:
        self._settings = settings
        self._client = client

    async def find_user(self, email: str) -> dict[str, Any]:
        """Return the first user row whose email matches.

        Raises:
            DirectoryLookupError: If the query fails (e.g. no ``users`` table).
            UserNotFoundError: If no row matches.
        """
        key = self._settings.service_role_key.get_secret_value()
        async with client_scope(self._client) as client:
            try:
                rows = await request_json(
                    client,
                    "GET",
                    f"{self._settings.rest_url}/{USERS_TABLE}",
                    headers=supabase_headers(key),
                    params={"select": "*", "email": f"eq.{email}"},
                    timeout=self._settings.timeout_s,
                )
            except AuthApiError as e:
                msg = (
                    "Error checking user existence. If you do not have a `users` table "
                    "under the public schema with an `email` column, use --skip-check "
                    "to bypass this check"
                )
                raise DirectoryLookupError(msg, payload=e.payload or str(e)) from e

        if not isinstance(rows, list) or not rows:
            msg = (
                f"User with email {email} does not exist. Use --skip-check to bypass "
                "this check and let a new account be created with the given email"
            )
            raise UserNotFoundError(msg)

        logger.debug("Found %d user row(s) for %s", len(rows), email)
        return rows[0]  # type: ignore[no-any-return]
