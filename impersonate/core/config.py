"""Configuration model and environment loader for the impersonation tool."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator

from impersonate.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Each setting maps to the variables it may be read from, in priority order.
# The NEXT_PUBLIC_ fallbacks let the tool reuse a Next.js app's .env as-is.
ENV_VARS: dict[str, tuple[str, ...]] = {
    "supabase_url": ("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL"),
    "anon_key": ("SUPABASE_ANON_KEY", "NEXT_PUBLIC_SUPABASE_ANON_KEY"),
    "service_role_key": ("SUPABASE_SERVICE_ROLE_KEY",),
}


class Settings(BaseModel):
    """Process-wide settings, built once at the program boundary."""

    supabase_url: str
    anon_key: SecretStr
    service_role_key: SecretStr
    timeout_s: float = Field(default=30.0, gt=0)

    @field_validator("supabase_url")
    @classmethod
    def url_is_http(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            msg = f"supabase_url must be an http(s) URL, got {v!r}"
            raise ValueError(msg)
        return v

    @field_validator("anon_key", "service_role_key")
    @classmethod
    def key_not_empty(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value().strip():
            msg = "API key must not be empty"
            raise ValueError(msg)
        return v

    @property
    def auth_url(self) -> str:
        return f"{self.supabase_url}/auth/v1"

    @property
    def rest_url(self) -> str:
        return f"{self.supabase_url}/rest/v1"

    @property
    def project_ref(self) -> str:
        """First label of the project hostname (``abcd`` in ``abcd.supabase.co``)."""
        hostname = urlparse(self.supabase_url).hostname or ""
        return hostname.split(".")[0]

    @property
    def storage_key(self) -> str:
        """Cookie name the server session is stored under."""
        return f"sb-{self.project_ref}-auth-token"

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        env_file: str | Path | None = ".env",
    ) -> "Settings":
        """Load settings from environment variables.

        When ``env`` is None the process environment is used, after loading
        ``env_file`` into it (existing variables win). Raises
        ConfigurationError naming every missing variable.
        """
        if env is None:
            if env_file is not None and Path(env_file).is_file():
                load_dotenv(env_file, override=False)
                logger.debug("Loaded environment from %s", env_file)
            env = os.environ

        values: dict[str, str] = {}
        missing: list[str] = []
        for field, names in ENV_VARS.items():
            value = next((env[n] for n in names if env.get(n)), None)
            if value is None:
                missing.append(names[0])
            else:
                values[field] = value

        if missing:
            msg = (
                f"Missing required environment variables: {', '.join(missing)}. "
                "Set SUPABASE_URL, SUPABASE_ANON_KEY and SUPABASE_SERVICE_ROLE_KEY "
                "in the environment or in `.env`"
            )
            raise ConfigurationError(msg)

        try:
            return cls.model_validate(values)
        except ValidationError as e:
            msg = "Invalid configuration"
            raise ConfigurationError(msg, payload=e) from e
