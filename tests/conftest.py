"""Shared fixtures: settings and a mock Supabase HTTP client."""

from collections.abc import Callable

import httpx
import pytest

from impersonate.core.config import Settings

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://abcd.supabase.co",
        anon_key="anon-key",
        service_role_key="service-key",
    )


@pytest.fixture
def make_client() -> Callable[[Handler], httpx.AsyncClient]:
    """Build an AsyncClient whose requests are answered by ``handler``."""

    def _make(handler: Handler) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make
