"""Cookie Response Port: the only surface the session layer writes through.

A real server would back this with an HTTP request/response pair. The
capturing adapter models a client with an empty cookie jar and records the
writes instead of sending them.
"""

import logging
from abc import ABC, abstractmethod

from impersonate.core.schemas import CapturedCookie, CookieJar, CookieOptions

logger = logging.getLogger(__name__)


class CookiePort(ABC):
    """Read/write/clear access to the cookies of one request/response cycle."""

    @abstractmethod
    def read(self, name: str) -> str | None:
        """Value of the incoming cookie ``name``, or None if absent."""

    @abstractmethod
    def write(self, name: str, value: str, options: CookieOptions) -> None:
        """Set cookie ``name`` on the outgoing response."""

    @abstractmethod
    def clear(self, name: str, options: CookieOptions) -> None:
        """Delete cookie ``name`` on the outgoing response."""


class CapturingCookiePort(CookiePort):
    """In-memory port over a null request.

    Reads always report absent, even for names written in the same cycle.
    Writes land in ``jar`` (last write wins). Clears are ignored since a
    null request never has cookies to invalidate.
    """

    def __init__(self) -> None:
        self._jar = CookieJar()

    @property
    def jar(self) -> CookieJar:
        return self._jar

    def read(self, name: str) -> str | None:
        return None

    def write(self, name: str, value: str, options: CookieOptions) -> None:
        logger.debug("Captured cookie %s (%d chars)", name, len(value))
        self._jar.set(CapturedCookie(name=name, value=value, options=options))

    def clear(self, name: str, options: CookieOptions) -> None:
        logger.debug("Ignoring clear of cookie %s", name)

    def freeze(self) -> CookieJar:
        return self._jar.freeze()
