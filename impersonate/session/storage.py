"""Cookie-backed session storage with chunking.

Browsers cap a single cookie at roughly 4 KB, so a serialized session is
split over ``<key>.0``, ``<key>.1``, ... when its encoded form is too long.
This mirrors how Supabase's server-side helpers lay the session out, so the
site's own client code can read the cookies back.
"""

import logging

from impersonate.core.encoding import percent_decode, percent_encode
from impersonate.core.schemas import CookieOptions
from impersonate.session.port import CookiePort

logger = logging.getLogger(__name__)

MAX_CHUNK_SIZE = 3180

# 400 days, the longest lifetime browsers accept.
DEFAULT_COOKIE_OPTIONS = CookieOptions(
    path="/",
    same_site="lax",
    http_only=False,
    max_age=400 * 24 * 60 * 60,
)


def create_chunks(key: str, value: str, chunk_size: int = MAX_CHUNK_SIZE) -> list[tuple[str, str]]:
    """Split ``value`` into ``(cookie_name, raw_value)`` pairs.

    Sizes are measured on the percent-encoded form. A chunk boundary never
    splits a percent-escape or a multi-byte UTF-8 sequence.
    """
    encoded = percent_encode(value)
    if len(encoded) <= chunk_size:
        return [(key, value)]

    chunks: list[str] = []
    while encoded:
        head = encoded[:chunk_size]
        last_escape = head.rfind("%")
        if last_escape > chunk_size - 3:
            head = head[:last_escape]

        decoded = ""
        while head:
            try:
                decoded = percent_decode(head)
                break
            except UnicodeDecodeError:
                # Cut inside a multi-byte character: drop whole escapes until it decodes.
                if len(head) > 3 and head[-3] == "%":
                    head = head[:-3]
                else:
                    raise

        chunks.append(decoded)
        encoded = encoded[len(head):]

    return [(f"{key}.{i}", chunk) for i, chunk in enumerate(chunks)]


class CookieSessionStorage:
    """Key/value storage on top of a CookiePort."""

    def __init__(
        self,
        port: CookiePort,
        cookie_options: CookieOptions | None = None,
        chunk_size: int = MAX_CHUNK_SIZE,
    ) -> None:
        self._port = port
        self._options = cookie_options or DEFAULT_COOKIE_OPTIONS
        self._chunk_size = chunk_size

    def set_item(self, key: str, value: str) -> None:
        chunks = create_chunks(key, value, self._chunk_size)
        for name, chunk in chunks:
            self._port.write(name, chunk, self._options)
        logger.debug("Stored %s in %d cookie(s)", key, len(chunks))

    def remove_item(self, key: str) -> None:
        """Clear ``key`` and any of its chunks present on the request."""
        if self._port.read(key):
            self._port.clear(key, self._options)
            return

        i = 0
        while self._port.read(f"{key}.{i}") is not None:
            self._port.clear(f"{key}.{i}", self._options)
            i += 1
