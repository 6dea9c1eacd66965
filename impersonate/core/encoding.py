"""Percent-encoding compatible with JavaScript's encodeURIComponent."""

from urllib.parse import quote, unquote

# Characters encodeURIComponent leaves alone besides ASCII alphanumerics.
_URI_COMPONENT_SAFE = "-_.!~*'()"


def percent_encode(value: str) -> str:
    """Encode ``value`` the way ``encodeURIComponent`` does (UTF-8, uppercase hex)."""
    return quote(value, safe=_URI_COMPONENT_SAFE)


def percent_decode(value: str) -> str:
    """Strict inverse of percent_encode.

    Raises:
        UnicodeDecodeError: If the escapes do not form valid UTF-8, e.g. a
            multi-byte sequence cut in half.
    """
    return unquote(value, errors="strict")
