"""Render a CookieJar as a paste-and-run browser console snippet."""

import json
from typing import Any

from impersonate.core.encoding import percent_encode
from impersonate.core.schemas import CookieJar

INSTRUCTIONS = (
    "// Please execute this JS snippet on the site and refresh the page.\n"
    "// You may need to manually clear the cookies in your browser before "
    "executing this snippet if it did not work."
)

_SNIPPET_HEAD = """\
(() => {
  function writeCookie(cookie) {
    document.cookie = cookie;
  }
"""

_SNIPPET_TAIL = "})()"


def _js_str(value: Any) -> str:
    """Stringify an attribute value the way JS string concatenation does."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def format_cookie(name: str, entry: dict[str, Any]) -> str:
    """Build the ``document.cookie`` assignment string for one jar entry.

    ``entry`` is one value of ``CookieJar.to_dict()``. Only max-age, path and
    samesite are rendered, in that order. Other attributes (domain, secure,
    httponly, ...) are dropped: the snippet runs in a same-origin console
    where they are inapplicable or already right.
    """
    parts = [f"{percent_encode(name)}={percent_encode(entry['value'])}"]
    options = entry.get("options", {})

    # max-age=0 means "expire now", so only a missing value is skipped.
    if options.get("maxAge") is not None:
        parts.append(f"max-age={_js_str(options['maxAge'])}")
    if options.get("path"):
        parts.append(f"path={_js_str(options['path'])}")
    if options.get("sameSite"):
        parts.append(f"samesite={_js_str(options['sameSite'])}")

    return "; ".join(parts)


def render(jar: CookieJar) -> str:
    """Self-invoking JS function with one ``writeCookie`` call per cookie, in jar order."""
    calls = "".join(
        f"\n  writeCookie({json.dumps(format_cookie(name, entry))});"
        for name, entry in jar.to_dict().items()
    )
    if calls:
        calls += "\n"
    return f"{_SNIPPET_HEAD}{calls}{_SNIPPET_TAIL}"


def render_output(jar: CookieJar) -> str:
    """The snippet framed by operator instructions, as printed on stdout."""
    return f"\n{INSTRUCTIONS}\n\n{render(jar)}\n\n{INSTRUCTIONS}"
