"""Tests for snippet rendering."""

import json
import re

from impersonate.core.schemas import CapturedCookie, CookieJar, CookieOptions
from impersonate.snippet.emitter import INSTRUCTIONS, format_cookie, render, render_output


def _jar(*cookies: CapturedCookie) -> CookieJar:
    jar = CookieJar()
    for c in cookies:
        jar.set(c)
    return jar.freeze()


def _cookie(name: str, value: str, **options: object) -> CapturedCookie:
    return CapturedCookie(name=name, value=value, options=CookieOptions(**options))


def _format(cookie: CapturedCookie) -> str:
    """format_cookie applied to the cookie's entry in a jar snapshot."""
    return format_cookie(cookie.name, _jar(cookie).to_dict()[cookie.name])


def _written(snippet: str) -> list[str]:
    """Cookie strings passed to writeCookie(...), in order."""
    return [json.loads(m) for m in re.findall(r'writeCookie\(("(?:[^"\\]|\\.)*")\);', snippet)]


# ---------------------------------------------------------------------------
# TestFormatCookie
# ---------------------------------------------------------------------------


class TestFormatCookie:
    def test_all_rendered_attributes_in_order(self) -> None:
        c = _cookie("sb-access-token", "abc123", maxAge=3600, path="/", sameSite="lax")
        assert _format(c) == "sb-access-token=abc123; max-age=3600; path=/; samesite=lax"

    def test_bare_cookie(self) -> None:
        assert _format(_cookie("A", "1")) == "A=1"

    def test_max_age_zero_kept(self) -> None:
        assert _format(_cookie("A", "1", max_age=0)) == "A=1; max-age=0"

    def test_empty_path_and_samesite_skipped(self) -> None:
        assert _format(_cookie("A", "1", path="", same_site="")) == "A=1"

    def test_unrendered_attributes_dropped(self) -> None:
        c = _cookie("A", "1", path="/", domain=".example.com", secure=True,
                    http_only=True, priority="high")
        assert _format(c) == "A=1; path=/"

    def test_name_and_value_percent_encoded(self) -> None:
        c = _cookie("a b", '{"x":"y z";}')
        assert _format(c) == "a%20b=%7B%22x%22%3A%22y%20z%22%3B%7D"

    def test_attribute_values_not_encoded(self) -> None:
        assert _format(_cookie("A", "1", path="/a b")) == "A=1; path=/a b"

    def test_boolean_samesite_stringified_like_js(self) -> None:
        assert _format(_cookie("A", "1", sameSite=True)) == "A=1; samesite=true"

    def test_fractional_max_age_kept(self) -> None:
        assert _format(_cookie("A", "1", maxAge=1.5)) == "A=1; max-age=1.5"

    def test_integral_float_max_age(self) -> None:
        assert _format(_cookie("A", "1", maxAge=3600.0)) == "A=1; max-age=3600"

    def test_plain_entry_dict(self) -> None:
        entry = {"value": "abc123", "options": {"maxAge": 0, "path": "/"}}
        assert format_cookie("sb-access-token", entry) == "sb-access-token=abc123; max-age=0; path=/"


# ---------------------------------------------------------------------------
# TestRender
# ---------------------------------------------------------------------------


class TestRender:
    def test_single_cookie_assignment(self) -> None:
        jar = _jar(_cookie("sb-access-token", "abc123", maxAge=3600, path="/", sameSite="lax"))
        snippet = render(jar)
        assert 'writeCookie("sb-access-token=abc123; max-age=3600; path=/; samesite=lax");' in snippet

    def test_is_self_invoking(self) -> None:
        snippet = render(_jar(_cookie("A", "1")))
        assert snippet.startswith("(() => {")
        assert snippet.endswith("})()")
        assert "document.cookie = cookie;" in snippet

    def test_pure(self) -> None:
        jar = _jar(_cookie("A", "1", path="/"), _cookie("B", "2", max_age=0))
        assert render(jar) == render(jar)

    def test_empty_jar_writes_nothing(self) -> None:
        snippet = render(CookieJar())
        assert _written(snippet) == []
        assert "writeCookie(" in snippet  # definition only
        assert snippet.count("writeCookie(") == 1
        assert snippet.startswith("(() => {")
        assert snippet.endswith("})()")

    def test_one_write_per_cookie_in_order(self) -> None:
        jar = _jar(_cookie("A", "1"), _cookie("B", "2", path="/app"), _cookie("C", "3"))
        assert _written(render(jar)) == ["A=1", "B=2; path=/app", "C=3"]

    def test_quotes_escaped_in_literal(self) -> None:
        jar = _jar(_cookie("A", "1", path='/"x"'))
        snippet = render(jar)
        assert _written(snippet) == ['A=1; path=/"x"']
        assert 'path=/\\"x\\"' in snippet

    def test_session_json_roundtrips_through_literal(self) -> None:
        value = json.dumps({"access_token": "at", "user": {"email": "user@example.com"}})
        snippet = render(_jar(_cookie("sb-abcd-auth-token", value, path="/")))
        (written,) = _written(snippet)
        encoded = written.split("; ")[0].split("=", 1)[1]
        assert "%22access_token%22" in encoded
        assert "@" not in encoded


class TestRenderOutput:
    def test_snippet_framed_by_instructions(self) -> None:
        jar = _jar(_cookie("A", "1"))
        output = render_output(jar)
        assert output.count(INSTRUCTIONS) == 2
        assert output.index(INSTRUCTIONS) < output.index(render(jar))
        assert output.rindex(INSTRUCTIONS) > output.index(render(jar))
