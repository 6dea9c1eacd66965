"""Core data models: verification tokens and captured cookies."""

from collections.abc import Iterator, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VerificationToken(BaseModel):
    """Single-use hashed token bound to one email and one verification type."""

    model_config = ConfigDict(frozen=True)

    email: str
    hashed_token: str = Field(min_length=1)
    verification_type: str = "email"


class CookieOptions(BaseModel):
    """Cookie attributes as handed over by the session layer.

    Values are not validated: whatever the session layer passes is carried
    through untouched, unknown attributes included (``extra="allow"``).
    Field names accept both snake_case and the camelCase used by cookie
    libraries.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    max_age: Any = Field(default=None, alias="maxAge")
    path: Any = None
    same_site: Any = Field(default=None, alias="sameSite")
    domain: Any = None
    secure: Any = None
    http_only: Any = Field(default=None, alias="httpOnly")

    def to_dict(self) -> dict[str, Any]:
        """camelCase dict of the attributes that are set."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CapturedCookie(BaseModel):
    """One cookie write intercepted during the verification handshake."""

    model_config = ConfigDict(frozen=True)

    name: str
    value: str
    options: CookieOptions = Field(default_factory=CookieOptions)


class CookieJar(Mapping[str, CapturedCookie]):
    """Ordered name -> CapturedCookie mapping.

    A later write for a name replaces the cookie but keeps its original
    position. After ``freeze()`` every write raises RuntimeError.
    """

    def __init__(self, cookies: Mapping[str, CapturedCookie] | None = None) -> None:
        self._cookies: dict[str, CapturedCookie] = dict(cookies or {})
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def set(self, cookie: CapturedCookie) -> None:
        if self._frozen:
            msg = f"CookieJar is frozen, cannot write '{cookie.name}'"
            raise RuntimeError(msg)
        self._cookies[cookie.name] = cookie

    def freeze(self) -> "CookieJar":
        self._frozen = True
        return self

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Snapshot as ``{name: {"value": ..., "options": {...}}}``."""
        return {
            name: {"value": c.value, "options": c.options.to_dict()}
            for name, c in self._cookies.items()
        }

    def __getitem__(self, name: str) -> CapturedCookie:
        return self._cookies[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._cookies)

    def __len__(self) -> int:
        return len(self._cookies)

    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"CookieJar({list(self._cookies)}, {state})"
