"""Error taxonomy for the impersonation pipeline.

Every error is terminal for the invocation. Core code raises these; only
main.py turns them into an exit status.
"""

from typing import Any


class ImpersonationError(Exception):
    """Base class for all pipeline errors.

    ``payload`` keeps the underlying provider error (parsed JSON body or
    exception) so the operator can diagnose it.
    """

    def __init__(self, message: str, payload: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.payload = payload

    def __str__(self) -> str:
        if self.payload is None:
            return self.message
        return f"{self.message}: {self.payload}"


class ConfigurationError(ImpersonationError):
    """Required settings are missing or invalid."""


class DirectoryLookupError(ImpersonationError):
    """The user directory query itself failed."""


class UserNotFoundError(DirectoryLookupError):
    """No user row matches the email."""


class IssuerError(ImpersonationError):
    """The provider refused to generate a verification token."""


class VerificationError(ImpersonationError):
    """The provider rejected the verification handshake."""
