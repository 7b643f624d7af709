"""Admin access gate.

Routes depend on the ``CredentialVerifier`` capability rather than on
string comparison, so the scheme can be replaced without touching the
assessment core.
"""

import hmac
from typing import Protocol


class UnauthorizedError(Exception):
    """Raised when supplied admin credentials do not match."""


class CredentialVerifier(Protocol):
    """Checks a username/password pair."""

    def verify(self, username: str, password: str) -> bool:
        """Return True only for an exact match."""
        ...


class StaticCredentialVerifier:
    """Compares credentials against one configured username/password pair.

    Both fields are always compared in constant time. An empty configured
    username or password rejects everything.
    """

    def __init__(self, username: str, password: str) -> None:
        self._username = username.encode("utf-8")
        self._password = password.encode("utf-8")

    @property
    def enabled(self) -> bool:
        return bool(self._username) and bool(self._password)

    def verify(self, username: str, password: str) -> bool:
        username_ok = hmac.compare_digest(username.encode("utf-8"), self._username)
        password_ok = hmac.compare_digest(password.encode("utf-8"), self._password)
        return self.enabled and username_ok and password_ok


def require_admin(verifier: CredentialVerifier, username: str | None, password: str | None) -> None:
    """Raise UnauthorizedError unless the credentials verify.

    Args:
        verifier: Credential verification capability.
        username: Supplied username, None when absent.
        password: Supplied password, None when absent.

    Raises:
        UnauthorizedError: On any mismatch or missing credential.
    """
    if username is None or password is None:
        raise UnauthorizedError("Unauthorized")
    if not verifier.verify(username, password):
        raise UnauthorizedError("Unauthorized")
