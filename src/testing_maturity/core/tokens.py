"""Report token generation.

A report token is the only credential needed to read a report, so it must
be unguessable. The entropy source sits behind ``TokenGenerator`` so the
rest of the service can be tested with deterministic tokens.
"""

import secrets
from typing import Protocol

MIN_TOKEN_BYTES = 16  # 128 bits
# 96 bytes encode to 128 characters, the width of the report_token column
MAX_TOKEN_BYTES = 96


class TokenGenerator(Protocol):
    """Capability producing opaque, URL-safe report tokens."""

    def generate(self) -> str:
        """Return a new token."""
        ...


class SecretsTokenGenerator:
    """Token generator backed by the OS CSPRNG via ``secrets``."""

    def __init__(self, num_bytes: int = 32) -> None:
        """Initialise the generator.

        Args:
            num_bytes: Random bytes per token, 16 (128 bits) to 96.

        Raises:
            ValueError: If num_bytes is outside 16-96.
        """
        if not MIN_TOKEN_BYTES <= num_bytes <= MAX_TOKEN_BYTES:
            raise ValueError(
                f"Report tokens need {MIN_TOKEN_BYTES}-{MAX_TOKEN_BYTES} random bytes, got {num_bytes}"
            )
        self._num_bytes = num_bytes

    def generate(self) -> str:
        return secrets.token_urlsafe(self._num_bytes)
