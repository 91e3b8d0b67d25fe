"""Random short code generation."""

from __future__ import annotations

import secrets

CHARSET = "abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
SHORT_CODE_LENGTH = 6


def generate_short_code() -> str:
    """Return a cryptographically random alphanumeric code."""
    return "".join(secrets.choice(CHARSET) for _ in range(SHORT_CODE_LENGTH))