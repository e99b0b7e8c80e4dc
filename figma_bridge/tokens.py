"""Export token issuing.

Tokens look like ``figma_<base36 ms timestamp>_<6 base36 chars>``. They are
not guaranteed unique; a collision overwrites that token's records.
"""

import re
import secrets
import time
from typing import Optional

TOKEN_PREFIX = "figma"
RANDOM_LENGTH = 6

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"

TOKEN_PATTERN = re.compile(r"^[a-z]+_[0-9a-z]+_[0-9a-z]{6}$")


def to_base36(value: int) -> str:
    """Encode a non-negative integer in lowercase base36."""
    if value < 0:
        raise ValueError("base36 encoding requires a non-negative integer")
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_token(prefix: str = TOKEN_PREFIX, now_ms: Optional[int] = None) -> str:
    """Generate a new export token."""
    if now_ms is None:
        now_ms = int(time.time() * 1000)
    random_part = "".join(secrets.choice(_BASE36) for _ in range(RANDOM_LENGTH))
    return f"{prefix}_{to_base36(now_ms)}_{random_part}"


def resolve_token(provided: Optional[str]) -> tuple:
    """Return (token, was_provided), issuing a token when none was supplied."""
    if provided is not None and provided.strip():
        return provided.strip(), True
    return generate_token(), False


def is_valid_token(token: str) -> bool:
    """Check whether a token has the issued-token shape."""
    return bool(TOKEN_PATTERN.match(token))


# Characters allowed in a token used as part of a file name
SAFE_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.:\-]{0,199}$")


def is_safe_token(token: str) -> bool:
    """Check that a token can be embedded in a debug file name."""
    return bool(SAFE_TOKEN_PATTERN.match(token))
