"""Share token minting and shape checks."""

import re
import secrets

TOKEN_BYTES = 32
TOKEN_LENGTH = TOKEN_BYTES * 2  # hex-encoded

_TOKEN_RE = re.compile(rf"[0-9a-f]{{{TOKEN_LENGTH}}}")


def mint_token() -> str:
    """32 bytes from the OS CSPRNG, hex-encoded (64 chars)."""
    return secrets.token_hex(TOKEN_BYTES)


def is_well_formed(token: str) -> bool:
    return bool(_TOKEN_RE.fullmatch(token))
