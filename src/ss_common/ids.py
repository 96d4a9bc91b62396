"""Identifier helpers."""

import uuid


def parse_uuid(value: str) -> uuid.UUID | None:
    """Parse a client-supplied id. Malformed ids return None so callers answer 404, not 500."""
    try:
        return uuid.UUID(value)
    except (ValueError, AttributeError, TypeError):
        return None
