"""Domain models for ss_entitlement — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class Entitlement:
    id: str
    user_id: str
    source: str                      # EntitlementSource value
    status: str                      # EntitlementStatus value
    granted_by: str | None
    granted_at: datetime | None
    expires_at: datetime | None      # None = perpetual
    metadata: dict[str, Any] = field(default_factory=dict)
    created_at: datetime | None = None
    updated_at: datetime | None = None
