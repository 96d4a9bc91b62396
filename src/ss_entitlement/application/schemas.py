"""Pydantic schemas for the entitlement API."""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, field_validator

from src.ss_common.enums import EntitlementSource
from src.ss_entitlement.domain.models import Entitlement


class EntitlementItem(BaseModel):
    source: str
    status: str
    granted_at: str | None
    expires_at: str | None    # None = lifetime access
    metadata: dict[str, Any]

    @classmethod
    def from_domain(cls, e: Entitlement) -> "EntitlementItem":
        return cls(
            source=e.source,
            status=e.status,
            granted_at=e.granted_at.isoformat() if e.granted_at else None,
            expires_at=e.expires_at.isoformat() if e.expires_at else None,
            metadata=e.metadata,
        )


class EntitlementDetailsResponse(BaseModel):
    has_access: bool
    entitlement: EntitlementItem | None


class ManualGrantRequest(BaseModel):
    """Admin-issued access. Stripe grants only come from the webhook."""

    user_id: uuid.UUID
    source: EntitlementSource = EntitlementSource.MANUAL_COMP
    expires_at: datetime | None = None
    reason: str | None = Field(None, max_length=500)

    @field_validator("source")
    @classmethod
    def _not_stripe(cls, v: EntitlementSource) -> EntitlementSource:
        if v == EntitlementSource.STRIPE:
            raise ValueError("stripe entitlements are written by the webhook only")
        return v
