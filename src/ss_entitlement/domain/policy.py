"""Access policy: a pure function of (status, expires_at, now)."""

from datetime import datetime

from src.ss_common.enums import EntitlementStatus
from src.ss_entitlement.domain.models import Entitlement


def is_entitlement_active(status: str, expires_at: datetime | None, now: datetime) -> bool:
    """Access iff status is active AND (no expiry OR expiry strictly in the future).

    A row with status "active" whose expires_at has passed grants nothing;
    the stored "expired" status is treated like any other non-active status.
    """
    if status != EntitlementStatus.ACTIVE.value:
        return False
    return expires_at is None or expires_at > now


def grants_access(entitlement: Entitlement | None, now: datetime) -> bool:
    if entitlement is None:
        return False
    return is_entitlement_active(entitlement.status, entitlement.expires_at, now)
