"""Read Stripe payloads (plain dicts decoded from JSON) into domain values.

Handles both the pre-2025 API shape (period bounds and `invoice.subscription`
at top level) and the newer one (period bounds on subscription items,
invoice subscription under `parent.subscription_details`).
"""

from typing import Any

from src.ss_billing.domain.models import SubscriptionSnapshot
from src.ss_common.datetime_utils import from_unix


def _id_of(ref: Any) -> str | None:
    """Stripe references are either an id string or an expanded object."""
    if ref is None:
        return None
    if isinstance(ref, str):
        return ref
    return ref.get("id")


def _first_item(sub: dict[str, Any]) -> dict[str, Any]:
    items = (sub.get("items") or {}).get("data") or []
    return items[0] if items else {}


def parse_subscription(sub: dict[str, Any]) -> SubscriptionSnapshot:
    item = _first_item(sub)
    period_start = sub.get("current_period_start", item.get("current_period_start"))
    period_end = sub.get("current_period_end", item.get("current_period_end"))
    return SubscriptionSnapshot(
        subscription_id=sub["id"],
        customer_id=_id_of(sub.get("customer")) or "",
        price_id=_id_of(item.get("price")),
        status=sub["status"],
        current_period_start=from_unix(period_start),
        current_period_end=from_unix(period_end),
        cancel_at_period_end=bool(sub.get("cancel_at_period_end", False)),
    )


def checkout_subscription_id(session: dict[str, Any]) -> str | None:
    return _id_of(session.get("subscription"))


def checkout_user_id(session: dict[str, Any]) -> str | None:
    metadata = session.get("metadata") or {}
    return metadata.get("user_id") or session.get("client_reference_id")


def invoice_subscription_id(invoice: dict[str, Any]) -> str | None:
    if invoice.get("subscription"):
        return _id_of(invoice["subscription"])
    details = (invoice.get("parent") or {}).get("subscription_details") or {}
    return _id_of(details.get("subscription"))
