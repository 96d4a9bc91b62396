"""Domain models for ss_billing — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass
class SubscriptionMirror:
    """Local cache of the Stripe subscription. Not an access gate."""

    id: str
    user_id: str
    stripe_customer_id: str | None
    stripe_subscription_id: str | None
    stripe_price_id: str | None
    status: str                              # SubscriptionStatus value
    current_period_start: datetime | None
    current_period_end: datetime | None
    cancel_at_period_end: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class SubscriptionSnapshot:
    """The fields we read off a Stripe subscription object."""

    subscription_id: str
    customer_id: str
    price_id: str | None
    status: str
    current_period_start: datetime | None
    current_period_end: datetime | None
    cancel_at_period_end: bool


class WebhookOutcome(str, Enum):
    APPLIED = "applied"      # state changed
    SKIPPED = "skipped"      # idempotency or precondition check said no-op
    IGNORED = "ignored"      # event type we do not handle, or unusable payload
    FAILED = "failed"        # write or Stripe call failed; logged
