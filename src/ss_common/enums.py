"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class DealType(str, Enum):
    GUARANTEE = "guarantee"
    PERCENTAGE = "percentage"
    GUARANTEE_VS_PERCENTAGE = "guarantee_vs_percentage"


class EntitlementSource(str, Enum):
    STRIPE = "stripe"
    MANUAL_COMP = "manual_comp"
    DEV_ACCOUNT = "dev_account"
    TEST_ACCOUNT = "test_account"


class EntitlementStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    # Never written by the webhook reconciler; only reachable via manual SQL
    EXPIRED = "expired"


class SubscriptionStatus(str, Enum):
    """Mirrors Stripe's subscription state machine."""
    ACTIVE = "active"
    CANCELED = "canceled"
    PAST_DUE = "past_due"
    TRIALING = "trialing"
    INCOMPLETE = "incomplete"
    INCOMPLETE_EXPIRED = "incomplete_expired"
    UNPAID = "unpaid"


# Stripe statuses that grant access
ACCESS_GRANTING_SUBSCRIPTION_STATUSES = frozenset(
    {SubscriptionStatus.ACTIVE.value, SubscriptionStatus.TRIALING.value}
)
