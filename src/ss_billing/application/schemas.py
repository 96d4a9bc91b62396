"""Pydantic request/response schemas for billing."""

from pydantic import BaseModel

from src.ss_billing.domain.models import SubscriptionMirror


class RedirectUrlResponse(BaseModel):
    url: str


class SubscriptionResponse(BaseModel):
    status: str
    stripe_price_id: str | None
    current_period_start: str | None
    current_period_end: str | None
    cancel_at_period_end: bool

    @classmethod
    def from_domain(cls, mirror: SubscriptionMirror) -> "SubscriptionResponse":
        return cls(
            status=mirror.status,
            stripe_price_id=mirror.stripe_price_id,
            current_period_start=(
                mirror.current_period_start.isoformat() if mirror.current_period_start else None
            ),
            current_period_end=(
                mirror.current_period_end.isoformat() if mirror.current_period_end else None
            ),
            cancel_at_period_end=mirror.cancel_at_period_end,
        )
