"""Unit tests for reading Stripe payloads."""

from datetime import datetime, timezone

from src.ss_billing.domain.stripe_objects import (
    checkout_subscription_id,
    checkout_user_id,
    invoice_subscription_id,
    parse_subscription,
)


def test_parse_subscription_with_top_level_period() -> None:
    snap = parse_subscription({
        "id": "sub_1",
        "customer": {"id": "cus_1", "object": "customer"},
        "status": "active",
        "current_period_start": 1767225600,
        "current_period_end": 1769904000,
        "items": {"data": [{"price": {"id": "price_1"}}]},
    })
    assert snap.subscription_id == "sub_1"
    assert snap.customer_id == "cus_1"
    assert snap.price_id == "price_1"
    assert snap.current_period_end == datetime(2026, 2, 1, tzinfo=timezone.utc)
    assert snap.cancel_at_period_end is False


def test_parse_subscription_period_from_item() -> None:
    snap = parse_subscription({
        "id": "sub_1",
        "customer": "cus_1",
        "status": "trialing",
        "cancel_at_period_end": True,
        "items": {"data": [{
            "price": {"id": "price_1"},
            "current_period_start": 1767225600,
            "current_period_end": 1769904000,
        }]},
    })
    assert snap.customer_id == "cus_1"
    assert snap.current_period_start == datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert snap.cancel_at_period_end is True


def test_parse_subscription_without_items() -> None:
    snap = parse_subscription({"id": "sub_1", "customer": "cus_1", "status": "incomplete"})
    assert snap.price_id is None
    assert snap.current_period_end is None


def test_checkout_session_fields() -> None:
    session = {"subscription": {"id": "sub_1"}, "metadata": {"user_id": "u1"}}
    assert checkout_subscription_id(session) == "sub_1"
    assert checkout_user_id(session) == "u1"


def test_checkout_user_id_falls_back_to_client_reference() -> None:
    assert checkout_user_id({"metadata": {}, "client_reference_id": "u2"}) == "u2"
    assert checkout_user_id({}) is None


def test_invoice_subscription_id_both_shapes() -> None:
    assert invoice_subscription_id({"subscription": "sub_1"}) == "sub_1"
    assert invoice_subscription_id(
        {"subscription": None, "parent": {"subscription_details": {"subscription": "sub_2"}}}
    ) == "sub_2"
    assert invoice_subscription_id({"parent": None}) is None
