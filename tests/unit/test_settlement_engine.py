"""Unit tests for the settlement engine (pure functions, no I/O)."""

import pytest

from src.ss_common.enums import DealType
from src.ss_common.errors import SettlementValidationError
from src.ss_settlement.domain.engine import (
    MSG_AMOUNTS_OUT_OF_RANGE,
    MSG_INVALID_GUARANTEE,
    MSG_INVALID_GUARANTEE_AND_PERCENTAGE,
    MSG_INVALID_PERCENTAGE,
    MSG_INVALID_TICKETS,
    artist_payout,
    compute,
    percentage_share,
)
from src.ss_settlement.domain.models import SettlementInput


def _input(**overrides: object) -> SettlementInput:
    fields: dict = {
        "ticket_price": 25.0,
        "tickets_sold": 200,
        "tax_rate": 10.0,
        "total_expenses": 500.0,
        "deal_type": DealType.GUARANTEE,
        "guarantee": 1000.0,
        "percentage": 0.0,
    }
    fields.update(overrides)
    return SettlementInput(**fields)


class TestScenarios:
    def test_flat_guarantee(self) -> None:
        r = compute(_input())
        assert r.gross_revenue == pytest.approx(5000)
        assert r.tax_amount == pytest.approx(500)
        assert r.net_profit == pytest.approx(4000)
        assert r.artist_payout == pytest.approx(1000)
        assert r.venue_payout == pytest.approx(3000)

    def test_percentage_on_a_losing_show_floors_artist_at_zero(self) -> None:
        r = compute(_input(
            tax_rate=0.0, total_expenses=6000.0,
            deal_type=DealType.PERCENTAGE, guarantee=0.0, percentage=50.0,
        ))
        assert r.gross_revenue == pytest.approx(5000)
        assert r.tax_amount == 0
        assert r.net_profit == pytest.approx(-1000)
        assert r.artist_payout == 0
        assert r.venue_payout == pytest.approx(-1000)

    def test_guarantee_vs_percentage_takes_the_larger(self) -> None:
        r = compute(_input(deal_type=DealType.GUARANTEE_VS_PERCENTAGE, percentage=90.0))
        assert r.net_profit == pytest.approx(4000)
        assert r.artist_payout == pytest.approx(3600)
        assert r.venue_payout == pytest.approx(400)

    def test_zero_ticket_price_is_rejected(self) -> None:
        with pytest.raises(SettlementValidationError) as exc_info:
            compute(_input(ticket_price=0.0))
        assert exc_info.value.message == MSG_INVALID_TICKETS
        assert exc_info.value.code == 2001


class TestGuaranteeDeal:
    def test_guarantee_can_exceed_net_and_push_venue_negative(self) -> None:
        r = compute(_input(guarantee=5000.0))
        assert r.artist_payout == 5000
        assert r.venue_payout == pytest.approx(-1000)

    def test_percentage_field_is_ignored(self) -> None:
        assert compute(_input(percentage=99.0)).artist_payout == 1000


class TestGuaranteeVsPercentage:
    def test_guarantee_wins_when_share_is_smaller(self) -> None:
        r = compute(_input(deal_type=DealType.GUARANTEE_VS_PERCENTAGE, percentage=10.0))
        assert r.artist_payout == 1000

    def test_negative_net_pays_the_guarantee(self) -> None:
        r = compute(_input(
            deal_type=DealType.GUARANTEE_VS_PERCENTAGE,
            total_expenses=10000.0, percentage=50.0,
        ))
        assert r.artist_payout == 1000
        assert r.venue_payout == pytest.approx(r.net_profit - 1000)


class TestValidation:
    def test_zero_tickets_sold_rejected(self) -> None:
        with pytest.raises(SettlementValidationError, match="ticket price and tickets sold"):
            compute(_input(tickets_sold=0))

    def test_ticket_rule_is_checked_before_deal_rules(self) -> None:
        with pytest.raises(SettlementValidationError) as exc_info:
            compute(_input(ticket_price=0.0, guarantee=0.0))
        assert exc_info.value.message == MSG_INVALID_TICKETS

    def test_guarantee_deal_requires_guarantee(self) -> None:
        with pytest.raises(SettlementValidationError) as exc_info:
            compute(_input(guarantee=0.0))
        assert exc_info.value.message == MSG_INVALID_GUARANTEE

    def test_percentage_deal_requires_percentage(self) -> None:
        with pytest.raises(SettlementValidationError) as exc_info:
            compute(_input(deal_type=DealType.PERCENTAGE, percentage=0.0))
        assert exc_info.value.message == MSG_INVALID_PERCENTAGE

    def test_percentage_deal_does_not_need_guarantee(self) -> None:
        r = compute(_input(deal_type=DealType.PERCENTAGE, guarantee=0.0, percentage=50.0))
        assert r.artist_payout == pytest.approx(2000)

    @pytest.mark.parametrize("guarantee,percentage", [(0.0, 50.0), (1000.0, 0.0), (0.0, 0.0)])
    def test_hybrid_deal_requires_both(self, guarantee: float, percentage: float) -> None:
        with pytest.raises(SettlementValidationError) as exc_info:
            compute(_input(
                deal_type=DealType.GUARANTEE_VS_PERCENTAGE,
                guarantee=guarantee, percentage=percentage,
            ))
        assert exc_info.value.message == MSG_INVALID_GUARANTEE_AND_PERCENTAGE

    @pytest.mark.parametrize("deal_type", list(DealType))
    def test_overflowing_gross_rejected(self, deal_type: DealType) -> None:
        with pytest.raises(SettlementValidationError) as exc_info:
            compute(_input(
                deal_type=deal_type, ticket_price=1e308, tickets_sold=10, percentage=50.0,
            ))
        assert exc_info.value.message == MSG_AMOUNTS_OUT_OF_RANGE

    @pytest.mark.parametrize("field", ["ticket_price", "total_expenses", "guarantee"])
    def test_non_finite_amount_rejected(self, field: str) -> None:
        with pytest.raises(SettlementValidationError) as exc_info:
            compute(_input(**{field: float("inf")}))
        assert exc_info.value.message == MSG_AMOUNTS_OUT_OF_RANGE

    def test_negative_overflow_in_venue_rejected(self) -> None:
        with pytest.raises(SettlementValidationError):
            compute(_input(ticket_price=1.0, total_expenses=1.7e308, guarantee=1.7e308))


class TestInvariants:
    @pytest.mark.parametrize("deal_type", list(DealType))
    @pytest.mark.parametrize("expenses", [0.0, 500.0, 4500.0, 20000.0])
    def test_artist_plus_venue_equals_net(self, deal_type: DealType, expenses: float) -> None:
        r = compute(_input(deal_type=deal_type, total_expenses=expenses, percentage=40.0))
        assert r.artist_payout + r.venue_payout == pytest.approx(r.net_profit)

    @pytest.mark.parametrize(
        "deal_type", [DealType.PERCENTAGE, DealType.GUARANTEE_VS_PERCENTAGE]
    )
    def test_artist_never_negative_for_share_deals(self, deal_type: DealType) -> None:
        r = compute(_input(deal_type=deal_type, total_expenses=1e6, percentage=80.0))
        assert r.artist_payout >= 0

    def test_same_input_same_result(self) -> None:
        inp = _input(deal_type=DealType.GUARANTEE_VS_PERCENTAGE, percentage=33.3)
        assert compute(inp) == compute(inp)

    def test_expenses_echoed_back(self) -> None:
        assert compute(_input(total_expenses=123.45)).total_expenses == 123.45


class TestHelpers:
    def test_percentage_share_floors_at_zero(self) -> None:
        assert percentage_share(-100.0, 50.0) == 0.0
        assert percentage_share(200.0, 25.0) == pytest.approx(50.0)

    def test_unknown_deal_type_raises(self) -> None:
        with pytest.raises(ValueError):
            artist_payout("barter", 100.0, 0.0, 0.0)  # type: ignore[arg-type]
