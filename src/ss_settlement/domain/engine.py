"""Settlement engine — pure computation, no I/O.

Validation runs first and short-circuits on the first failing rule; a
validation failure raises before any figure is computed.
"""

import math

from src.ss_common.enums import DealType
from src.ss_common.errors import SettlementValidationError
from src.ss_settlement.domain.models import SettlementInput, SettlementResult

MSG_INVALID_TICKETS = "Please enter valid ticket price and tickets sold."
MSG_INVALID_GUARANTEE = "Please enter a valid guarantee amount."
MSG_INVALID_PERCENTAGE = "Please enter a valid percentage."
MSG_INVALID_GUARANTEE_AND_PERCENTAGE = "Please enter both guarantee amount and percentage."
MSG_AMOUNTS_OUT_OF_RANGE = "Amounts are too large to settle."


def validate(inp: SettlementInput) -> None:
    """Raise SettlementValidationError with the form message for the first failing rule."""
    amounts = (inp.ticket_price, inp.tax_rate, inp.total_expenses, inp.guarantee, inp.percentage)
    if not all(math.isfinite(v) for v in amounts):
        raise SettlementValidationError(MSG_AMOUNTS_OUT_OF_RANGE)

    if inp.ticket_price <= 0 or inp.tickets_sold <= 0:
        raise SettlementValidationError(MSG_INVALID_TICKETS)

    if inp.deal_type == DealType.GUARANTEE and inp.guarantee <= 0:
        raise SettlementValidationError(MSG_INVALID_GUARANTEE)

    if inp.deal_type == DealType.PERCENTAGE and inp.percentage <= 0:
        raise SettlementValidationError(MSG_INVALID_PERCENTAGE)

    if inp.deal_type == DealType.GUARANTEE_VS_PERCENTAGE and (
        inp.guarantee <= 0 or inp.percentage <= 0
    ):
        raise SettlementValidationError(MSG_INVALID_GUARANTEE_AND_PERCENTAGE)


def percentage_share(net_profit: float, percentage: float) -> float:
    """Artist's percentage of net, floored at zero when the show loses money."""
    return max(0.0, net_profit * (percentage / 100))


def artist_payout(deal_type: DealType, net_profit: float, guarantee: float, percentage: float) -> float:
    if deal_type == DealType.GUARANTEE:
        # Flat fee regardless of net; can exceed net and push the venue negative
        return guarantee
    if deal_type == DealType.PERCENTAGE:
        return percentage_share(net_profit, percentage)
    if deal_type == DealType.GUARANTEE_VS_PERCENTAGE:
        return max(guarantee, percentage_share(net_profit, percentage))
    raise ValueError(f"Unknown deal type: {deal_type!r}")


def compute(inp: SettlementInput) -> SettlementResult:
    """Compute the settlement breakdown for a show.

    gross  = ticket_price x tickets_sold
    tax    = gross x tax_rate / 100
    net    = gross - tax - total_expenses
    artist = per deal type (see artist_payout)
    venue  = net - artist

    Raises:
        SettlementValidationError: input rejected; no result is produced.
    """
    validate(inp)

    gross_revenue = inp.ticket_price * inp.tickets_sold
    tax_amount = gross_revenue * (inp.tax_rate / 100)
    net_profit = gross_revenue - tax_amount - inp.total_expenses
    artist = artist_payout(inp.deal_type, net_profit, inp.guarantee, inp.percentage)
    venue = net_profit - artist
    if not all(math.isfinite(v) for v in (gross_revenue, tax_amount, net_profit, artist, venue)):
        raise SettlementValidationError(MSG_AMOUNTS_OUT_OF_RANGE)

    return SettlementResult(
        gross_revenue=gross_revenue,
        tax_amount=tax_amount,
        total_expenses=inp.total_expenses,
        net_profit=net_profit,
        artist_payout=artist,
        venue_payout=venue,
    )
