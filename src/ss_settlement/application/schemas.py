"""Pydantic schemas for the settlement calculator API."""

from pydantic import BaseModel, ConfigDict, Field

from src.ss_common.enums import DealType
from src.ss_common.money import format_usd
from src.ss_settlement.domain.models import SettlementInput, SettlementResult

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class SettlementInputSchema(BaseModel):
    """Calculator form fields.

    Range checks live here; the positivity rules that depend on the deal type
    are enforced by the engine so they produce the form's own messages.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    artist_name: str | None = Field(None, max_length=200)
    ticket_price: float = Field(..., ge=0, description="Ticket price in dollars")
    tickets_sold: int = Field(..., ge=0)
    tax_rate: float = Field(0, ge=0, le=100, description="Tax rate in percent")
    total_expenses: float = Field(0, ge=0, description="Total expenses in dollars")
    deal_type: DealType
    guarantee: float | None = Field(None, ge=0, description="Guarantee in dollars")
    percentage: float | None = Field(None, ge=0, le=100, description="Artist % of net")

    def to_domain(self) -> SettlementInput:
        return SettlementInput(
            ticket_price=self.ticket_price,
            tickets_sold=self.tickets_sold,
            tax_rate=self.tax_rate,
            total_expenses=self.total_expenses,
            deal_type=self.deal_type,
            guarantee=self.guarantee or 0.0,
            percentage=self.percentage or 0.0,
            artist_name=self.artist_name or None,
        )


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class SettlementResultSchema(BaseModel):
    gross_revenue: float
    tax_amount: float
    total_expenses: float
    net_profit: float
    artist_payout: float
    venue_payout: float
    gross_revenue_display: str
    tax_amount_display: str
    total_expenses_display: str
    net_profit_display: str
    artist_payout_display: str
    venue_payout_display: str

    @classmethod
    def from_domain(cls, r: SettlementResult) -> "SettlementResultSchema":
        return cls(
            gross_revenue=r.gross_revenue,
            tax_amount=r.tax_amount,
            total_expenses=r.total_expenses,
            net_profit=r.net_profit,
            artist_payout=r.artist_payout,
            venue_payout=r.venue_payout,
            gross_revenue_display=format_usd(r.gross_revenue),
            tax_amount_display=format_usd(r.tax_amount),
            total_expenses_display=format_usd(r.total_expenses),
            net_profit_display=format_usd(r.net_profit),
            artist_payout_display=format_usd(r.artist_payout),
            venue_payout_display=format_usd(r.venue_payout),
        )
