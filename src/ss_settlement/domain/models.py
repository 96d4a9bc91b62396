"""Domain models for ss_settlement — pure dataclasses, no SQLAlchemy dependency.

All currency amounts are float dollars. No rounding is applied here.
"""

from dataclasses import dataclass

from src.ss_common.enums import DealType


@dataclass(frozen=True)
class SettlementInput:
    ticket_price: float
    tickets_sold: int
    tax_rate: float            # percent, 0-100
    total_expenses: float
    deal_type: DealType
    guarantee: float = 0.0     # used by GUARANTEE and GUARANTEE_VS_PERCENTAGE
    percentage: float = 0.0    # percent of net, used by PERCENTAGE and GUARANTEE_VS_PERCENTAGE
    artist_name: str | None = None


@dataclass(frozen=True)
class SettlementResult:
    gross_revenue: float
    tax_amount: float
    total_expenses: float
    net_profit: float          # may be negative
    artist_payout: float       # never negative
    venue_payout: float        # net_profit - artist_payout, not floored
