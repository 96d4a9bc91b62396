"""Pydantic schemas for share links and the public settlement projection."""

from pydantic import BaseModel

from src.ss_common.enums import DealType
from src.ss_common.money import format_percent, format_usd
from src.ss_settlement.application.schemas import SettlementResultSchema
from src.ss_share.domain.models import ShareLink
from src.ss_show.domain.models import Show

DEAL_TYPE_LABELS: dict[DealType, str] = {
    DealType.GUARANTEE: "Guarantee",
    DealType.PERCENTAGE: "Percentage of Net",
    DealType.GUARANTEE_VS_PERCENTAGE: "Guarantee vs Percentage (whichever is higher)",
}


class CreateShareLinkRequest(BaseModel):
    show_id: str


class ToggleShareLinkRequest(BaseModel):
    show_id: str
    is_active: bool


class ShareLinkResponse(BaseModel):
    token: str
    is_active: bool
    already_exists: bool = False

    @classmethod
    def from_domain(cls, link: ShareLink, already_exists: bool = False) -> "ShareLinkResponse":
        return cls(token=link.token, is_active=link.is_active, already_exists=already_exists)


class ShareLinkLookupResponse(BaseModel):
    exists: bool
    token: str | None = None
    is_active: bool | None = None
    created_at: str | None = None


class SharedSettlementResponse(BaseModel):
    """Read-only view served to anonymous token holders. Carries no ids."""

    title: str | None
    show_date: str | None
    artist_name: str | None
    deal_type: str
    deal_type_label: str
    guarantee_display: str | None
    percentage_display: str | None
    ticket_price_display: str
    tickets_sold: int
    tax_rate_display: str
    total_expenses_display: str
    results: SettlementResultSchema

    @classmethod
    def from_show(cls, show: Show) -> "SharedSettlementResponse":
        i = show.inputs
        return cls(
            title=show.title,
            show_date=show.show_date.isoformat() if show.show_date else None,
            artist_name=i.artist_name,
            deal_type=i.deal_type.value,
            deal_type_label=DEAL_TYPE_LABELS[i.deal_type],
            guarantee_display=format_usd(i.guarantee) if i.guarantee else None,
            percentage_display=format_percent(i.percentage) if i.percentage else None,
            ticket_price_display=format_usd(i.ticket_price),
            tickets_sold=i.tickets_sold,
            tax_rate_display=format_percent(i.tax_rate),
            total_expenses_display=format_usd(i.total_expenses),
            results=SettlementResultSchema.from_domain(show.results),
        )
