"""Versioned schema for the `shows.inputs` / `shows.results` JSONB blobs.

Every blob is written with `schema_version`. Reads validate strictly and fail
closed: a row that does not match a known version raises SnapshotError
instead of leaking a half-typed dict to callers.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.ss_common.enums import DealType
from src.ss_settlement.domain.models import SettlementInput, SettlementResult

CURRENT_SCHEMA_VERSION = 1


class SnapshotError(ValueError):
    """Stored blob does not match any known schema version."""


class _InputsV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    schema_version: Literal[1] = 1
    artist_name: str | None = None
    ticket_price: float = Field(ge=0)
    tickets_sold: int = Field(ge=0)
    tax_rate: float = Field(ge=0, le=100)
    total_expenses: float = Field(ge=0)
    deal_type: DealType
    guarantee: float = Field(0.0, ge=0)
    percentage: float = Field(0.0, ge=0, le=100)


class _ResultsV1(BaseModel):
    model_config = ConfigDict(extra="forbid")

    schema_version: Literal[1] = 1
    gross_revenue: float
    tax_amount: float
    total_expenses: float
    net_profit: float
    artist_payout: float
    venue_payout: float


def dump_inputs(inp: SettlementInput) -> dict[str, Any]:
    return _InputsV1(
        artist_name=inp.artist_name,
        ticket_price=inp.ticket_price,
        tickets_sold=inp.tickets_sold,
        tax_rate=inp.tax_rate,
        total_expenses=inp.total_expenses,
        deal_type=inp.deal_type,
        guarantee=inp.guarantee,
        percentage=inp.percentage,
    ).model_dump(mode="json")


def dump_results(res: SettlementResult) -> dict[str, Any]:
    return _ResultsV1(
        gross_revenue=res.gross_revenue,
        tax_amount=res.tax_amount,
        total_expenses=res.total_expenses,
        net_profit=res.net_profit,
        artist_payout=res.artist_payout,
        venue_payout=res.venue_payout,
    ).model_dump(mode="json")


def load_inputs(blob: Any) -> SettlementInput:
    try:
        v = _InputsV1.model_validate(blob)
    except ValidationError as exc:
        raise SnapshotError(f"invalid inputs snapshot: {exc.error_count()} error(s)") from exc
    return SettlementInput(
        ticket_price=v.ticket_price,
        tickets_sold=v.tickets_sold,
        tax_rate=v.tax_rate,
        total_expenses=v.total_expenses,
        deal_type=v.deal_type,
        guarantee=v.guarantee,
        percentage=v.percentage,
        artist_name=v.artist_name,
    )


def load_results(blob: Any) -> SettlementResult:
    try:
        v = _ResultsV1.model_validate(blob)
    except ValidationError as exc:
        raise SnapshotError(f"invalid results snapshot: {exc.error_count()} error(s)") from exc
    return SettlementResult(
        gross_revenue=v.gross_revenue,
        tax_amount=v.tax_amount,
        total_expenses=v.total_expenses,
        net_profit=v.net_profit,
        artist_payout=v.artist_payout,
        venue_payout=v.venue_payout,
    )
