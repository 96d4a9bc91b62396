"""Pydantic schemas and cursor utilities for ss_show API."""

import base64
import binascii
import json
import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from src.ss_settlement.application.schemas import (
    SettlementInputSchema,
    SettlementResultSchema,
)
from src.ss_show.domain.models import Show

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_show: Show) -> str:
    """Encode composite (created_at, id) cursor from the last show in a page."""
    payload = {"ts": last_show.created_at.isoformat(), "id": last_show.id}
    return base64.b64encode(json.dumps(payload).encode()).decode()


def cursor_decode(cursor: str | None) -> tuple[datetime, str] | None:
    """Decode cursor -> (created_at, show_id). Garbage cursors restart from the first page."""
    if cursor is None:
        return None
    try:
        data = json.loads(base64.b64decode(cursor.encode()).decode())
        return datetime.fromisoformat(data["ts"]), str(uuid.UUID(data["id"]))
    except (binascii.Error, json.JSONDecodeError, UnicodeDecodeError, KeyError, TypeError, ValueError):
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class SaveShowRequest(BaseModel):
    title: str | None = Field(None, max_length=200)
    show_date: date | None = None
    inputs: SettlementInputSchema


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ShowDetail(BaseModel):
    id: str
    title: str | None
    show_date: str | None
    inputs: SettlementInputSchema
    results: SettlementResultSchema
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, show: Show) -> "ShowDetail":
        i = show.inputs
        return cls(
            id=show.id,
            title=show.title,
            show_date=show.show_date.isoformat() if show.show_date else None,
            inputs=SettlementInputSchema(
                artist_name=i.artist_name,
                ticket_price=i.ticket_price,
                tickets_sold=i.tickets_sold,
                tax_rate=i.tax_rate,
                total_expenses=i.total_expenses,
                deal_type=i.deal_type,
                guarantee=i.guarantee or None,
                percentage=i.percentage or None,
            ),
            results=SettlementResultSchema.from_domain(show.results),
            created_at=show.created_at.isoformat(),
            updated_at=show.updated_at.isoformat(),
        )


class ShowListItem(BaseModel):
    id: str
    title: str | None
    show_date: str | None
    artist_name: str | None
    deal_type: str
    net_profit: float
    artist_payout: float
    updated_at: str

    @classmethod
    def from_domain(cls, show: Show) -> "ShowListItem":
        return cls(
            id=show.id,
            title=show.title,
            show_date=show.show_date.isoformat() if show.show_date else None,
            artist_name=show.inputs.artist_name,
            deal_type=show.inputs.deal_type.value,
            net_profit=show.results.net_profit,
            artist_payout=show.results.artist_payout,
            updated_at=show.updated_at.isoformat(),
        )


class ShowListResponse(BaseModel):
    items: list[ShowListItem]
    next_cursor: str | None
    has_more: bool
