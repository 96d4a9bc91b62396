"""Domain models for ss_show — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import date, datetime

from src.ss_settlement.domain.models import SettlementInput, SettlementResult


@dataclass
class Show:
    id: str
    user_id: str
    title: str | None
    show_date: date | None
    inputs: SettlementInput
    results: SettlementResult
    created_at: datetime
    updated_at: datetime
