"""Domain models for ss_share — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ShareLink:
    id: str
    show_id: str
    token: str           # immutable once issued
    is_active: bool
    created_at: datetime
