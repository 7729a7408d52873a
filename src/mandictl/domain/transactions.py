"""Transaction records and their status lifecycle.

pending -> completed | cancelled. Completed transactions can be rated
(1..5) by either party and can no longer be cancelled.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field

MIN_RATING = 1
MAX_RATING = 5


class TransactionStatus(StrEnum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Party(StrEnum):
    BUYER = "buyer"
    SELLER = "seller"


class Transaction(BaseModel):
    """A recorded deal between a buyer and a seller."""

    model_config = {"frozen": True}

    id: str
    buyer_id: str
    seller_id: str
    commodity: str
    quantity: float = Field(gt=0)
    agreed_price: float = Field(gt=0)
    status: TransactionStatus = TransactionStatus.PENDING
    created_at: datetime
    completed_at: datetime | None = None
    buyer_rating: int | None = Field(default=None, ge=MIN_RATING, le=MAX_RATING)
    seller_rating: int | None = Field(default=None, ge=MIN_RATING, le=MAX_RATING)
    notes: str | None = None
    cancellation_reason: str | None = None

    @property
    def total_amount(self) -> float:
        return self.quantity * self.agreed_price

    def involves(self, user_id: str) -> bool:
        return user_id in (self.buyer_id, self.seller_id)


class DateRange(BaseModel):
    """Inclusive span of ``created_at`` timestamps."""

    model_config = {"frozen": True}

    start: datetime
    end: datetime


class TransactionSummary(BaseModel):
    """Totals over a user's completed transactions.

    ``date_range`` echoes the requested bounds. An open side is filled with
    the oldest or newest matching transaction, or with the query time when
    nothing matched.
    """

    model_config = {"frozen": True}

    total_transactions: int = 0
    total_volume: float = 0.0
    total_value: float = 0.0
    average_price: float = 0.0
    commodities: list[str] = Field(default_factory=list)
    date_range: DateRange | None = None


class CommodityStats(BaseModel):
    """Completed-trade totals for one commodity."""

    model_config = {"frozen": True}

    commodity: str
    total_transactions: int
    total_volume: float
    total_value: float
    average_price: float


class PartnerStats(BaseModel):
    """Completed-trade totals with one counterparty.

    ``role`` is the side the partner took. ``average_rating`` averages the
    ratings that partner recorded and is None when they never rated.
    """

    model_config = {"frozen": True}

    partner_id: str
    role: Party
    total_transactions: int
    total_value: float
    average_rating: float | None = None
