"""Trade model: one journaled position from entry to close."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: int | None = Field(default=None, primary_key=True)
    owner_id: int = Field(foreign_key="user.id", index=True)
    pair: str = Field(index=True)  # upper-cased symbol, e.g. "XAUUSD"
    op: float  # open price
    sl: float = 0.0  # stop loss
    ft: float = 0.0  # final target
    img_before: str | None = None  # chart link at entry
    img_after: str | None = None  # chart link after the move
    status: str = Field(index=True)  # see utils.constants.TRADE_STATUSES; initial value from settings
    result: float = 0.0  # R-multiple; 0 while open
    risk_usd: float | None = None  # USD per 1R, frozen at entry; NULL on legacy rows
    open_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    close_date: datetime | None = Field(default=None, index=True)
