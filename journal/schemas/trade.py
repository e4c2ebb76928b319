"""Pydantic schemas for the trades and performance API."""

from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator

from journal.models.profile import Profile
from journal.models.trade import Trade
from journal.services.periods import as_utc, local_midnight
from journal.utils.constants import STATUS_LABELS

# Numeric form fields are accepted as typed numbers or raw text; the
# lifecycle engine decides how to parse them.
FormNumber = float | str | None


class TradeCreate(BaseModel):
    pair: str = Field(default="", max_length=32)
    op: FormNumber = None
    sl: FormNumber = None
    ft: FormNumber = None
    img_before: str | None = Field(default=None, max_length=2048)
    img_after: str | None = Field(default=None, max_length=2048)


class TradeStatusUpdate(BaseModel):
    status: str
    result: FormNumber = None  # None keeps the recorded R
    img_after: str | None = Field(default=None, max_length=2048)
    close_date: datetime | None = None
    confirmed: bool = False  # required to actually delete

    @field_validator("close_date", mode="before")
    @classmethod
    def _date_only_is_local_midnight(cls, value):
        # A bare calendar day means midnight in the configured timezone;
        # anything with a time part keeps its own offset.
        if isinstance(value, str) and len(value.strip()) == len("YYYY-MM-DD"):
            try:
                return local_midnight(date.fromisoformat(value.strip()))
            except ValueError:
                return value
        if isinstance(value, date) and not isinstance(value, datetime):
            return local_midnight(value)
        return value


def format_pair(pair: str, profile: Profile | None) -> str:
    if profile is None:
        return pair
    return f"{profile.pair_prefix or ''}{pair}{profile.pair_suffix or ''}"


class TradeRead(BaseModel):
    id: int
    pair: str
    display_pair: str
    op: float
    sl: float
    ft: float
    img_before: str | None
    img_after: str | None
    status: str
    status_label: str
    result: float
    risk_usd: float | None
    open_date: datetime
    close_date: datetime | None

    @field_validator("open_date", "close_date")
    @classmethod
    def _assume_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    @classmethod
    def from_trade(cls, trade: Trade, profile: Profile | None = None) -> "TradeRead":
        return cls(
            **trade.model_dump(exclude={"owner_id"}),
            display_pair=format_pair(trade.pair, profile),
            status_label=STATUS_LABELS.get(trade.status, trade.status),
        )


class TransitionRead(BaseModel):
    directive: str  # "update", "delete" or "confirm-delete"
    message: str
    trade: TradeRead | None = None


class OpenPositionsSummaryRead(BaseModel):
    count: int
    total_floating_r: float
    total_floating_usd: float


class RunningPositionsRead(BaseModel):
    trades: list[TradeRead]
    summary: OpenPositionsSummaryRead


class TradeStatsRead(BaseModel):
    total_net_r: float
    total_trades: int
    winning_trades: int
    losing_trades: int
    win_rate: float


class HistoryRead(BaseModel):
    month: int
    year: int
    trades: list[TradeRead]
    summary: TradeStatsRead


class EquityPointRead(BaseModel):
    label: str
    balance: float
    trade: int
    result: float | None = None
    pair: str | None = None
    timestamp: datetime | None = None


class PerformanceStatsRead(TradeStatsRead):
    starting_balance: float
    current_balance: float
    net_profit_usd: float
    total_return_pct: float


class PerformanceRead(BaseModel):
    period: str
    period_start: datetime | None
    period_end: datetime | None
    points: list[EquityPointRead]
    stats: PerformanceStatsRead
    realized_balance: float
    next_trade_risk: float
    risk_percent: float
