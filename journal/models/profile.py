"""Profile model: per-user account baseline and display preferences."""

from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class Profile(SQLModel, table=True):
    __tablename__ = "profile"

    owner_id: int = Field(foreign_key="user.id", primary_key=True)
    initial_balance: float = 0.0  # starting account balance in USD
    risk_per_trade_percent: float = 1.0  # % of realized balance risked per new trade
    pair_prefix: str = ""  # display only, e.g. "XAU"
    pair_suffix: str = ""  # display only, e.g. "m"
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
