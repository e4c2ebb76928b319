"""Pydantic schemas for the profile API."""

from datetime import datetime
from pydantic import BaseModel, Field


class ProfileUpdate(BaseModel):
    initial_balance: float | None = Field(default=None, ge=0)
    risk_per_trade_percent: float | None = Field(default=None, gt=0, le=100)
    pair_prefix: str | None = Field(default=None, max_length=16)
    pair_suffix: str | None = Field(default=None, max_length=16)


class ProfileRead(BaseModel):
    initial_balance: float
    risk_per_trade_percent: float
    pair_prefix: str
    pair_suffix: str
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
