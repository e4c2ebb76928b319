"""Trade and profile stores.

The journal engines only ever see these two classes. Every query is scoped
to one owner, and database failures surface as ``StoreError`` with the
session rolled back so the caller's view of the data stays as it was.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, and_, or_, select

from journal.models.profile import Profile
from journal.models.trade import Trade
from journal.services.errors import NotFoundError, StoreError
from journal.services.periods import as_utc

logger = logging.getLogger(__name__)

# Columns a status change may write; everything else is fixed at creation.
MUTABLE_TRADE_FIELDS = frozenset({"status", "result", "img_after", "close_date"})
PROFILE_FIELDS = frozenset({"initial_balance", "risk_per_trade_percent", "pair_prefix", "pair_suffix"})


@dataclass(frozen=True)
class TradeQuery:
    owner_id: int
    statuses: Iterable[str] | None = None
    date_range: tuple[datetime, datetime] | None = None
    date_field: str = "open_date"  # "open_date", "close_date" or "either"


@contextmanager
def _store_call(session: Session, action: str):
    try:
        yield
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Store failure while trying to {action}: {e}")
        raise StoreError(f"Could not {action}: {e}") from e


class TradeRepository:
    def __init__(self, session: Session):
        self.session = session

    def insert(self, trade: Trade) -> Trade:
        with _store_call(self.session, "save the trade"):
            self.session.add(trade)
            self.session.commit()
            self.session.refresh(trade)
        return trade

    def get(self, owner_id: int, trade_id: int) -> Trade:
        with _store_call(self.session, "load the trade"):
            trade = self.session.get(Trade, trade_id)
        if trade is None or trade.owner_id != owner_id:
            raise NotFoundError(f"Trade {trade_id} not found")
        return trade

    def update(self, owner_id: int, trade_id: int, fields: dict) -> Trade:
        illegal = set(fields) - MUTABLE_TRADE_FIELDS
        if illegal:
            raise ValueError(f"Trade fields are not editable: {', '.join(sorted(illegal))}")

        trade = self.get(owner_id, trade_id)
        with _store_call(self.session, "update the trade"):
            for key, value in fields.items():
                setattr(trade, key, value)
            self.session.add(trade)
            self.session.commit()
            self.session.refresh(trade)
        return trade

    def delete(self, owner_id: int, trade_id: int) -> None:
        trade = self.get(owner_id, trade_id)
        with _store_call(self.session, "delete the trade"):
            self.session.delete(trade)
            self.session.commit()

    def query(
        self,
        criteria: TradeQuery,
        descending: bool = False,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Trade]:
        order_column = Trade.close_date if criteria.date_field == "close_date" else Trade.open_date
        stmt = select(Trade).where(Trade.owner_id == criteria.owner_id)
        if criteria.statuses is not None:
            stmt = stmt.where(Trade.status.in_(list(criteria.statuses)))  # type: ignore[attr-defined]
        if criteria.date_range is not None:
            start, end = (as_utc(bound).astimezone(timezone.utc) for bound in criteria.date_range)
            if criteria.date_field == "either":
                stmt = stmt.where(or_(
                    and_(Trade.open_date >= start, Trade.open_date <= end),
                    and_(Trade.close_date >= start, Trade.close_date <= end),
                ))
            else:
                stmt = stmt.where(order_column >= start, order_column <= end)
        stmt = stmt.order_by(order_column.desc() if descending else order_column, Trade.id)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)

        with _store_call(self.session, "load trades"):
            return list(self.session.exec(stmt).all())


class ProfileRepository:
    def __init__(self, session: Session):
        self.session = session

    def get(self, owner_id: int) -> Profile | None:
        with _store_call(self.session, "load the profile"):
            return self.session.get(Profile, owner_id)

    def upsert(self, owner_id: int, fields: dict) -> Profile:
        unknown = set(fields) - PROFILE_FIELDS
        if unknown:
            raise ValueError(f"Unknown profile fields: {', '.join(sorted(unknown))}")

        with _store_call(self.session, "save the profile"):
            profile = self.session.get(Profile, owner_id)
            if profile is None:
                profile = Profile(owner_id=owner_id)
            for key, value in fields.items():
                setattr(profile, key, value)
            profile.updated_at = datetime.now(timezone.utc)
            self.session.add(profile)
            self.session.commit()
            self.session.refresh(profile)
        return profile
