"""Per-request journal controller.

One ``JournalService`` is built for each request with the caller's user id
and a database session. It owns what a single dashboard view needs: it loads
the profile and trades, hands them to the lifecycle and aggregation engines,
and writes back whatever the engines decide.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlmodel import Session

from journal.config import settings
from journal.models.profile import Profile
from journal.models.trade import Trade
from journal.services import aggregation, lifecycle
from journal.services.aggregation import EquityCurve, OpenPositionsSummary, TradeStats
from journal.services.lifecycle import Directive, StatusChange, Transition
from journal.services.periods import month_range, resolve_period
from journal.services.repository import ProfileRepository, TradeQuery, TradeRepository
from journal.utils.constants import COMPLETED_STATUSES, HISTORY_STATUSES, OPEN_STATUSES

logger = logging.getLogger(__name__)


@dataclass
class PerformanceReport:
    curve: EquityCurve
    realized_balance: float
    next_trade_risk: float
    risk_percent: float


class JournalService:
    def __init__(self, session: Session, owner_id: int):
        self.owner_id = owner_id
        self.trades = TradeRepository(session)
        self.profiles = ProfileRepository(session)

    # -- profile -------------------------------------------------------------

    def get_profile(self) -> Profile:
        """Stored profile, or an unsaved one holding the defaults."""
        profile = self.profiles.get(self.owner_id)
        if profile is None:
            profile = Profile(
                owner_id=self.owner_id,
                risk_per_trade_percent=settings.default_risk_percent,
            )
        return profile

    def save_profile(self, fields: dict) -> Profile:
        profile = self.profiles.upsert(self.owner_id, fields)
        logger.info(f"Profile saved for owner {self.owner_id}")
        return profile

    # -- positions -----------------------------------------------------------

    def completed_trades(self) -> list[Trade]:
        return self.trades.query(
            TradeQuery(self.owner_id, statuses=COMPLETED_STATUSES, date_field="close_date")
        )

    def add_position(
        self,
        pair: str | None,
        op,
        sl=None,
        ft=None,
        img_before: str | None = None,
        img_after: str | None = None,
    ) -> Trade:
        profile = self.profiles.get(self.owner_id)
        balance = aggregation.realized_balance(
            profile.initial_balance if profile else 0.0,
            self.completed_trades(),
        )
        trade = lifecycle.create_trade(
            self.owner_id, pair, op, sl, ft, img_before, img_after,
            profile=profile,
            realized_balance=balance,
        )
        return self.trades.insert(trade)

    def get_trade(self, trade_id: int) -> Trade:
        return self.trades.get(self.owner_id, trade_id)

    def edit_position(self, trade_id: int, change: StatusChange) -> Transition:
        """Apply a status change and persist whatever it implies."""
        trade = self.trades.get(self.owner_id, trade_id)
        transition = lifecycle.apply_status_change(trade, change)

        if transition.directive is Directive.UPDATE:
            transition.trade = self.trades.update(self.owner_id, trade_id, transition.changes)
            logger.info(f"Trade {trade_id} -> {change.status} ({transition.trade.result:+.2f}R)")
        elif transition.directive is Directive.DELETE:
            self.trades.delete(self.owner_id, trade_id)
            logger.info(f"Trade {trade_id} deleted")
        return transition

    def running_positions(self) -> tuple[list[Trade], OpenPositionsSummary]:
        trades = self.trades.query(TradeQuery(self.owner_id, statuses=OPEN_STATUSES), descending=True)
        return trades, aggregation.open_positions_summary(trades)

    def history(
        self,
        month: int,
        year: int,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[Trade], TradeStats]:
        """Open and completed trades opened or closed within a calendar month."""
        criteria = TradeQuery(
            self.owner_id,
            statuses=HISTORY_STATUSES,
            date_range=month_range(month, year),
            date_field="either",
        )
        trades = self.trades.query(criteria, descending=True, limit=limit, offset=offset)
        return trades, aggregation.history_summary(trades)

    # -- performance ---------------------------------------------------------

    def performance(
        self,
        period_name: str = "All",
        month: int | None = None,
        year: int | None = None,
        now: datetime | None = None,
    ) -> PerformanceReport:
        period = resolve_period(period_name, month, year, now=now)
        profile = self.get_profile()
        completed = self.completed_trades()

        balance = aggregation.realized_balance(profile.initial_balance, completed)
        curve = aggregation.equity_curve(
            completed, profile.initial_balance, profile.risk_per_trade_percent, period,
        )
        return PerformanceReport(
            curve=curve,
            realized_balance=balance,
            next_trade_risk=aggregation.next_trade_risk(balance, profile.risk_per_trade_percent),
            risk_percent=profile.risk_per_trade_percent,
        )
