"""Performance aggregation over journaled trades.

Every function here is pure: it reads the trades it is handed, never
mutates them, and returns fresh result objects, so views can recompute as
often as they like. Currency P&L always uses each trade's own risk snapshot
(``risk_usd``) so history is not rewritten when the balance changes later.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable

from journal.models.trade import Trade
from journal.services.parsing import number_or_zero
from journal.services.periods import Period, as_utc, to_local
from journal.utils.constants import COMPLETED_STATUSES, OPEN_STATUSES

logger = logging.getLogger(__name__)

START_LABEL = "Start"


@dataclass
class OpenPositionsSummary:
    count: int = 0
    total_floating_r: float = 0.0
    total_floating_usd: float = 0.0


@dataclass
class TradeStats:
    total_net_r: float = 0.0
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0  # wins / count


@dataclass
class EquityPoint:
    label: str
    balance: float
    trade: int = 0  # 1-based position in the period; 0 for the start point
    result: float | None = None
    pair: str | None = None
    timestamp: datetime | None = None


@dataclass
class PerformanceStats(TradeStats):
    starting_balance: float = 0.0
    current_balance: float = 0.0
    net_profit_usd: float = 0.0
    total_return_pct: float = 0.0


@dataclass
class EquityCurve:
    period: Period
    points: list[EquityPoint] = field(default_factory=list)
    stats: PerformanceStats = field(default_factory=PerformanceStats)


def trade_pnl(trade: Trade, risk_usd: float | None = None) -> float:
    """Currency P&L of one trade: result (R) times USD per R."""
    risk = trade.risk_usd if risk_usd is None else risk_usd
    return number_or_zero(trade.result) * number_or_zero(risk)


def open_positions_summary(trades: Iterable[Trade]) -> OpenPositionsSummary:
    """Count and floating P&L of the open trades in ``trades``."""
    summary = OpenPositionsSummary()
    for trade in trades:
        if trade.status not in OPEN_STATUSES:
            continue
        summary.count += 1
        summary.total_floating_r += number_or_zero(trade.result)
        summary.total_floating_usd += trade_pnl(trade)
    return summary


def realized_balance(initial_balance: float, trades: Iterable[Trade]) -> float:
    """Initial balance plus the currency P&L of every completed trade."""
    balance = number_or_zero(initial_balance)
    for trade in trades:
        if trade.status in COMPLETED_STATUSES:
            balance += trade_pnl(trade)
    return balance


def next_trade_risk(balance: float, risk_percent: float) -> float:
    """USD per 1R for the next position, sized off the realized balance."""
    return number_or_zero(balance) * (number_or_zero(risk_percent) / 100)


def trade_stats(trades: Iterable[Trade], stats: TradeStats | None = None) -> TradeStats:
    """Net R, win/loss counts and win rate. Break-even (0R) trades count toward neither side."""
    stats = stats or TradeStats()
    for trade in trades:
        result = number_or_zero(trade.result)
        stats.total_net_r += result
        stats.total_trades += 1
        if result > 0:
            stats.winning_trades += 1
        elif result < 0:
            stats.losing_trades += 1
    if stats.total_trades:
        stats.win_rate = stats.winning_trades / stats.total_trades
    return stats


def history_summary(trades: Iterable[Trade]) -> TradeStats:
    """Totals for the monthly history table."""
    return trade_stats(trades)


def event_time(trade: Trade) -> datetime | None:
    """When a completed trade hit the account: its close date, else its open date."""
    moment = trade.close_date or trade.open_date
    return as_utc(moment) if moment else None


def format_label(moment: datetime) -> str:
    return to_local(moment).strftime("%d %b")


def equity_curve(
    trades: Iterable[Trade],
    initial_balance: float,
    risk_percent: float,
    period: Period,
) -> EquityCurve:
    """Running balance over the completed trades of ``period``.

    Trades closed before the period roll into the starting balance. Legacy
    trades without a risk snapshot are valued at the current profile risk,
    which is only an approximation of what was risked at the time.
    """
    initial_balance = number_or_zero(initial_balance)
    fallback_risk = next_trade_risk(initial_balance, risk_percent)

    completed = []
    for trade in trades:
        if trade.status not in COMPLETED_STATUSES:
            continue
        moment = event_time(trade)
        if moment is None:
            logger.warning(f"Trade {trade.id} has no open or close date; left out of the equity curve")
            continue
        completed.append((moment, trade))
    completed.sort(key=lambda item: item[0])

    def effective_risk(trade: Trade) -> float:
        risk = number_or_zero(trade.risk_usd)
        return risk if risk else fallback_risk

    starting_balance = initial_balance
    within = []
    for moment, trade in completed:
        if period.start is not None and moment < period.start:
            starting_balance += trade_pnl(trade, effective_risk(trade))
        elif period.contains(moment):
            within.append((moment, trade))

    running = starting_balance
    points = [EquityPoint(label=START_LABEL, balance=starting_balance)]
    for index, (moment, trade) in enumerate(within, start=1):
        running += trade_pnl(trade, effective_risk(trade))
        points.append(EquityPoint(
            label=format_label(moment),
            balance=running,
            trade=index,
            result=number_or_zero(trade.result),
            pair=trade.pair,
            timestamp=moment,
        ))

    stats = trade_stats((trade for _, trade in within), PerformanceStats())
    stats.starting_balance = starting_balance
    stats.current_balance = running
    stats.net_profit_usd = running - starting_balance
    if starting_balance:
        stats.total_return_pct = (running - starting_balance) / starting_balance * 100

    return EquityCurve(period=period, points=points, stats=stats)
