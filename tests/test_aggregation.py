"""Tests for floating / realized P&L and the equity curve."""

from datetime import timedelta

import pytest

from conftest import make_trade, utc
from journal.services.aggregation import (
    START_LABEL,
    equity_curve,
    history_summary,
    next_trade_risk,
    open_positions_summary,
    realized_balance,
)
from journal.services.periods import Period, resolve_period

ALL = Period(name="All")


# ---------------------------------------------------------------------------
# 1. Open positions and realized balance
# ---------------------------------------------------------------------------

class TestOpenPositionsSummary:
    def test_floating_pnl_uses_each_trades_snapshot(self):
        trades = [
            make_trade(status="running", result=1.0, risk_usd=10.0),
            make_trade(status="running", result=-0.5, risk_usd=20.0),
        ]
        summary = open_positions_summary(trades)
        assert summary.count == 2
        assert summary.total_floating_r == pytest.approx(0.5)
        assert summary.total_floating_usd == pytest.approx(0.0)

    def test_only_open_statuses_count(self):
        trades = [
            make_trade(status="be", result=0.5, risk_usd=10.0),
            make_trade(status="unfill", result=0.0, risk_usd=10.0),
            make_trade(status="closed", result=3.0, risk_usd=10.0),
            make_trade(status="cancel", result=1.0, risk_usd=10.0),
            make_trade(status="pending", result=1.0, risk_usd=10.0),
        ]
        summary = open_positions_summary(trades)
        assert summary.count == 2
        assert summary.total_floating_usd == pytest.approx(5.0)

    def test_empty(self):
        summary = open_positions_summary([])
        assert (summary.count, summary.total_floating_r, summary.total_floating_usd) == (0, 0.0, 0.0)


class TestRealizedBalance:
    def test_compounding(self):
        trades = [make_trade(status="closed", result=2.0, risk_usd=10.0, close_date=utc(2026, 1, 2))]
        balance = realized_balance(1000.0, trades)
        assert balance == pytest.approx(1020.0)
        assert next_trade_risk(balance, 1.0) == pytest.approx(10.2)

    def test_done_is_completed_and_open_trades_are_ignored(self):
        trades = [
            make_trade(status="done", result=-1.0, risk_usd=10.0),
            make_trade(status="running", result=5.0, risk_usd=10.0),
            make_trade(status="cancel", result=5.0, risk_usd=10.0),
        ]
        assert realized_balance(1000.0, trades) == pytest.approx(990.0)


class TestNaNSafety:
    def test_nan_result_contributes_zero(self):
        trades = [
            make_trade(status="closed", result=float("nan"), risk_usd=10.0),
            make_trade(status="closed", result=None, risk_usd=10.0),
            make_trade(status="closed", result=1.0, risk_usd=10.0),
        ]
        assert realized_balance(1000.0, trades) == pytest.approx(1010.0)

    def test_nan_risk_contributes_zero(self):
        trades = [
            make_trade(status="running", result=1.0, risk_usd=float("nan")),
            make_trade(status="running", result=1.0, risk_usd=None),
        ]
        summary = open_positions_summary(trades)
        assert summary.total_floating_usd == 0.0
        assert summary.total_floating_r == pytest.approx(2.0)

    def test_equity_curve_stays_finite(self):
        trades = [
            make_trade(status="closed", result=float("nan"), close_date=utc(2026, 1, 2)),
            make_trade(status="closed", result=2.0, close_date=utc(2026, 1, 3)),
        ]
        curve = equity_curve(trades, 1000.0, 1.0, ALL)
        assert curve.stats.current_balance == pytest.approx(1020.0)
        assert curve.stats.total_net_r == pytest.approx(2.0)


# ---------------------------------------------------------------------------
# 2. Equity curve
# ---------------------------------------------------------------------------

class TestEquityCurve:
    def test_points_and_stats(self):
        trades = [
            make_trade(pair="EURUSD", status="closed", result=2.0, risk_usd=10.0, close_date=utc(2026, 1, 5)),
            make_trade(pair="XAUUSD", status="done", result=-1.0, risk_usd=10.2, close_date=utc(2026, 1, 7)),
            make_trade(pair="GBPUSD", status="closed", result=0.0, risk_usd=10.1, close_date=utc(2026, 1, 9)),
        ]
        curve = equity_curve(trades, 1000.0, 1.0, ALL)

        assert [p.label for p in curve.points] == [START_LABEL, "05 Jan", "07 Jan", "09 Jan"]
        assert [p.balance for p in curve.points] == pytest.approx([1000.0, 1020.0, 1009.8, 1009.8])
        assert curve.points[1].pair == "EURUSD"
        assert curve.points[2].result == -1.0
        assert [p.trade for p in curve.points] == [0, 1, 2, 3]

        stats = curve.stats
        assert stats.total_trades == 3
        assert stats.winning_trades == 1
        assert stats.losing_trades == 1
        assert stats.win_rate == pytest.approx(1 / 3)
        assert stats.total_net_r == pytest.approx(1.0)
        assert stats.starting_balance == 1000.0
        assert stats.net_profit_usd == pytest.approx(9.8)
        assert stats.total_return_pct == pytest.approx(0.98)

    def test_empty_curve(self):
        curve = equity_curve([], 500.0, 1.0, ALL)
        assert len(curve.points) == 1
        assert curve.points[0].balance == 500.0
        assert curve.stats.win_rate == 0.0
        assert curve.stats.total_trades == 0

    def test_ignores_open_and_removed_trades(self):
        trades = [
            make_trade(status="running", result=5.0, close_date=None),
            make_trade(status="cancel", result=5.0, close_date=utc(2026, 1, 2)),
            make_trade(status="closed", result=1.0, close_date=utc(2026, 1, 3)),
        ]
        curve = equity_curve(trades, 1000.0, 1.0, ALL)
        assert curve.stats.total_trades == 1

    def test_timestamps_are_non_decreasing(self):
        trades = [
            make_trade(status="closed", result=1.0, close_date=utc(2026, 3, 1)),
            make_trade(status="closed", result=1.0, close_date=utc(2026, 1, 1)),
            make_trade(status="closed", result=1.0, close_date=None, open_date=utc(2026, 2, 1)),
            make_trade(status="closed", result=1.0, close_date=utc(2026, 1, 1, 0, 0).replace(tzinfo=None)),
        ]
        curve = equity_curve(trades, 1000.0, 1.0, ALL)
        stamps = [p.timestamp for p in curve.points[1:]]
        assert len(stamps) == 4
        assert stamps == sorted(stamps)

    def test_open_date_fallback(self):
        trade = make_trade(status="closed", result=1.0, close_date=None, open_date=utc(2026, 2, 14))
        curve = equity_curve([trade], 1000.0, 1.0, ALL)
        assert curve.points[1].timestamp == utc(2026, 2, 14)

    def test_inputs_are_not_mutated_and_repeat_calls_agree(self):
        trades = [
            make_trade(status="closed", result=1.0, close_date=utc(2026, 1, 3)),
            make_trade(status="closed", result=-1.0, close_date=utc(2026, 1, 2)),
        ]
        first = equity_curve(trades, 1000.0, 1.0, ALL)
        second = equity_curve(trades, 1000.0, 1.0, ALL)
        assert first == second
        assert [t.close_date for t in trades] == [utc(2026, 1, 3), utc(2026, 1, 2)]


class TestEquityCurvePeriods:
    def test_earlier_trades_roll_into_starting_balance(self):
        trades = [
            make_trade(status="closed", result=2.0, risk_usd=10.0, close_date=utc(2026, 4, 20)),
            make_trade(status="closed", result=1.0, risk_usd=10.2, close_date=utc(2026, 5, 10)),
            make_trade(status="closed", result=1.0, risk_usd=10.3, close_date=utc(2026, 6, 2)),
        ]
        curve = equity_curve(trades, 1000.0, 1.0, resolve_period("Custom", month=5, year=2026))
        assert curve.stats.starting_balance == pytest.approx(1020.0)
        assert curve.stats.current_balance == pytest.approx(1030.2)
        assert curve.stats.total_trades == 1

    def test_legacy_trade_without_snapshot_uses_profile_risk(self):
        trades = [
            make_trade(status="closed", result=2.0, risk_usd=None, close_date=utc(2026, 4, 20)),
            make_trade(status="closed", result=1.0, risk_usd=0.0, close_date=utc(2026, 5, 3)),
        ]
        curve = equity_curve(trades, 1000.0, 2.0, resolve_period("Custom", month=5, year=2026))
        assert curve.stats.starting_balance == pytest.approx(1040.0)
        assert curve.stats.current_balance == pytest.approx(1060.0)

    def test_trade_at_period_start_is_included(self):
        period = resolve_period("Custom", month=5, year=2026)
        trades = [
            make_trade(status="closed", result=1.0, close_date=period.start),
            make_trade(status="closed", result=3.0, close_date=period.start - timedelta(seconds=1)),
        ]
        curve = equity_curve(trades, 1000.0, 1.0, period)
        assert curve.stats.total_trades == 1
        assert curve.stats.total_net_r == 1.0
        assert curve.stats.starting_balance == pytest.approx(1030.0)

    def test_rolling_window_boundary(self):
        period = resolve_period("1M", now=utc(2026, 10, 19, 12, 0))
        trades = [
            make_trade(status="closed", result=1.0, close_date=utc(2026, 9, 19)),
            make_trade(status="closed", result=1.0, close_date=utc(2026, 9, 18, 23, 59, 59)),
        ]
        curve = equity_curve(trades, 1000.0, 1.0, period)
        assert curve.stats.total_trades == 1

    def test_trades_after_period_are_dropped(self):
        trades = [make_trade(status="closed", result=1.0, close_date=utc(2026, 6, 1))]
        curve = equity_curve(trades, 1000.0, 1.0, resolve_period("Custom", month=5, year=2026))
        assert curve.stats.total_trades == 0
        assert curve.stats.starting_balance == 1000.0


def test_history_summary():
    trades = [
        make_trade(status="running", result=0.5),
        make_trade(status="closed", result=-1.0),
        make_trade(status="done", result=2.0),
    ]
    stats = history_summary(trades)
    assert stats.total_trades == 3
    assert stats.winning_trades == 2
    assert stats.losing_trades == 1
    assert stats.total_net_r == pytest.approx(1.5)
