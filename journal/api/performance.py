"""Performance API: equity curve and account stats for a period."""

from fastapi import APIRouter, Depends, Query

from journal.api.deps import get_journal
from journal.schemas.trade import PerformanceRead
from journal.services.journal import JournalService

router = APIRouter(prefix="/api/performance", tags=["performance"])


@router.get("", response_model=PerformanceRead)
def performance(
    period: str = "All",
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=1970, le=9999),
    journal: JournalService = Depends(get_journal),
):
    """Equity curve over completed trades, filtered to All / 3M / 1M / Custom."""
    report = journal.performance(period, month, year)
    curve = report.curve
    return PerformanceRead(
        period=curve.period.name,
        period_start=curve.period.start,
        period_end=curve.period.end,
        points=[vars(p) for p in curve.points],
        stats=vars(curve.stats),
        realized_balance=round(report.realized_balance, 2),
        next_trade_risk=round(report.next_trade_risk, 2),
        risk_percent=report.risk_percent,
    )
