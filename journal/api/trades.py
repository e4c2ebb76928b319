"""Trades API: add positions, change their status, running and history views."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, Response, status

from journal.api.deps import get_journal
from journal.schemas.trade import (
    HistoryRead,
    RunningPositionsRead,
    TradeCreate,
    TradeRead,
    TradeStatusUpdate,
    TransitionRead,
)
from journal.services.journal import JournalService
from journal.services.lifecycle import Directive, StatusChange
from journal.services.periods import to_local

router = APIRouter(prefix="/api/trades", tags=["trades"])

TRANSITION_MESSAGES = {
    Directive.UPDATE: "Trade updated",
    Directive.DELETE: "Trade deleted",
    Directive.CONFIRM_DELETE: "Deleting cannot be undone. Resubmit with confirmed=true to delete.",
}


@router.post("", response_model=TradeRead, status_code=201)
def add_position(data: TradeCreate, journal: JournalService = Depends(get_journal)):
    trade = journal.add_position(**data.model_dump())
    return TradeRead.from_trade(trade, journal.get_profile())


@router.get("/running", response_model=RunningPositionsRead)
def running_positions(journal: JournalService = Depends(get_journal)):
    trades, summary = journal.running_positions()
    profile = journal.get_profile()
    return RunningPositionsRead(
        trades=[TradeRead.from_trade(t, profile) for t in trades],
        summary=vars(summary),
    )


@router.get("/history", response_model=HistoryRead)
def trade_history(
    month: int | None = Query(default=None, ge=1, le=12),
    year: int | None = Query(default=None, ge=1970, le=9999),
    limit: int | None = Query(default=None, ge=1),
    offset: int = Query(default=0, ge=0),
    journal: JournalService = Depends(get_journal),
):
    today = to_local(datetime.now(timezone.utc))
    month = month or today.month
    year = year or today.year
    trades, summary = journal.history(month, year, limit=limit, offset=offset)
    profile = journal.get_profile()
    return HistoryRead(
        month=month,
        year=year,
        trades=[TradeRead.from_trade(t, profile) for t in trades],
        summary=vars(summary),
    )


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(trade_id: int, journal: JournalService = Depends(get_journal)):
    return TradeRead.from_trade(journal.get_trade(trade_id), journal.get_profile())


@router.patch("/{trade_id}", response_model=TransitionRead)
def edit_position(
    trade_id: int,
    data: TradeStatusUpdate,
    response: Response,
    journal: JournalService = Depends(get_journal),
):
    transition = journal.edit_position(trade_id, StatusChange(**data.model_dump()))

    trade = None
    if transition.directive is Directive.UPDATE:
        trade = TradeRead.from_trade(transition.trade, journal.get_profile())
    elif transition.directive is Directive.CONFIRM_DELETE:
        response.status_code = status.HTTP_202_ACCEPTED

    return TransitionRead(
        directive=transition.directive.value,
        message=TRANSITION_MESSAGES[transition.directive],
        trade=trade,
    )
