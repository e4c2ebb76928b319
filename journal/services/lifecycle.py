"""Trade lifecycle: opening positions and applying status changes.

Status changes are free-form edits. Any of pending / unfill / running / be
can move to any other, and every state can be closed, cancelled or deleted.
Cancel is a soft terminal state: the row stays in the table but drops out of
every view. Delete removes the row and needs an explicit confirmation.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from enum import Enum

from journal.config import settings
from journal.models.profile import Profile
from journal.models.trade import Trade
from journal.services.errors import ConfigurationError, ValidationError
from journal.services.parsing import is_missing, number_or_zero
from journal.services.periods import as_utc, local_midnight
from journal.utils.constants import COMPLETED_STATUSES, TRADE_STATUSES

logger = logging.getLogger(__name__)


class Directive(str, Enum):
    """What the caller must do with the store after a status change."""

    UPDATE = "update"
    DELETE = "delete"
    CONFIRM_DELETE = "confirm-delete"  # nothing persisted; ask the user again


@dataclass(frozen=True)
class StatusChange:
    status: str
    result: float | str | None = None  # None keeps the recorded R
    img_after: str | None = None
    close_date: date | datetime | None = None
    confirmed: bool = False


@dataclass
class Transition:
    directive: Directive
    trade: Trade
    changes: dict = field(default_factory=dict)


def risk_snapshot(realized_balance: float, risk_percent: float) -> float:
    """USD value of 1R for a trade opened now."""
    return number_or_zero(realized_balance) * (number_or_zero(risk_percent) / 100)


def create_trade(
    owner_id: int,
    pair: str | None,
    op,
    sl=None,
    ft=None,
    img_before: str | None = None,
    img_after: str | None = None,
    *,
    profile: Profile | None,
    realized_balance: float,
    now: datetime | None = None,
) -> Trade:
    """Build a new, unsaved position sized off the current realized balance.

    Malformed numeric text in ``op``, ``sl`` or ``ft`` degrades to 0; only a
    missing ``op`` is rejected.
    """
    symbol = (pair or "").strip().upper()
    if not symbol:
        raise ValidationError("pair is required")
    if is_missing(op):
        raise ValidationError("open price is required")
    if profile is None or not number_or_zero(profile.initial_balance):
        raise ConfigurationError(
            "Set an initial balance in your profile before adding positions."
        )

    trade = Trade(
        owner_id=owner_id,
        pair=symbol,
        op=number_or_zero(op),
        sl=number_or_zero(sl),
        ft=number_or_zero(ft),
        img_before=img_before or None,
        img_after=img_after or None,
        status=settings.default_trade_status,
        result=0.0,
        risk_usd=risk_snapshot(realized_balance, profile.risk_per_trade_percent),
        open_date=as_utc(now) if now else datetime.now(timezone.utc),
        close_date=None,
    )
    logger.info(
        f"New {symbol} position for owner {owner_id}: "
        f"risk ${trade.risk_usd:.2f} on balance ${realized_balance:.2f}"
    )
    return trade


def _explicit_close_date(value: date | datetime | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value).astimezone(timezone.utc)
    return local_midnight(value)


def apply_status_change(
    trade: Trade,
    change: StatusChange,
    now: datetime | None = None,
) -> Transition:
    """Decide the persisted state of ``trade`` after a user edit.

    ``trade`` is left untouched; the returned transition carries a detached
    copy plus the column changes the caller should write.
    """
    if change.status not in TRADE_STATUSES:
        allowed = ", ".join(TRADE_STATUSES)
        raise ValidationError(f"status must be one of: {allowed}")

    if change.status == "delete":
        if not change.confirmed:
            logger.info(f"Delete of trade {trade.id} awaiting confirmation")
            return Transition(Directive.CONFIRM_DELETE, trade)
        return Transition(Directive.DELETE, trade)

    close_date = _explicit_close_date(change.close_date)
    if close_date is None and change.status in COMPLETED_STATUSES:
        close_date = as_utc(now) if now else datetime.now(timezone.utc)

    changes = {
        "status": change.status,
        "close_date": close_date,
    }
    if change.result is not None:
        changes["result"] = number_or_zero(change.result)
    if change.img_after is not None:
        changes["img_after"] = change.img_after or None

    updated = Trade.model_validate({**trade.model_dump(), **changes})
    return Transition(Directive.UPDATE, updated, changes)
