# letter_tracker/services/deadline_service.py
"""
Shipment status and regulatory deadline evaluation

Two independent lateness signals live here and must not be merged:
- the regulatory control deadline (mailed_at + letter.control_day_count)
- the generic "stuck in transit" badge (plain shipped, N days past ETA)

All functions are pure; "today"/"now" is always passed in.
"""

from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union

from letter_tracker.config import settings
from letter_tracker.models.account_letter import LetterStatus
from letter_tracker.schemas.account_letter_schemas import DeadlineStatus, StatusDisplay

DateLike = Union[date, datetime]

DEADLINE_STATUSES = frozenset({LetterStatus.SHIPPED.value, LetterStatus.EXCEPTION.value})

# Fixed precedence used when sorting by the status column
STATUS_RANK = {
    LetterStatus.EXCEPTION.value: 0,
    LetterStatus.SHIPPED.value: 1,
    LetterStatus.DELIVERED.value: 2,
    LetterStatus.RETURNED.value: 3,
    LetterStatus.NOT_SENT.value: 4,
}

STATUS_LABELS = {
    LetterStatus.NOT_SENT.value: "Not Sent",
    LetterStatus.SHIPPED.value: "Shipped",
    LetterStatus.DELIVERED.value: "Delivered",
    LetterStatus.RETURNED.value: "Returned",
    LetterStatus.EXCEPTION.value: "Exception",
    "stuck": "Stuck",
    "overdue": "Overdue",
    "on_track": "On Track",
}


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _status_value(status) -> str:
    return status.value if isinstance(status, LetterStatus) else str(status)


def evaluate_deadline(
    status,
    mailed_at: Optional[DateLike],
    control_day_count: Optional[int],
    today: DateLike
) -> DeadlineStatus:
    """Days until (or past) the regulatory deadline, compared date-only"""
    if _status_value(status) not in DEADLINE_STATUSES:
        return DeadlineStatus()
    if mailed_at is None or control_day_count is None:
        return DeadlineStatus()

    deadline = _as_date(mailed_at) + timedelta(days=control_day_count)
    diff_days = (deadline - _as_date(today)).days

    return DeadlineStatus(
        days_to_violation=abs(diff_days),
        is_overdue=diff_days < 0
    )


def deadline_sort_key(result: DeadlineStatus) -> Tuple[int, int]:
    """Ascending: most overdue, least overdue, soonest due, latest due, inapplicable"""
    if result.days_to_violation is None:
        return (1, 0)
    signed = -result.days_to_violation if result.is_overdue else result.days_to_violation
    return (0, signed)


def is_stuck_in_transit(
    status,
    eta: Optional[datetime],
    now: datetime,
    control_day_count: Optional[int] = None,
    threshold_days: Optional[int] = None
) -> bool:
    """Plain shipped letter sitting at least threshold_days past its ETA"""
    if _status_value(status) != LetterStatus.SHIPPED.value:
        return False
    if eta is None or control_day_count is not None:
        return False
    if threshold_days is None:
        threshold_days = settings.stuck_in_transit_days
    return now - eta >= timedelta(days=threshold_days)


def derive_display_status(
    status,
    mailed_at: Optional[datetime],
    eta: Optional[datetime],
    control_day_count: Optional[int],
    now: datetime
) -> StatusDisplay:
    """Badge shown for a shipment row"""
    status_value = _status_value(status)
    deadline = evaluate_deadline(status_value, mailed_at, control_day_count, now)
    stuck = is_stuck_in_transit(status_value, eta, now, control_day_count)

    if deadline.is_applicable:
        badge = "overdue" if deadline.is_overdue else "on_track"
    elif stuck:
        badge = "stuck"
    else:
        badge = status_value

    return StatusDisplay(
        status=status_value,
        badge=badge,
        label=STATUS_LABELS.get(badge, format_event_status(badge)),
        is_stuck=stuck,
        deadline=deadline
    )


def format_event_status(status: str) -> str:
    """in_transit -> In Transit"""
    return " ".join(word[:1].upper() + word[1:] for word in status.split("_"))
