# letter_tracker/services/dashboard_service.py
"""
Response shaping for the tracking dashboard: row badges, timelines, stat cards
"""

from datetime import datetime
from typing import List

from letter_tracker.models.account_letter import LetterStatus
from letter_tracker.schemas.account_letter_schemas import (
    AccountLetterView,
    AccountLetterWithDetails,
    ShipmentStats,
    TimelineEntry,
)
from letter_tracker.schemas.letter_schemas import LetterData, LetterStats
from letter_tracker.services.deadline_service import derive_display_status, format_event_status


def build_timeline(account_letter: AccountLetterWithDetails) -> List[TimelineEntry]:
    """Most recent event first"""
    return [
        TimelineEntry(
            id=event.id,
            status=event.status,
            label=format_event_status(event.status),
            location=event.location,
            occurred_at=event.occurred_at
        )
        for event in reversed(account_letter.tracking_events)
    ]


def build_account_letter_view(account_letter: AccountLetterWithDetails, now: datetime) -> AccountLetterView:
    display = derive_display_status(
        account_letter.status,
        account_letter.mailed_at,
        account_letter.eta,
        account_letter.control_day_count,
        now
    )
    return AccountLetterView(
        **account_letter.model_dump(),
        display=display,
        timeline=build_timeline(account_letter)
    )


def build_shipment_stats(views: List[AccountLetterView]) -> ShipmentStats:
    return ShipmentStats(
        total=len(views),
        in_transit=sum(1 for v in views if v.status == LetterStatus.SHIPPED.value),
        delivered=sum(1 for v in views if v.status == LetterStatus.DELIVERED.value),
        stuck=sum(1 for v in views if v.display.is_stuck),
        overdue=sum(1 for v in views if v.display.deadline.is_overdue)
    )


def build_letter_stats(letters: List[LetterData]) -> LetterStats:
    active = sum(1 for letter in letters if letter.is_active)
    return LetterStats(total=len(letters), active=active, inactive=len(letters) - active)
