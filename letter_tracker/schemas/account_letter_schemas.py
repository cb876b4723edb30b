# letter_tracker/schemas/account_letter_schemas.py
"""
Shipment (account letter) schemas
"""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from .commons_schemas import BaseResponse
from .filter_schemas import FilterValues, SortSpec


class TrackingEventData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    account_letter_id: int
    status: str
    location: Optional[str] = None
    occurred_at: datetime


# Read contract handed to the presentation layer
class AccountLetterWithDetails(BaseModel):
    id: int
    account_id: str
    letter_id: int
    address: Optional[str] = None
    mailed_at: Optional[datetime] = None
    eta: Optional[datetime] = None
    status: str
    created_at: datetime
    letter_name: str
    letter_description: Optional[str] = None
    letter_category: Optional[str] = None
    control_id: Optional[str] = None
    control_day_count: Optional[int] = None
    tracking_events: List[TrackingEventData] = Field(default_factory=list)


class DeadlineStatus(BaseModel):
    days_to_violation: Optional[int] = None
    is_overdue: bool = False

    @property
    def is_applicable(self) -> bool:
        return self.days_to_violation is not None


class StatusDisplay(BaseModel):
    status: str
    badge: str  # overdue / on_track / stuck / raw lifecycle status
    label: str
    is_stuck: bool = False
    deadline: DeadlineStatus = Field(default_factory=DeadlineStatus)


class TimelineEntry(BaseModel):
    id: int
    status: str
    label: str
    location: Optional[str] = None
    occurred_at: datetime


class AccountLetterView(AccountLetterWithDetails):
    display: StatusDisplay
    timeline: List[TimelineEntry] = Field(default_factory=list)


class ShipmentStats(BaseModel):
    total: int = 0
    in_transit: int = 0
    delivered: int = 0
    stuck: int = 0
    overdue: int = 0


class AccountLettersResponse(BaseResponse):
    filters: FilterValues
    sort: SortSpec
    stats: ShipmentStats
    letter_names: List[str]
    total_found: int
    account_letters: List[AccountLetterView]


class AccountLetterDetailResponse(BaseResponse):
    account_letter: AccountLetterView
