# letter_tracker/models/tracking_event.py
"""
Tracking event model (append-only carrier observations)
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from datetime import datetime
from .base import Base

class TrackingEvent(Base):
    __tablename__ = "tracking_events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_letter_id = Column(
        Integer,
        ForeignKey("account_letters.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    status = Column(String(100), nullable=False)
    location = Column(String(255))
    occurred_at = Column(DateTime, default=datetime.now, nullable=False)
