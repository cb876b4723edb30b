# letter_tracker/models/account_letter.py
"""
Account letter (shipment) model
"""

import enum
from typing import Optional
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from sqlalchemy import Enum as SQLEnum
from datetime import datetime, timedelta

from .base import Base
from letter_tracker.config import settings


class LetterStatus(str, enum.Enum):
    NOT_SENT = "not_sent"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    RETURNED = "returned"
    # Regulatory breach flag, kept as a terminal status value
    EXCEPTION = "exception"


LETTER_STATUS_VALUES = tuple(status.value for status in LetterStatus)


def compute_eta(mailed_at: Optional[datetime]) -> Optional[datetime]:
    """ETA is always mailed_at plus the fixed carrier offset"""
    if mailed_at is None:
        return None
    return mailed_at + timedelta(days=settings.eta_offset_days)


class AccountLetter(Base):
    __tablename__ = "account_letters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(String(50), nullable=False, index=True)
    letter_id = Column(Integer, ForeignKey("letters.id"), nullable=False)
    address = Column(Text)
    mailed_at = Column(DateTime)
    eta = Column(DateTime)
    status = Column(
        SQLEnum(*LETTER_STATUS_VALUES, name="letter_status"),
        default=LetterStatus.NOT_SENT.value,
        nullable=False
    )
    created_at = Column(DateTime, default=datetime.now, nullable=False)
