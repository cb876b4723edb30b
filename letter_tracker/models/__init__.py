# letter_tracker/models/__init__.py
"""
Models package
SQLAlchemy models and DB connection setup
"""

from .base import Base, AsyncSessionLocal, engine, get_async_session
from .letter import Letter
from .account_letter import AccountLetter, LetterStatus, LETTER_STATUS_VALUES, compute_eta
from .tracking_event import TrackingEvent

__all__ = [
    "Base",
    "AsyncSessionLocal",
    "engine",
    "get_async_session",
    "Letter",
    "AccountLetter",
    "LetterStatus",
    "LETTER_STATUS_VALUES",
    "compute_eta",
    "TrackingEvent"
]
