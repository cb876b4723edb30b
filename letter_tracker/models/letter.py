# letter_tracker/models/letter.py
"""
Letter template model (read-only from the tracking service)
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean
from datetime import datetime
from .base import Base

class Letter(Base):
    __tablename__ = "letters"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    category = Column(String(100))
    business_unit = Column(String(100))
    created_by = Column(String(255))
    # Regulatory control window; both null when the letter has no deadline
    control_id = Column(String(100))
    control_day_count = Column(Integer)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.now, nullable=False)
