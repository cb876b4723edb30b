# letter_tracker/schemas/letter_schemas.py

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from .commons_schemas import BaseResponse


# Letter template row
class LetterData(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    business_unit: Optional[str] = None
    created_by: Optional[str] = None
    control_id: Optional[str] = None
    control_day_count: Optional[int] = None
    is_active: bool
    created_at: datetime


class LetterStats(BaseModel):
    total: int = 0
    active: int = 0
    inactive: int = 0


class LettersResponse(BaseResponse):
    stats: LetterStats
    letters: List[LetterData]


class LetterNamesResponse(BaseResponse):
    letter_names: List[str]
