# letter_tracker/schemas/commons_schemas.py
"""
Common schemas shared by several APIs
"""

from pydantic import BaseModel
from typing import Optional

# Base response envelope
class BaseResponse(BaseModel):
    status: str = "success"
    message: Optional[str] = None
    timestamp: Optional[str] = None

class HealthResponse(BaseModel):
    status: str
    database: str
    version: str
