# letter_tracker/schemas/__init__.py
"""
Schemas package
Only the most shared schemas are exposed here to avoid circular imports
"""

from .commons_schemas import BaseResponse, HealthResponse
from .filter_schemas import FilterValues, SortSpec, parse_sort

# Import the rest from their modules directly
# from .account_letter_schemas import AccountLetterWithDetails, AccountLettersResponse
# from .letter_schemas import LetterData, LettersResponse
