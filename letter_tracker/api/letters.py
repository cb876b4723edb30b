# letter_tracker/api/letters.py

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from letter_tracker.models import get_async_session
from letter_tracker.schemas.letter_schemas import LetterNamesResponse, LettersResponse
from letter_tracker.services import query_service
from letter_tracker.services.dashboard_service import build_letter_stats
from letter_tracker.utils.logger import logger

router = APIRouter(tags=["letters"])


@router.get("/letters", response_model=LettersResponse)
async def list_letters(session: AsyncSession = Depends(get_async_session)):
    """Letters library with stat cards"""
    try:
        letters = await query_service.get_letters(session)
        return LettersResponse(stats=build_letter_stats(letters), letters=letters)

    except SQLAlchemyError as e:
        logger.error(f" Letter catalog query failed: {e}")
        raise HTTPException(status_code=503, detail="Failed to load letters from the data store.")


@router.get("/letters/names", response_model=LetterNamesResponse)
async def list_letter_names(session: AsyncSession = Depends(get_async_session)):
    try:
        return LetterNamesResponse(letter_names=await query_service.get_letter_names(session))

    except SQLAlchemyError as e:
        logger.error(f" Letter name query failed: {e}")
        raise HTTPException(status_code=503, detail="Failed to load letters from the data store.")
