# letter_tracker/api/account_letters.py
"""
Shipment table and tracking timeline API
"""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from letter_tracker.models import get_async_session
from letter_tracker.schemas.account_letter_schemas import AccountLetterDetailResponse, AccountLettersResponse
from letter_tracker.schemas.filter_schemas import FilterValues
from letter_tracker.services import query_service
from letter_tracker.services.dashboard_service import build_account_letter_view, build_shipment_stats
from letter_tracker.utils.logger import logger

router = APIRouter(tags=["account-letters"])

FETCH_FAILED_DETAIL = "Failed to load shipments from the data store."


@router.get("/account-letters", response_model=AccountLettersResponse)
async def list_account_letters(request: Request, session: AsyncSession = Depends(get_async_session)):
    """Filtered/sorted shipments with tracking events, badges and stat cards"""
    filters = FilterValues.from_query_params(request.query_params)
    now = datetime.now()
    try:
        logger.info(f" Shipment list request: {filters.to_query_params()}")

        account_letters = await query_service.get_account_letters_with_tracking(session, filters, today=now)
        letter_names = await query_service.get_letter_names(session)

        views = [build_account_letter_view(al, now) for al in account_letters]
        logger.info(f" Shipment list loaded: {len(views)} rows")

        return AccountLettersResponse(
            filters=filters,
            sort=filters.sort_spec,
            stats=build_shipment_stats(views),
            letter_names=letter_names,
            total_found=len(views),
            account_letters=views,
            timestamp=now.isoformat()
        )

    except SQLAlchemyError as e:
        logger.error(f" Shipment list query failed: {e}")
        raise HTTPException(status_code=503, detail=FETCH_FAILED_DETAIL)
    except Exception as e:
        logger.error(f" Shipment list failed: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/account-letters/{account_letter_id}", response_model=AccountLetterDetailResponse)
async def get_account_letter(account_letter_id: int, session: AsyncSession = Depends(get_async_session)):
    """One shipment with its tracking timeline"""
    now = datetime.now()
    try:
        account_letter = await query_service.get_account_letter(session, account_letter_id)
        if not account_letter:
            raise HTTPException(status_code=404, detail="Shipment not found.")

        return AccountLetterDetailResponse(
            account_letter=build_account_letter_view(account_letter, now),
            timestamp=now.isoformat()
        )

    except HTTPException:
        raise
    except SQLAlchemyError as e:
        logger.error(f" Shipment lookup failed: id={account_letter_id}, {e}")
        raise HTTPException(status_code=503, detail=FETCH_FAILED_DETAIL)
    except Exception as e:
        logger.error(f" Shipment lookup failed: id={account_letter_id}, {e}")
        raise HTTPException(status_code=500, detail=str(e))
