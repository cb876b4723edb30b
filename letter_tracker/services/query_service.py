# letter_tracker/services/query_service.py
"""
Shipment queries driven by FilterValues

Rows are fetched first (filtered, sorted, joined with letter metadata), then
the tracking events for exactly those rows in one batched lookup.
Database errors are not caught here; callers decide how to surface them.
"""

from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Sequence

from sqlalchemy import and_, case, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from letter_tracker.models import AccountLetter, Letter, TrackingEvent
from letter_tracker.schemas.account_letter_schemas import AccountLetterWithDetails, TrackingEventData
from letter_tracker.schemas.filter_schemas import DEFAULT_SORT_COLUMN, FilterValues, SortSpec
from letter_tracker.schemas.letter_schemas import LetterData
from letter_tracker.services.deadline_service import STATUS_RANK, deadline_sort_key, evaluate_deadline
from letter_tracker.utils.logger import logger

STATUS_RANK_EXPR = case(STATUS_RANK, value=AccountLetter.status, else_=len(STATUS_RANK))

# Allow-list of sortable columns; anything else falls back to mailed_at
SORT_COLUMNS = {
    "mailed_at": AccountLetter.mailed_at,
    "account_id": AccountLetter.account_id,
    "letter_name": Letter.name,
    "status": STATUS_RANK_EXPR,
    "eta": AccountLetter.eta,
    "created_at": AccountLetter.created_at,
}

# Sorted in Python after the fetch, from evaluate_deadline output
DERIVED_SORT_COLUMNS = frozenset({"days_to_violation"})


def _base_select() -> Select:
    return select(
        AccountLetter.id,
        AccountLetter.account_id,
        AccountLetter.letter_id,
        AccountLetter.address,
        AccountLetter.mailed_at,
        AccountLetter.eta,
        AccountLetter.status,
        AccountLetter.created_at,
        Letter.name.label("letter_name"),
        Letter.description.label("letter_description"),
        Letter.category.label("letter_category"),
        Letter.control_id,
        Letter.control_day_count,
    ).join(Letter, AccountLetter.letter_id == Letter.id)


def build_conditions(filters: FilterValues) -> list:
    """AND-ed predicates for the filters that are present"""
    conditions = []
    if filters.account_id:
        conditions.append(AccountLetter.account_id.icontains(filters.account_id, autoescape=True))
    if filters.status:
        conditions.append(AccountLetter.status.in_(filters.status))
    if filters.letter_type:
        conditions.append(Letter.name.in_(filters.letter_type))
    if filters.date_from:
        conditions.append(AccountLetter.mailed_at >= datetime.combine(filters.date_from, time.min))
    if filters.date_to:
        if filters.date_to < date.max:
            # inclusive of the whole "to" day
            upper = datetime.combine(filters.date_to + timedelta(days=1), time.min)
            conditions.append(AccountLetter.mailed_at < upper)
        else:
            # date.max has no next day; only unmailed rows fall outside it
            conditions.append(AccountLetter.mailed_at.is_not(None))
    return conditions


def build_order_by(sort: SortSpec) -> list:
    """asc puts nulls first, desc puts nulls last; ties break on id"""
    expr = SORT_COLUMNS.get(sort.column)
    if expr is None:
        expr = SORT_COLUMNS.get(DEFAULT_SORT_COLUMN, AccountLetter.mailed_at)
    if sort.direction == "asc":
        return [expr.is_(None).desc(), expr.asc(), AccountLetter.id.asc()]
    return [expr.is_(None).asc(), expr.desc(), AccountLetter.id.desc()]


def build_account_letters_query(filters: FilterValues) -> Select:
    sort = filters.sort_spec
    if sort.column in DERIVED_SORT_COLUMNS:
        sort = SortSpec()

    stmt = _base_select()
    conditions = build_conditions(filters)
    if conditions:
        stmt = stmt.where(and_(*conditions))
    return stmt.order_by(*build_order_by(sort))


def sort_by_deadline(
    account_letters: List[AccountLetterWithDetails],
    direction: str,
    today: datetime
) -> List[AccountLetterWithDetails]:
    """Order by days to violation; inapplicable rows always last"""
    keyed = [
        (deadline_sort_key(evaluate_deadline(al.status, al.mailed_at, al.control_day_count, today)), al)
        for al in account_letters
    ]
    applicable = [pair for pair in keyed if pair[0][0] == 0]
    inapplicable = [al for key, al in keyed if key[0] != 0]
    applicable.sort(key=lambda pair: pair[0][1], reverse=direction == "desc")
    return [al for _, al in applicable] + inapplicable


async def fetch_tracking_events(
    session: AsyncSession,
    account_letter_ids: Sequence[int]
) -> Dict[int, List[TrackingEventData]]:
    """Events for the given shipments, grouped by shipment, oldest first"""
    grouped: Dict[int, List[TrackingEventData]] = defaultdict(list)
    if not account_letter_ids:
        return grouped

    query = select(TrackingEvent).where(
        TrackingEvent.account_letter_id.in_(list(account_letter_ids))
    ).order_by(TrackingEvent.occurred_at.asc(), TrackingEvent.id.asc())
    result = await session.execute(query)

    for event in result.scalars().all():
        grouped[event.account_letter_id].append(TrackingEventData.model_validate(event))
    return grouped


async def _attach_events(session: AsyncSession, rows) -> List[AccountLetterWithDetails]:
    events_by_letter = await fetch_tracking_events(session, [row["id"] for row in rows])
    return [
        AccountLetterWithDetails(
            **dict(row),
            tracking_events=events_by_letter.get(row["id"], [])
        )
        for row in rows
    ]


async def get_account_letters_with_tracking(
    session: AsyncSession,
    filters: FilterValues,
    today: Optional[datetime] = None
) -> List[AccountLetterWithDetails]:
    result = await session.execute(build_account_letters_query(filters))
    rows = result.mappings().all()
    if not rows:
        logger.debug(" No shipments matched, skipping tracking lookup")
        return []

    account_letters = await _attach_events(session, rows)

    sort = filters.sort_spec
    if sort.column in DERIVED_SORT_COLUMNS:
        account_letters = sort_by_deadline(account_letters, sort.direction, today or datetime.now())

    logger.debug(f" Shipments fetched: {len(account_letters)} rows")
    return account_letters


async def get_account_letter(
    session: AsyncSession,
    account_letter_id: int
) -> Optional[AccountLetterWithDetails]:
    result = await session.execute(_base_select().where(AccountLetter.id == account_letter_id))
    rows = result.mappings().all()
    if not rows:
        return None
    return (await _attach_events(session, rows))[0]


async def get_letters(session: AsyncSession) -> List[LetterData]:
    query = select(Letter).order_by(Letter.created_at.desc(), Letter.id.desc())
    result = await session.execute(query)
    return [LetterData.model_validate(letter) for letter in result.scalars().all()]


async def get_letter_names(session: AsyncSession) -> List[str]:
    """Distinct letter-type names for the filter popover"""
    query = select(Letter.name).distinct().order_by(Letter.name.asc())
    result = await session.execute(query)
    return list(result.scalars().all())
