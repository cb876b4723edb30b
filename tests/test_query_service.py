"""Query builder tests against an in-memory SQLite database."""

from datetime import date, datetime

import pytest

from letter_tracker.models import Letter
from letter_tracker.schemas.account_letter_schemas import AccountLetterWithDetails
from letter_tracker.schemas.filter_schemas import FilterValues, SortSpec
from letter_tracker.services import query_service
from tests.conftest import add_shipment


def _accounts(rows):
    return [row.account_id for row in rows]


@pytest.mark.asyncio
async def test_status_and_date_range_filter_end_to_end(session, shipments) -> None:
    """Only shipped letters mailed within January, both bounds inclusive."""
    filters = FilterValues(status=["shipped"], date_from=date(2024, 1, 1), date_to=date(2024, 1, 31))

    rows = await query_service.get_account_letters_with_tracking(session, filters)

    assert _accounts(rows) == ["ACC-00002", "ACC-00001"]
    assert set(rows[0].model_dump()) == set(AccountLetterWithDetails.model_fields)
    assert rows[0].letter_name == "Policy Update Notice"
    assert rows[0].control_day_count == 30
    assert rows[0].tracking_events == []
    assert [event.status for event in rows[1].tracking_events] == ["received", "processing"]


@pytest.mark.asyncio
async def test_end_to_end_respects_requested_sort(session, shipments) -> None:
    filters = FilterValues(
        status=["shipped"], date_from=date(2024, 1, 1), date_to=date(2024, 1, 31), sort="mailed_at.asc"
    )

    rows = await query_service.get_account_letters_with_tracking(session, filters)

    assert _accounts(rows) == ["ACC-00001", "ACC-00002"]


@pytest.mark.asyncio
async def test_null_mailed_at_first_ascending_last_descending(session, shipments) -> None:
    ascending = await query_service.get_account_letters_with_tracking(session, FilterValues(sort="mailed_at.asc"))
    descending = await query_service.get_account_letters_with_tracking(session, FilterValues())

    assert _accounts(ascending) == ["ACC-00005", "ACC-00001", "ACC-00003", "ACC-00002", "ACC-00004"]
    assert _accounts(descending) == ["ACC-00004", "ACC-00002", "ACC-00003", "ACC-00001", "ACC-00005"]


@pytest.mark.asyncio
async def test_unknown_sort_column_falls_back_to_mailed_at(session, shipments) -> None:
    bogus = await query_service.get_account_letters_with_tracking(session, FilterValues(sort="bogus.asc"))
    mailed = await query_service.get_account_letters_with_tracking(session, FilterValues(sort="mailed_at.asc"))

    assert _accounts(bogus) == _accounts(mailed)


@pytest.mark.asyncio
async def test_status_sort_uses_fixed_rank(session, shipments) -> None:
    policy = shipments[1]
    letter = await session.get(Letter, policy.letter_id)
    await add_shipment(session, letter, "ACC-00006", "exception", datetime(2024, 1, 20))
    await add_shipment(session, letter, "ACC-00007", "returned", datetime(2024, 1, 21))
    await session.commit()

    rows = await query_service.get_account_letters_with_tracking(session, FilterValues(sort="status.asc"))

    assert [row.status for row in rows] == [
        "exception", "shipped", "shipped", "shipped", "delivered", "returned", "not_sent"
    ]


@pytest.mark.asyncio
async def test_account_id_filter_is_case_insensitive_substring(session, shipments) -> None:
    rows = await query_service.get_account_letters_with_tracking(session, FilterValues(account_id="acc-00003"))
    partial = await query_service.get_account_letters_with_tracking(session, FilterValues(account_id="0000"))
    wildcard = await query_service.get_account_letters_with_tracking(session, FilterValues(account_id="%"))

    assert _accounts(rows) == ["ACC-00003"]
    assert len(partial) == 5
    assert wildcard == []


@pytest.mark.asyncio
async def test_letter_type_filter(session, shipments) -> None:
    rows = await query_service.get_account_letters_with_tracking(
        session, FilterValues(letter_type=["Policy Update Notice"], sort="account_id.asc")
    )

    assert _accounts(rows) == ["ACC-00002", "ACC-00005"]


@pytest.mark.asyncio
async def test_inverted_date_range_matches_nothing(session, shipments) -> None:
    filters = FilterValues(date_from=date(2024, 2, 1), date_to=date(2024, 1, 1))

    assert await query_service.get_account_letters_with_tracking(session, filters) == []


@pytest.mark.asyncio
async def test_empty_result_skips_tracking_lookup(session, shipments, monkeypatch) -> None:
    async def fail_fetch(*args, **kwargs):
        raise AssertionError("tracking events must not be fetched for an empty result")

    monkeypatch.setattr(query_service, "fetch_tracking_events", fail_fetch)

    rows = await query_service.get_account_letters_with_tracking(session, FilterValues(account_id="missing"))

    assert rows == []


@pytest.mark.asyncio
async def test_tracking_events_scoped_to_matched_rows(session, shipments, monkeypatch) -> None:
    requested = []
    original = query_service.fetch_tracking_events

    async def recording_fetch(active_session, ids):
        requested.append(sorted(ids))
        return await original(active_session, ids)

    monkeypatch.setattr(query_service, "fetch_tracking_events", recording_fetch)

    rows = await query_service.get_account_letters_with_tracking(session, FilterValues(status=["delivered"]))

    assert requested == [[shipments[2].id]]
    assert [event.status for event in rows[0].tracking_events] == ["delivered"]


@pytest.mark.asyncio
async def test_days_to_violation_sort(session, shipments) -> None:
    policy = await session.get(Letter, shipments[1].letter_id)
    await add_shipment(session, policy, "ACC-00008", "exception", datetime(2024, 1, 1))
    await session.commit()
    today = datetime(2024, 2, 10)

    ascending = await query_service.get_account_letters_with_tracking(
        session, FilterValues(sort="days_to_violation.asc"), today=today
    )
    descending = await query_service.get_account_letters_with_tracking(
        session, FilterValues(sort="days_to_violation.desc"), today=today
    )

    # ACC-00008 is 10 days overdue, ACC-00002 has 20 days left, the rest have no deadline
    assert _accounts(ascending)[:2] == ["ACC-00008", "ACC-00002"]
    assert _accounts(descending)[:2] == ["ACC-00002", "ACC-00008"]
    assert set(_accounts(ascending)[2:]) == {"ACC-00001", "ACC-00003", "ACC-00004", "ACC-00005"}


@pytest.mark.asyncio
async def test_get_account_letter(session, shipments) -> None:
    found = await query_service.get_account_letter(session, shipments[0].id)
    missing = await query_service.get_account_letter(session, 9999)

    assert found.account_id == "ACC-00001"
    assert [event.status for event in found.tracking_events] == ["received", "processing"]
    assert missing is None


@pytest.mark.asyncio
async def test_letters_catalog_and_names(session, shipments) -> None:
    session.add(Letter(name="Welcome Letter", is_active=False, created_at=datetime(2024, 1, 1)))
    await session.commit()

    letters = await query_service.get_letters(session)
    names = await query_service.get_letter_names(session)

    assert [letter.name for letter in letters] == ["Welcome Letter", "Policy Update Notice", "Welcome Letter"]
    assert names == ["Policy Update Notice", "Welcome Letter"]


@pytest.mark.asyncio
async def test_date_range_bounds_are_inclusive_to_the_second(session, shipments) -> None:
    """from starts at 00:00:00, to runs through 23:59:59; neighbours stay out."""
    letter = await session.get(Letter, shipments[0].letter_id)
    await add_shipment(session, letter, "ACC-10001", "shipped", datetime(2024, 3, 1, 0, 0, 0))
    await add_shipment(session, letter, "ACC-10002", "shipped", datetime(2024, 3, 31, 23, 59, 59))
    await add_shipment(session, letter, "ACC-10003", "shipped", datetime(2024, 2, 29, 23, 59, 59))
    await add_shipment(session, letter, "ACC-10004", "shipped", datetime(2024, 4, 1, 0, 0, 0))
    await session.commit()

    filters = FilterValues.from_query_params({"from": "2024-03-01", "to": "2024-03-31", "sort": "mailed_at.asc"})
    rows = await query_service.get_account_letters_with_tracking(session, filters)

    assert _accounts(rows) == ["ACC-10001", "ACC-10002"]


@pytest.mark.asyncio
async def test_last_representable_to_date_keeps_every_mailed_row(session, shipments) -> None:
    filters = FilterValues.from_query_params({"to": "9999-12-31"})

    assert filters.date_to == date.max
    assert len(query_service.build_conditions(filters)) == 1

    rows = await query_service.get_account_letters_with_tracking(session, filters)

    assert _accounts(rows) == ["ACC-00004", "ACC-00002", "ACC-00003", "ACC-00001"]


def test_build_order_by_falls_back_when_default_column_is_not_sortable(monkeypatch) -> None:
    monkeypatch.setattr(query_service, "DEFAULT_SORT_COLUMN", "not_a_column")

    order_by = query_service.build_order_by(SortSpec(column="bogus", direction="asc"))

    assert len(order_by) == 3
