"""Pytest configuration for the letter tracking test suite."""

import os
from datetime import datetime


def _ensure_test_env() -> None:
    """Point settings at an in-memory database before the app is imported."""
    os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
    os.environ.setdefault("LOG_LEVEL", "WARNING")


_ensure_test_env()

import pytest_asyncio  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from letter_tracker.models import AccountLetter, Base, Letter, TrackingEvent  # noqa: E402


@pytest_asyncio.fixture
async def session_factory():
    """Fresh in-memory schema per test."""
    engine = create_async_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as active_session:
        yield active_session


async def add_shipment(
    session,
    letter,
    account_id,
    status,
    mailed_at=None,
    events=(),
):
    """Insert one shipment (and its events) with eta = mailed_at + 5 days."""
    from letter_tracker.models import compute_eta

    shipment = AccountLetter(
        account_id=account_id,
        letter_id=letter.id,
        address="123 Main St, New York, NY 10001",
        mailed_at=mailed_at,
        eta=compute_eta(mailed_at),
        status=status,
        created_at=mailed_at or datetime(2024, 3, 1),
    )
    session.add(shipment)
    await session.flush()
    for event_status, location, occurred_at in events:
        session.add(TrackingEvent(
            account_letter_id=shipment.id,
            status=event_status,
            location=location,
            occurred_at=occurred_at,
        ))
    await session.flush()
    return shipment


@pytest_asyncio.fixture
async def shipments(session):
    """Five shipments; exactly #1 and #2 are shipped and mailed in January 2024."""
    welcome = Letter(
        name="Welcome Letter",
        description="Initial welcome package for new customers",
        category="Onboarding",
        created_at=datetime(2023, 12, 1),
    )
    policy = Letter(
        name="Policy Update Notice",
        description="Notification about policy changes",
        category="Compliance",
        control_id="CTRL-POL-030",
        control_day_count=30,
        created_at=datetime(2023, 12, 2),
    )
    session.add_all([welcome, policy])
    await session.flush()

    rows = [
        await add_shipment(
            session, welcome, "ACC-00001", "shipped", datetime(2024, 1, 5, 10, 0),
            events=[
                ("processing", "Sort Facility - Dallas, TX", datetime(2024, 1, 6, 9, 0)),
                ("received", "Processing Center - Dallas, TX", datetime(2024, 1, 5, 18, 0)),
            ],
        ),
        await add_shipment(session, policy, "ACC-00002", "shipped", datetime(2024, 1, 31, 18, 30)),
        await add_shipment(
            session, welcome, "ACC-00003", "delivered", datetime(2024, 1, 10, 8, 0),
            events=[("delivered", "Delivered - Mailbox", datetime(2024, 1, 14, 12, 0))],
        ),
        await add_shipment(session, welcome, "ACC-00004", "shipped", datetime(2024, 2, 1, 0, 0)),
        await add_shipment(session, policy, "ACC-00005", "not_sent"),
    ]
    await session.commit()
    return rows
