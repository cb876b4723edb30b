# letter_tracker/models/base.py
"""
SQLAlchemy Base and database connection management
"""

from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base
from letter_tracker.config import settings

Base = declarative_base()

engine = create_async_engine(
    settings.sqlalchemy_url,
    echo=settings.debug,
    pool_pre_ping=True,
    pool_recycle=3600
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False
)

async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Yield a session scoped to one request"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()
