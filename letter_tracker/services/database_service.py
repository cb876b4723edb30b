# letter_tracker/services/database_service.py
"""
Database lifecycle service
Async SQLAlchemy engine shared with the models package
"""

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from letter_tracker.models import Base, AsyncSessionLocal, engine
from letter_tracker.utils.logger import logger


class DatabaseService:
    def __init__(self, db_engine: AsyncEngine = engine, session_factory: async_sessionmaker = AsyncSessionLocal):
        self.engine = db_engine
        self.async_session = session_factory
        logger.info(" DatabaseService initialized")

    async def create_tables(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(" Database tables created")

    async def drop_tables(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info(" Database tables dropped")

    async def ping(self) -> bool:
        try:
            async with self.async_session() as session:
                await session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f" Database ping failed: {e}")
            return False

    def session(self) -> AsyncSession:
        return self.async_session()

    async def close(self):
        await self.engine.dispose()
        logger.info("🔌 Database connection closed")

# Global instance
database_service = DatabaseService()
