from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from ..shared.models.base import Base
from ..shared.utils.logger import get_logger
from .config import Environment, settings

logger = get_logger(__name__)


def _engine_options(url: str) -> Dict:
    # SQLite (tests, local tooling) does not accept the server pool tuning
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_size": 20,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 3600,
    }


engine = create_async_engine(settings.DATABASE_URL, **_engine_options(settings.DATABASE_URL))

AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def get_db() -> AsyncIterator[AsyncSession]:
    """One session, one transaction: commit on clean exit, rollback on error."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db():
    if settings.ENVIRONMENT == Environment.LOCAL or settings.DATABASE_URL.startswith("sqlite"):
        # Import models so every table is registered on Base.metadata
        from app.domains.audit import models as _audit_models  # noqa: F401
        from app.domains.moderation import models as _moderation_models  # noqa: F401
        from app.domains.reports import models as _report_models  # noqa: F401

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    else:
        logger.info("Skipping auto table creation, schema is managed by migrations")


async def check_connection() -> bool:
    try:
        async with engine.connect():
            return True
    except Exception as e:
        logger.warning(f"Database connection check failed: {e}")
        return False
