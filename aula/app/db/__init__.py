import logging

from sqlalchemy.ext.asyncio import AsyncEngine

from aula.app.db.base import Base

logger = logging.getLogger(__name__)


async def init_models(engine: AsyncEngine, drop: bool = False) -> None:
    # Import models so Base.metadata knows every table
    from aula.app.models import student, user  # noqa: F401

    try:
        async with engine.begin() as conn:
            if drop:
                await conn.run_sync(Base.metadata.drop_all)
            await conn.run_sync(Base.metadata.create_all)
        logger.info("Database tables ready")
    except Exception:
        logger.exception("Could not create database tables")
        raise
