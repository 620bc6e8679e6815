import argparse
import asyncio
import logging

from aula.app.core.config import get_settings
from aula.app.core.logging import setup_logging
from aula.app.db import init_models
from aula.app.db.session import create_engine_from_settings, create_session_factory
from aula.app.services.credentials import ensure_user

logger = logging.getLogger("aula.init_db")


async def main(drop: bool):
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)
    engine = create_engine_from_settings(settings)
    try:
        # --drop wipes every table first - DEV ONLY
        await init_models(engine, drop=drop)
        if settings.DEFAULT_ADMIN_PASSWORD:
            async with create_session_factory(engine)() as db:
                if await ensure_user(db, settings.DEFAULT_ADMIN_USERNAME,
                                     settings.DEFAULT_ADMIN_PASSWORD, rounds=settings.BCRYPT_ROUNDS):
                    logger.info("Created default account %s", settings.DEFAULT_ADMIN_USERNAME)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the Aula database tables")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    args = parser.parse_args()
    asyncio.run(main(args.drop))
