import argparse
import asyncio
import json
from pathlib import Path

from sqlalchemy import func, select, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from histline import models  # noqa: F401
from histline.config import settings
from histline.db_handlers.dataset import DatasetDBHandler
from histline.models.base import Base
from histline.models.timeline import Timeline
from histline.utils.logger import setup_logger

logger = setup_logger("db")


def normalize_database_url(url: str) -> str:
    """Force an async driver for the configured database URL."""
    if url.startswith("postgresql+asyncpg://") or url.startswith("sqlite+aiosqlite://"):
        return url
    if url.startswith("postgresql://"):
        return url.replace("postgresql://", "postgresql+asyncpg://", 1)
    if url.startswith("sqlite://"):
        return url.replace("sqlite://", "sqlite+aiosqlite://", 1)
    raise ValueError(f"Unsupported database URL prefix: {url}")


def build_engine(url: str) -> AsyncEngine:
    url = normalize_database_url(url)
    if url.startswith("postgresql+asyncpg://"):
        return create_async_engine(
            url,
            pool_pre_ping=True,
            pool_size=20,
            max_overflow=30,
            pool_timeout=60,
            pool_recycle=300,
            echo=False,
            connect_args={"timeout": 30},
        )
    return create_async_engine(url, echo=False)


def build_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


settings.app_database_url = normalize_database_url(settings.app_database_url)
logger.debug(f"Application DB URL: {settings.app_database_url}")

app_engine = build_engine(settings.app_database_url)
AppAsyncSessionLocal = build_session_factory(app_engine)


async def init_db(engine: AsyncEngine | None = None):
    """Create the timelines table if it does not exist yet."""
    engine = engine or app_engine
    if not Base.metadata.tables:
        logger.warning("Base.metadata.tables is EMPTY! No tables will be created.")
    else:
        logger.debug(
            f"Tables registered in Base.metadata: {list(Base.metadata.tables.keys())}"
        )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    logger.info("Database schema initialized.")


async def close_db(engine: AsyncEngine | None = None):
    """Closes database connections."""
    logger.info("Closing database connections.")
    await (engine or app_engine).dispose()
    logger.info("Database connections closed.")


async def reset_db(engine: AsyncEngine | None = None):
    """Drop every cached timeline by recreating the tables."""
    engine = engine or app_engine
    logger.warning(
        "Attempting to reset the timeline cache. THIS IS A DESTRUCTIVE OPERATION."
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    logger.info("Timeline cache tables dropped.")
    await init_db(engine)
    logger.info("Timeline cache has been reset and re-initialized.")


async def count_timelines(engine: AsyncEngine | None = None) -> int:
    """Return the number of cached timelines."""
    session_maker = build_session_factory(engine or app_engine)
    async with session_maker() as session:
        result = await session.execute(select(func.count()).select_from(Timeline))
        total = result.scalar_one()
    logger.info(f"Timeline cache holds {total} timelines.")
    return total


async def load_dataset(path: str | Path, engine: AsyncEngine | None = None) -> int:
    """Insert the entries of a JSON array file into the bubble dataset table."""
    records = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(records, list) or not all(isinstance(r, dict) for r in records):
        raise ValueError(f"{path} must contain a JSON array of objects.")

    handler = DatasetDBHandler(build_session_factory(engine or app_engine))
    total = await handler.create_entries(records)
    logger.info(f"Loaded {total} dataset entries from {path}.")
    return total


async def check_db_connection(engine_to_check=None, db_name="Application DB"):
    """Performs a simple query to check actual DB connectivity."""
    engine_to_check = engine_to_check or app_engine
    session_maker = build_session_factory(engine_to_check)
    async with session_maker() as session:
        try:
            result = await session.execute(text("SELECT 1"))
            if result.scalar_one() == 1:
                logger.info(
                    f"Successfully connected to {db_name} and executed a test query."
                )
                return True
            raise RuntimeError(f"Test query to {db_name} returned an unexpected result.")
        except Exception as e:
            logger.error(
                f"Failed to execute test query on {db_name}: {e}", exc_info=True
            )
            raise RuntimeError(
                f"Database connectivity check failed for {db_name}."
            ) from e


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Timeline cache and dataset database utility")
    parser.add_argument(
        "action",
        choices=["init", "reset", "count", "load-dataset"],
        help="'init' to create tables, 'reset' to drop and recreate them, "
        "'count' to show the number of cached timelines, "
        "'load-dataset' to import bubble dataset entries from a JSON file.",
    )
    parser.add_argument(
        "path", nargs="?", help="JSON array file for 'load-dataset'."
    )
    args = parser.parse_args()

    if args.action == "init":
        asyncio.run(init_db())
    elif args.action == "reset":
        confirm = input(
            "WARNING: This will delete every cached timeline and dataset entry. Are you sure? (yes/no): "
        )
        if confirm.lower() == "yes":
            asyncio.run(reset_db())
        else:
            logger.info("Timeline cache reset cancelled by user.")
    elif args.action == "count":
        asyncio.run(count_timelines())
    elif args.action == "load-dataset":
        if not args.path:
            parser.error("load-dataset requires a JSON file path.")
        asyncio.run(load_dataset(args.path))
    logger.info("Database utility script finished.")
