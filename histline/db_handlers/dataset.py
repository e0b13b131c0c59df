from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from histline.db_handlers.base import BaseDBHandler, check_local_db
from histline.models.dataset import DatasetEntry
from histline.utils.logger import setup_logger

logger = setup_logger("dataset_db_handler")


class DatasetDBHandler(BaseDBHandler[DatasetEntry]):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None):
        super().__init__(DatasetEntry, session_factory)

    @check_local_db
    async def list_entries(self, *, db: AsyncSession = None) -> list[dict[str, Any]]:
        """All entries as plain dicts, each with its row id under "_id"."""
        result = await db.execute(select(DatasetEntry).order_by(DatasetEntry.created_at))
        return [
            {**(entry.fields or {}), "_id": str(entry.id)}
            for entry in result.scalars().all()
        ]

    @check_local_db
    async def create_entries(
        self, records: list[dict[str, Any]], *, db: AsyncSession = None
    ) -> int:
        db.add_all([DatasetEntry(fields=record) for record in records])
        await db.flush()
        logger.info(f"Stored {len(records)} dataset entries")
        return len(records)
