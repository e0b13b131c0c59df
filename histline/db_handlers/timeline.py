from __future__ import annotations

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from histline.db_handlers.base import BaseDBHandler, check_local_db
from histline.exceptions import DuplicateTimelineError
from histline.models.timeline import Timeline
from histline.schemas import TimelineRecordData
from histline.utils.logger import setup_logger

logger = setup_logger("timeline_db_handler")


class TimelineDBHandler(BaseDBHandler[Timeline]):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession] | None = None):
        super().__init__(Timeline, session_factory)

    @check_local_db
    async def get_by_query(
        self, normalized_query: str, *, db: AsyncSession = None
    ) -> Timeline | None:
        return await self.get_by_attributes(query=normalized_query, db=db)

    @check_local_db
    async def create_timeline(
        self, record: TimelineRecordData, *, db: AsyncSession = None
    ) -> Timeline:
        """Insert a new timeline; an existing row for the query is a conflict, never overwritten."""
        obj_dict = record.model_dump(mode="json", exclude={"created_at"})
        try:
            timeline = await self.create(obj_dict, db=db)
        except IntegrityError as e:
            raise DuplicateTimelineError(record.query) from e
        logger.info(
            f"Stored timeline for '{record.query}' with {len(record.timeline_events)} events and {len(record.images)} images"
        )
        return timeline
