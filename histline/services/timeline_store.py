"""
Timeline cache stores keyed by normalized (lower-cased) query.

The store only supports lookup and insert. Callers check with get() before
put(); a put() for an existing key raises DuplicateTimelineError instead of
overwriting.
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from histline.db_handlers.timeline import TimelineDBHandler
from histline.exceptions import DuplicateTimelineError
from histline.schemas import TimelineRecordData
from histline.utils.logger import setup_logger

logger = setup_logger("timeline_store")


class TimelineStore(ABC):
    @abstractmethod
    async def get(self, normalized_query: str) -> TimelineRecordData | None:
        """Return the cached timeline for the query, or None."""

    @abstractmethod
    async def put(self, record: TimelineRecordData) -> TimelineRecordData:
        """Insert a new timeline and return it as stored."""


class DatabaseTimelineStore(TimelineStore):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        db_handler: TimelineDBHandler | None = None,
    ):
        self.db_handler = db_handler or TimelineDBHandler(session_factory)

    async def get(self, normalized_query: str) -> TimelineRecordData | None:
        timeline = await self.db_handler.get_by_query(normalized_query)
        if timeline is None:
            return None
        return TimelineRecordData.model_validate(timeline)

    async def put(self, record: TimelineRecordData) -> TimelineRecordData:
        timeline = await self.db_handler.create_timeline(record)
        return TimelineRecordData.model_validate(timeline)


class InMemoryTimelineStore(TimelineStore):
    """Process-local store for development runs and tests."""

    def __init__(self):
        self._records: dict[str, TimelineRecordData] = {}

    async def get(self, normalized_query: str) -> TimelineRecordData | None:
        record = self._records.get(normalized_query)
        return record.model_copy(deep=True) if record else None

    async def put(self, record: TimelineRecordData) -> TimelineRecordData:
        if record.query in self._records:
            raise DuplicateTimelineError(record.query)
        stored = record.model_copy(
            update={"created_at": record.created_at or datetime.now(UTC)}, deep=True
        )
        self._records[record.query] = stored
        logger.debug(f"Cached timeline for '{record.query}' in memory")
        return stored.model_copy(deep=True)

    def __len__(self) -> int:
        return len(self._records)
