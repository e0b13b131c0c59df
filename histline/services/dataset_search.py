"""
Dataset Search Service - field lookups for the bubble timeline.

A request names a field ("type") and a value ("topic"):
    Year         -> exact numeric match on the leading integer of topic
    other fields -> case-insensitive regular-expression search in string values

Entries lacking the field, or holding a value of the wrong kind, never match.
"""

import re
from abc import ABC, abstractmethod
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from histline.db_handlers.dataset import DatasetDBHandler
from histline.exceptions import InvalidDatasetQueryError
from histline.utils.logger import setup_logger

logger = setup_logger("dataset_search")

YEAR_FIELD = "Year"
LEADING_INTEGER_PATTERN = re.compile(r"\s*([+-]?[0-9]+)")


def parse_year_topic(topic: str) -> int | None:
    """Leading integer of topic ("1945", " 1945 AD" -> 1945), or None."""
    match = LEADING_INTEGER_PATTERN.match(topic)
    return int(match.group(1)) if match else None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class DatasetSource(ABC):
    @abstractmethod
    async def list_entries(self) -> list[dict[str, Any]]:
        """Return every dataset entry."""


class DatabaseDatasetSource(DatasetSource):
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        db_handler: DatasetDBHandler | None = None,
    ):
        self.db_handler = db_handler or DatasetDBHandler(session_factory)

    async def list_entries(self) -> list[dict[str, Any]]:
        return await self.db_handler.list_entries()


class InMemoryDatasetSource(DatasetSource):
    def __init__(self, entries: list[dict[str, Any]] | None = None):
        self._entries = [
            {**entry, "_id": entry.get("_id", str(index))}
            for index, entry in enumerate(entries or [])
        ]

    async def list_entries(self) -> list[dict[str, Any]]:
        return [dict(entry) for entry in self._entries]


class DatasetSearchService:
    def __init__(self, source: DatasetSource):
        self.source = source

    async def search(self, field: str | None, topic: str | None) -> list[dict[str, Any]]:
        if not field or topic is None:
            raise InvalidDatasetQueryError(
                'Query parameters "type" and "topic" are required.'
            )

        if field == YEAR_FIELD:
            year = parse_year_topic(topic)
            if year is None:
                raise InvalidDatasetQueryError("Invalid year")

            def matches(value: Any) -> bool:
                return _is_number(value) and value == year

        else:
            try:
                pattern = re.compile(topic, re.IGNORECASE)
            except re.error as e:
                raise InvalidDatasetQueryError(f"Invalid topic pattern: {e}") from e

            def matches(value: Any) -> bool:
                return isinstance(value, str) and pattern.search(value) is not None

        entries = await self.source.list_entries()
        results = [entry for entry in entries if field in entry and matches(entry[field])]
        logger.info(
            f"Dataset search {field}={topic!r} matched {len(results)} of {len(entries)} entries"
        )
        return results
