"""
Base configurations and mixins for database models.

Column types are chosen to work on both PostgreSQL (production) and SQLite
(local runs and tests): generic Uuid, and JSON that becomes JSONB on
PostgreSQL.
"""

import uuid

from sqlalchemy import JSON, Column, DateTime, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql.functions import now as db_now

JSONType = JSON().with_variant(JSONB(), "postgresql")

Base = declarative_base()


class CreatedAtMixin:
    """
    Adds a created_at column filled in by the database on insert.

    Cached timelines are immutable, so there is no updated_at counterpart.
    """

    created_at = Column(
        DateTime(timezone=True),
        server_default=db_now(),
        nullable=False,
        comment="Timestamp when the record was created",
    )


class UUIDMixin:
    """Adds a UUID4 primary key generated on the Python side."""

    id = Column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
        index=True,
        comment="Primary key using UUID4 format",
    )


__all__ = ["Base", "CreatedAtMixin", "UUIDMixin", "JSONType"]
