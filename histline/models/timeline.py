"""
Timeline model: the cached search result for one normalized query.

Events and images are stored as JSON arrays on the row itself; a timeline is
written once on the first successful search for its query and only read
afterwards.
"""

from sqlalchemy import Column, String, Text
from sqlalchemy.orm import validates

from histline.models.base import Base, CreatedAtMixin, JSONType, UUIDMixin


class Timeline(Base, UUIDMixin, CreatedAtMixin):
    """Cached extract, sorted events and images for a lower-cased query."""

    __tablename__ = "timelines"

    query = Column(
        String,
        unique=True,
        nullable=False,
        index=True,
        comment="Lower-cased search query used as the cache key",
    )

    full_text = Column(
        Text,
        nullable=False,
        comment="Plain-text extract returned by the extract provider",
    )

    timeline_events = Column(
        JSONType,
        nullable=False,
        default=list,
        comment="Events as [{date, summary}], ascending by resolved year",
    )

    images = Column(
        JSONType,
        nullable=False,
        default=list,
        comment="Images as [{src, alt}]",
    )

    @validates("query")
    def validate_query(self, key, value):
        if value is None or not str(value).strip():
            raise ValueError("query cannot be empty or contain only whitespace.")
        if value != value.lower():
            raise ValueError(f"query must be stored lower-cased, got '{value}'.")
        return value

    def __repr__(self):
        return (
            f"<Timeline(id={self.id}, query='{self.query}', "
            f"events={len(self.timeline_events or [])})>"
        )
