"""
Dataset entries behind the bubble timeline view.

Entries are free-form records (Title, Country, Year, ...) loaded in bulk from
a JSON file; the service never writes them.
"""

from sqlalchemy import Column

from histline.models.base import Base, CreatedAtMixin, JSONType, UUIDMixin


class DatasetEntry(Base, UUIDMixin, CreatedAtMixin):
    __tablename__ = "dataset_entries"

    fields = Column(
        JSONType,
        nullable=False,
        default=dict,
        comment="The record as loaded, e.g. {Title, Country, Year}",
    )

    def __repr__(self):
        return f"<DatasetEntry(id={self.id}, fields={sorted((self.fields or {}).keys())})>"
