from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

DataT = TypeVar("DataT")


class TimelineEvent(BaseModel):
    date: str = Field(..., description='Event year label, "YYYY" or "YYYY BC"')
    summary: str = Field(..., description="Short plain-language summary")

    @field_validator("date", mode="before")
    @classmethod
    def coerce_numeric_year(cls, v: Any) -> Any:
        """Models sometimes answer with a bare JSON number for the year."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class TimelineImage(BaseModel):
    src: str = Field(..., description="Image URL")
    alt: str = Field(..., description="Descriptive text for the image")


class ExtractResult(BaseModel):
    """Outcome of an extract lookup; missing=True means the topic does not exist."""

    text: str
    missing: bool = False


class ProviderStatus(str, Enum):
    OK = "ok"
    DEGRADED = "degraded"


class ProviderResult(BaseModel, Generic[DataT]):
    """
    Result of a best-effort provider call.

    A degraded result still carries usable (empty) data so the pipeline can
    continue, but records why the provider could not deliver.
    """

    data: DataT
    status: ProviderStatus = ProviderStatus.OK
    reason: str | None = None

    @property
    def is_degraded(self) -> bool:
        return self.status == ProviderStatus.DEGRADED

    @classmethod
    def ok(cls, data: Any) -> "ProviderResult":
        return cls(data=data, status=ProviderStatus.OK)

    @classmethod
    def degraded(cls, data: Any, reason: str) -> "ProviderResult":
        return cls(data=data, status=ProviderStatus.DEGRADED, reason=reason)


class SearchSource(str, Enum):
    CACHE = "cache"
    NOT_FOUND = "not found"
    GENERATED = "wikipedia + gemini"


class YearRange(BaseModel):
    start: int | None = None
    end: int | None = None

    @property
    def is_bounded(self) -> bool:
        return self.start is not None and self.end is not None


class TimelineRecordData(BaseModel):
    """Cached timeline for one normalized query."""

    query: str
    full_text: str
    timeline_events: list[TimelineEvent] = Field(default_factory=list)
    images: list[TimelineImage] = Field(default_factory=list)
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class TimelineSearchResponse(BaseModel):
    extract: str
    timeline_events: list[TimelineEvent] = Field(
        default_factory=list, alias="timelineEvents"
    )
    images: list[TimelineImage] = Field(default_factory=list)
    source: SearchSource

    model_config = ConfigDict(populate_by_name=True)


class MessageResponse(BaseModel):
    message: str = Field(..., description="Response message")
