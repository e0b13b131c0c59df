"""
Exception hierarchy for the timeline search pipeline.

Best-effort providers (event generation, images) never raise these; they
report degradation through ProviderResult instead. Everything here is meant to
reach the caller of TimelineSearchService.search.
"""


class HistlineError(Exception):
    """Base class for all Histline errors."""


class InvalidSearchQueryError(HistlineError, ValueError):
    """The search request is unusable (empty or missing query)."""


class ExtractProviderError(HistlineError):
    """The extract provider could not be reached or answered with garbage."""

    def __init__(self, message: str, query: str | None = None):
        super().__init__(message)
        self.query = query


class DuplicateTimelineError(HistlineError):
    """A timeline record already exists for the normalized query."""

    def __init__(self, query: str):
        super().__init__(f"Timeline for query '{query}' already exists")
        self.query = query


class InvalidDatasetQueryError(HistlineError, ValueError):
    """The dataset request names no field, no topic or an unusable year or pattern."""
