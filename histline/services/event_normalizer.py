"""
Ordering and range filtering of timeline events by resolved year.
"""

from collections.abc import Iterable
from datetime import date

from histline.schemas import TimelineEvent, YearRange
from histline.utils.year_parser import extract_year


def _sort_key(event: TimelineEvent) -> tuple[int, int]:
    year = extract_year(event.date)
    if year is None:
        return (0, 0)
    return (1, year)


def sort_events(events: Iterable[TimelineEvent]) -> list[TimelineEvent]:
    """Stable ascending sort by year; events without a year come first."""
    return sorted(events, key=_sort_key)


def drop_undated_events(events: Iterable[TimelineEvent]) -> list[TimelineEvent]:
    return [event for event in events if extract_year(event.date) is not None]


def normalize_events(events: Iterable[TimelineEvent]) -> list[TimelineEvent]:
    """Sorted events that all have a year; the shape persisted in the cache."""
    return drop_undated_events(sort_events(events))


def filter_events_by_year(
    events: Iterable[TimelineEvent], start_year: int, end_year: int
) -> list[TimelineEvent]:
    """Events whose year lies in [start_year, end_year]; undated events are excluded."""
    filtered = []
    for event in events:
        year = extract_year(event.date)
        if year is not None and start_year <= year <= end_year:
            filtered.append(event)
    return filtered


def resolve_year_range(
    start_year_input: str | None,
    end_year_input: str | None,
    default_start_year: int = 1900,
    today: date | None = None,
) -> YearRange:
    """
    Turn the raw startYear/endYear request values into a range.

    A lone start runs to the current year, a lone end starts at
    default_start_year, and with neither no filtering happens.
    """
    start_year = extract_year(start_year_input)
    end_year = extract_year(end_year_input)

    if start_year is not None and end_year is None:
        end_year = (today or date.today()).year
    elif start_year is None and end_year is not None:
        start_year = default_start_year

    return YearRange(start=start_year, end=end_year)
