"""Ordering and date-range selection over entry collections.

Storage keeps entries in no particular order; views sort and filter
with these helpers.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime, time, timedelta

from ..exceptions import ValidationError
from .types import JournalEntry

DEFAULT_WINDOW_DAYS = 30


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days (UTC)."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValidationError("end", "must not be before start", self.end.isoformat())

    @classmethod
    def last_days(cls, days: int = DEFAULT_WINDOW_DAYS, today: date | None = None) -> DateRange:
        """Range covering the last ``days`` days up to and including today."""
        today = today or datetime.now(UTC).date()
        return cls(start=today - timedelta(days=days), end=today)

    def bounds(self) -> tuple[datetime, datetime]:
        """Start of the first day and start of the day after the last day."""
        lower = datetime.combine(self.start, time.min, tzinfo=UTC)
        upper = datetime.combine(self.end, time.min, tzinfo=UTC) + timedelta(days=1)
        return lower, upper

    def contains(self, instant: datetime) -> bool:
        lower, upper = self.bounds()
        return lower <= instant <= upper


def sort_newest_first(entries: Iterable[JournalEntry]) -> list[JournalEntry]:
    """Return entries in reverse-chronological order."""
    return sorted(entries, key=lambda entry: entry.timestamp, reverse=True)


def filter_by_date_range(
    entries: Iterable[JournalEntry], date_range: DateRange
) -> list[JournalEntry]:
    """Keep entries whose timestamp falls inside the range, preserving order."""
    return [entry for entry in entries if date_range.contains(entry.timestamp)]
