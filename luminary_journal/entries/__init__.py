"""
Journal entry model.

Defines the entry and draft types, their wire form, and the
ordering/filtering helpers used by views.
"""

from .filters import DateRange, filter_by_date_range, sort_newest_first
from .types import Category, EntryDraft, JournalEntry

__all__ = [
    "Category",
    "EntryDraft",
    "JournalEntry",
    "DateRange",
    "filter_by_date_range",
    "sort_newest_first",
]
