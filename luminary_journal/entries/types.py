"""
Journal entry types.

An entry is a geo-tagged note with a category and an optional photo.
Entries are immutable once created: replacing a note means creating a
new entry and deleting the old one.

The dictionary form uses camelCase keys because it is shared with the
remote store's wire format and the on-device mirror blob.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from ..exceptions import ValidationError


class Category(Enum):
    """Closed set of entry categories."""

    FOOD = "Food"
    SHOPPING = "Shopping"
    CULTURE = "Culture"
    NATURE = "Nature"
    OTHER = "Other"


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValidationError(key, "missing")
    return data[key]


def _parse_coordinate(data: dict[str, Any], key: str, limit: float) -> float:
    raw = _require(data, key)
    if isinstance(raw, bool):
        raise ValidationError(key, "must be a number", str(raw))
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError(key, "must be a number", str(raw)) from None
    if math.isnan(value) or not -limit <= value <= limit:
        raise ValidationError(key, f"must be within [-{limit:g}, {limit:g}]", str(raw))
    return value


def _parse_timestamp(raw: Any) -> datetime:
    if isinstance(raw, datetime):
        value = raw
    else:
        try:
            value = datetime.fromisoformat(str(raw))
        except ValueError:
            raise ValidationError("timestamp", "not an ISO 8601 instant", str(raw)) from None
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value


def _parse_category(raw: Any) -> Category:
    try:
        return Category(raw)
    except ValueError:
        raise ValidationError("category", "unknown category", str(raw)) from None


def _parse_photo_url(raw: Any) -> str | None:
    if raw is None or isinstance(raw, str):
        return raw
    raise ValidationError("photoUrl", "must be a string or null", str(raw))


def _normalize_timestamp(entry: EntryDraft | JournalEntry) -> None:
    if entry.timestamp.tzinfo is None:
        # Naive instants are UTC
        object.__setattr__(entry, "timestamp", entry.timestamp.replace(tzinfo=UTC))


@dataclass(frozen=True)
class EntryDraft:
    """An entry that has not been assigned an id yet.

    This is the input of a create operation. ``date_display`` is rendered
    by the caller once and stored verbatim.
    """

    latitude: float
    longitude: float
    timestamp: datetime
    date_display: str
    note: str
    category: Category = Category.OTHER
    photo_url: str | None = None

    def __post_init__(self) -> None:
        _normalize_timestamp(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase wire form (without id)."""
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "timestamp": self.timestamp.isoformat(),
            "dateDisplay": self.date_display,
            "note": self.note,
            "category": self.category.value,
            "photoUrl": self.photo_url,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EntryDraft:
        """Deserialize from the camelCase wire form.

        Raises:
            ValidationError: If a field is missing or malformed
        """
        if not isinstance(data, dict):
            raise ValidationError("entry", "must be an object", type(data).__name__)
        return cls(
            latitude=_parse_coordinate(data, "latitude", 90.0),
            longitude=_parse_coordinate(data, "longitude", 180.0),
            timestamp=_parse_timestamp(_require(data, "timestamp")),
            date_display=str(data.get("dateDisplay") or ""),
            note=str(data.get("note") or ""),
            category=_parse_category(data.get("category", Category.OTHER.value)),
            photo_url=_parse_photo_url(data.get("photoUrl")),
        )

    def with_id(self, entry_id: str) -> JournalEntry:
        """Create the stored entry for this draft."""
        return JournalEntry(
            id=entry_id,
            latitude=self.latitude,
            longitude=self.longitude,
            timestamp=self.timestamp,
            date_display=self.date_display,
            note=self.note,
            category=self.category,
            photo_url=self.photo_url,
        )


@dataclass(frozen=True)
class JournalEntry:
    """A stored journal entry.

    Attributes:
        id: Unique within a store. Remote ids are opaque; ids minted on the
            device while offline carry a local-origin prefix.
        latitude: Degrees north, immutable after creation
        longitude: Degrees east, immutable after creation
        timestamp: The instant the entry refers to (timezone-aware)
        date_display: Human-readable rendering of timestamp
        note: Free text
        category: One of Category
        photo_url: Data URL or link to an image, or None
    """

    id: str
    latitude: float
    longitude: float
    timestamp: datetime
    date_display: str
    note: str
    category: Category
    photo_url: str | None = None

    def __post_init__(self) -> None:
        _normalize_timestamp(self)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase wire and mirror form."""
        return {"id": self.id, **self.draft().to_dict()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> JournalEntry:
        """Deserialize from the camelCase wire and mirror form.

        Raises:
            ValidationError: If a field is missing or malformed
        """
        draft = EntryDraft.from_dict(data)
        entry_id = _require(data, "id")
        if entry_id is None or str(entry_id) == "":
            raise ValidationError("id", "must not be empty")
        return draft.with_id(str(entry_id))

    def draft(self) -> EntryDraft:
        """Return the entry's content without its id."""
        return EntryDraft(
            latitude=self.latitude,
            longitude=self.longitude,
            timestamp=self.timestamp,
            date_display=self.date_display,
            note=self.note,
            category=self.category,
            photo_url=self.photo_url,
        )
