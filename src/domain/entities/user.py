"""User profile domain entity."""

import time
from copy import deepcopy
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Optional

# Genres the client lets a user pick from.
GENRES: tuple[str, ...] = (
    "rock",
    "pop",
    "jazz",
    "electronic",
    "hip-hop",
    "hiphop",
    "indie",
    "metal",
    "country",
    "reggae",
    "classical",
    "soul",
    "rnb",
)
MAX_GENRES = 3

_EVENT_FIELDS = {
    "event_id": "eventID",
    "name": "name",
    "event_date": "eventDate",
    "event_time": "eventTime",
    "venue_id": "venueID",
    "description": "description",
    "image_url": "imageUrl",
    "joined_at": "joinedAt",
}

_USER_FIELDS = {
    "user_id": "userID",
    "name": "name",
    "email": "email",
    "preferences": "preferences",
    "profile_picture_url": "profilePictureUrl",
    "bio": "bio",
    "location": "location",
    "website": "website",
    "created_at": "createdAt",
}


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


def generate_user_id() -> str:
    """Fallback primary key used when no identity subject is supplied."""
    return f"usr-{time.time_ns() // 1_000_000}"


def coerce_text(value: Any) -> str:
    """Strict string coercion for name/email: missing or empty becomes ''."""
    if value is None or value == "":
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def optional_text(value: Any) -> Optional[str]:
    """Nullable string fields: anything falsy is stored as None."""
    return value if value else None


@dataclass
class JoinedEvent:
    """Snapshot of an event taken when the user joined it.

    Never refreshed from the event itself; edits to the event made after
    joining do not show up here.
    """

    event_id: str
    name: str = ""
    event_date: Optional[str] = None
    event_time: Optional[str] = None
    venue_id: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    joined_at: str = field(default_factory=utc_now_iso)

    def __post_init__(self) -> None:
        # Event and venue ids arrive as numbers from older clients
        self.event_id = str(self.event_id)
        self.name = self.name or ""
        if self.venue_id is not None:
            self.venue_id = str(self.venue_id)

    def to_record(self) -> dict[str, Any]:
        """Wire/document form with camelCase keys."""
        return {key: getattr(self, attr) for attr, key in _EVENT_FIELDS.items()}

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "JoinedEvent":
        values = {
            attr: record[key] for attr, key in _EVENT_FIELDS.items() if key in record
        }
        return cls(**values)


@dataclass
class UserProfile:
    """Domain entity for a user profile record.

    Every tracked field is always present once normalised; ``user_id`` and
    ``created_at`` are the only fields an update never touches.
    """

    user_id: str
    name: str = ""
    email: str = ""
    preferences: dict[str, Any] = field(default_factory=dict)
    profile_picture_url: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    joined_events: list[JoinedEvent] = field(default_factory=list)
    created_at: str = field(default_factory=utc_now_iso)

    def __post_init__(self) -> None:
        self.name = coerce_text(self.name)
        self.email = coerce_text(self.email)
        self.preferences = dict(self.preferences or {})
        self.profile_picture_url = optional_text(self.profile_picture_url)
        self.bio = optional_text(self.bio)
        self.location = optional_text(self.location)
        self.website = optional_text(self.website)
        self.joined_events = list(self.joined_events or [])
        if not self.created_at:
            self.created_at = utc_now_iso()

    def has_joined(self, event_id: Any) -> bool:
        """Whether an event with this id is already in joined_events."""
        key = str(event_id)
        return any(event.event_id == key for event in self.joined_events)

    def with_changes(self, **changes: Any) -> "UserProfile":
        """Return a normalised deep copy with ``changes`` overlaid.

        ``user_id`` and ``created_at`` cannot be overlaid.
        """
        changes.pop("user_id", None)
        changes.pop("created_at", None)
        return replace(deepcopy(self), **changes)

    @classmethod
    def default_for(
        cls,
        user_id: str,
        email: str,
    ) -> "UserProfile":
        """Profile shape used before the store holds any record for a user."""
        return cls(
            user_id=user_id,
            name=email.split("@")[0],
            email=email,
            preferences={
                "genres": [],
                "emailNotifications": True,
                "eventReminders": True,
                "locationSuggestions": True,
            },
        )

    def to_record(self) -> dict[str, Any]:
        """Wire form with camelCase keys, every tracked field present."""
        record = {key: getattr(self, attr) for attr, key in _USER_FIELDS.items()}
        record["preferences"] = deepcopy(self.preferences)
        record["joinedEvents"] = [event.to_record() for event in self.joined_events]
        return record

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> "UserProfile":
        """Build a profile from its wire form, tolerating missing fields."""
        values = {
            attr: record[key] for attr, key in _USER_FIELDS.items() if key in record
        }
        values["joined_events"] = [
            JoinedEvent.from_record(doc) for doc in record.get("joinedEvents") or []
        ]
        return cls(**values)
