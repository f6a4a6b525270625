"""Pydantic schemas for the User profile API.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.user import JoinedEvent, UserProfile


class JoinedEventSchema(BaseModel):
    """Event snapshot stored on a user profile."""

    model_config = ConfigDict(populate_by_name=True)

    # Older clients send numeric ids
    event_id: Any = Field(..., alias="eventID")
    name: str | None = None
    event_date: str | None = Field(None, alias="eventDate")
    event_time: str | None = Field(None, alias="eventTime")
    venue_id: Any | None = Field(None, alias="venueID")
    description: str | None = None
    image_url: str | None = Field(None, alias="imageUrl")
    joined_at: str | None = Field(None, alias="joinedAt")

    def to_entity(self) -> JoinedEvent:
        values = self.model_dump(exclude_none=True)
        values.setdefault("name", "")
        return JoinedEvent(**values)


class UserFields(BaseModel):
    """Tracked fields shared by create and update bodies.

    Everything is optional here; missing values are normalised by the
    service, not rejected.
    """

    model_config = ConfigDict(populate_by_name=True)

    # Coerced to strings by the service
    name: Any = None
    email: Any = None
    preferences: dict[str, Any] | None = None
    profile_picture_url: str | None = Field(None, alias="profilePictureUrl")
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    joined_events: list[JoinedEventSchema] | None = Field(None, alias="joinedEvents")

    def joined_event_entities(self) -> list[JoinedEvent]:
        return [event.to_entity() for event in self.joined_events or []]


class UserCreate(UserFields):
    """Schema for creating a user record."""

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "userID": "3f1c2d4e-0000-4a5b-9c8d-123456789abc",
                "name": "sam",
                "email": "sam@example.com",
                "preferences": {
                    "genres": ["rock", "jazz"],
                    "emailNotifications": True,
                    "eventReminders": True,
                    "locationSuggestions": False,
                },
            }
        },
    )

    user_id: str | None = Field(None, alias="userID")
    created_at: str | None = Field(None, alias="createdAt")


class UserUpdate(UserFields):
    """Schema for a full-replace update.

    ``userID`` is only read on the body-addressed route; ``createdAt`` is
    accepted and ignored so clients can send back a record as fetched.
    """

    user_id: str | None = Field(None, alias="userID")
    created_at: str | None = Field(None, alias="createdAt")


class JoinedEventResponse(BaseModel):
    """Joined event as returned by the API."""

    model_config = ConfigDict(populate_by_name=True)

    event_id: str = Field(..., alias="eventID")
    name: str
    event_date: str | None = Field(None, alias="eventDate")
    event_time: str | None = Field(None, alias="eventTime")
    venue_id: str | None = Field(None, alias="venueID")
    description: str | None = None
    image_url: str | None = Field(None, alias="imageUrl")
    joined_at: str = Field(..., alias="joinedAt")


class UserResponse(BaseModel):
    """A stored user record. Every tracked field is always present."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userID")
    name: str
    email: str
    preferences: dict[str, Any]
    profile_picture_url: str | None = Field(None, alias="profilePictureUrl")
    bio: str | None = None
    location: str | None = None
    website: str | None = None
    joined_events: list[JoinedEventResponse] = Field(
        default_factory=list, alias="joinedEvents"
    )
    created_at: str = Field(..., alias="createdAt")

    @classmethod
    def from_entity(cls, user: UserProfile) -> "UserResponse":
        return cls.model_validate(user.to_record())


class CreateUserResponse(BaseModel):
    """Acknowledgement for a created record."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = "User created"
    user_id: str = Field(..., alias="userID")
