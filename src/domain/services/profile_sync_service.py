"""Client-side profile merge helper.

The store's update replaces the whole record, so every edit the UI makes
(details, preferences, picture, join/leave event) is turned into a full
record here before it is sent:

1. take the current snapshot (memory, then cache, then the store, then a
   default built from the identity claims when the store has no record);
2. overlay only the fields the edit touches, on a copy;
3. send every tracked field as an update;
4. if the store has no record yet, retry once as a create;
5. keep what the store returned as the new snapshot and cache it.

Right after signup, setup_profile creates the record outright instead.

There is no version token on the record, so two open sessions editing the
same profile can overwrite each other's changes.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import structlog

from core.exceptions import ProfileValidationError, UserNotFoundError
from domain.entities.user import (
    GENRES,
    MAX_GENRES,
    JoinedEvent,
    UserProfile,
    utc_now_iso,
)
from domain.repositories.profile_cache import IProfileCache
from domain.repositories.user_gateway import IUserGateway

logger = structlog.get_logger()

PROFILE_PICTURE_FOLDER = "users"


class ProfileSyncService:
    """Keeps one caller's profile in step with the store."""

    def __init__(
        self,
        gateway: IUserGateway,
        cache: IProfileCache,
        user_id: str,
        email: str,
        max_upload_bytes: int = 5 * 1024 * 1024,
    ) -> None:
        self._gateway = gateway
        self._cache = cache
        self._user_id = user_id
        self._email = email
        self._max_upload_bytes = max_upload_bytes
        self.snapshot: Optional[UserProfile] = None
        self.pending: Optional[UserProfile] = None
        self.is_default = False

    @property
    def user_id(self) -> str:
        return self._user_id

    # --- reads ---

    async def load(self) -> UserProfile:
        """Return the current snapshot, fetching it on first use."""
        if self.snapshot is not None:
            return self.snapshot

        cached = await self._cache.get(self.user_id)
        if cached is not None:
            self.snapshot = cached
            return cached

        return await self.refresh()

    async def refresh(self) -> UserProfile:
        """Fetch the caller's record from the store, bypassing the cache.

        A missing record is not an error: the caller gets a default profile
        built from their identity claims, which the next save will create.
        """
        try:
            profile = await self._gateway.get(self.user_id)
        except UserNotFoundError:
            logger.info("profile_not_found_using_defaults", user_id=self.user_id)
            self.snapshot = UserProfile.default_for(
                self.user_id, self._email
            )
            self.is_default = True
            return self.snapshot

        await self._accept(profile)
        return profile

    async def recent_activity(self, limit: int = 5) -> list[dict[str, Any]]:
        """Latest joins, newest first, or the sign-up if there are none."""
        profile = await self.load()
        latest = sorted(
            profile.joined_events, key=lambda e: e.joined_at, reverse=True
        )[:limit]

        if not latest:
            return [
                {
                    "type": "joined",
                    "title": "Joined Local Gigs",
                    "time": profile.created_at,
                }
            ]

        return [
            {
                "type": "joined",
                "title": f'Joined "{event.name}"',
                "time": event.joined_at,
                "eventID": event.event_id,
            }
            for event in latest
        ]

    async def export_data(self) -> dict[str, Any]:
        """Profile plus activity, in a form suitable for a download."""
        profile = await self.load()
        return {
            "profile": profile.to_record(),
            "activity": await self.recent_activity(),
            "exportDate": datetime.now(timezone.utc).isoformat(),
        }

    # --- mutation paths ---

    async def setup_profile(
        self,
        name: str,
        genres: list[str],
        email_notifications: bool = True,
        event_reminders: bool = True,
        location_suggestions: bool = True,
    ) -> UserProfile:
        """First write after signup: create the record under the identity subject.

        Create overwrites, so running setup again for an existing account
        resets every field it does not set.
        """
        if not name:
            raise ProfileValidationError("Please enter your name")
        if not genres:
            raise ProfileValidationError("Please select your preferred genre")
        self._check_genres(genres)

        profile = UserProfile(
            user_id=self.user_id,
            name=name,
            email=self._email,
            preferences={
                "genres": list(genres),
                "emailNotifications": email_notifications,
                "eventReminders": event_reminders,
                "locationSuggestions": location_suggestions,
            },
        )
        self.pending = profile
        await self._gateway.create(profile)
        logger.info("profile_setup_complete", user_id=self.user_id)
        await self._accept(profile)
        return profile

    async def update_details(
        self,
        name: Optional[str] = None,
        bio: Optional[str] = None,
        location: Optional[str] = None,
        website: Optional[str] = None,
    ) -> UserProfile:
        """Edit display details; blank inputs keep the current value."""
        current = await self.load()
        changes: dict[str, Any] = {}
        if name:
            changes["name"] = name
        if bio:
            changes["bio"] = bio
        if location:
            changes["location"] = location
        if website:
            changes["website"] = website
        return await self._save(current.with_changes(**changes))

    async def update_preferences(
        self,
        genres: list[str],
        email_notifications: bool,
        event_reminders: bool,
        location_suggestions: bool,
    ) -> UserProfile:
        """Replace the preference mapping."""
        self._check_genres(genres)

        current = await self.load()
        preferences = {
            "genres": list(genres),
            "emailNotifications": email_notifications,
            "eventReminders": event_reminders,
            "locationSuggestions": location_suggestions,
        }
        return await self._save(current.with_changes(preferences=preferences))

    async def set_profile_picture(self, url: str) -> UserProfile:
        """Point the profile at an already uploaded image."""
        current = await self.load()
        return await self._save(current.with_changes(profile_picture_url=url))

    async def upload_profile_picture(self, data: bytes, filename: str) -> UserProfile:
        """Upload an image, then save its URL on the profile."""
        if not data:
            raise ProfileValidationError("Please select an image file")
        if len(data) > self._max_upload_bytes:
            raise ProfileValidationError(
                "Image file must be less than "
                f"{self._max_upload_bytes // (1024 * 1024)}MB",
                details={"size": len(data)},
            )

        url = await self._gateway.upload_image(data, filename, PROFILE_PICTURE_FOLDER)
        logger.info("profile_picture_uploaded", user_id=self.user_id)
        return await self.set_profile_picture(url)

    async def join_event(self, event: JoinedEvent) -> bool:
        """Add an event snapshot. Returns False if it was already joined."""
        current = await self.load()
        if current.has_joined(event.event_id):
            return False

        entry = JoinedEvent(
            event_id=event.event_id,
            name=event.name,
            event_date=event.event_date,
            event_time=event.event_time,
            venue_id=event.venue_id,
            description=event.description,
            image_url=event.image_url,
            joined_at=utc_now_iso(),
        )
        await self._save(
            current.with_changes(joined_events=[*current.joined_events, entry])
        )
        return True

    async def leave_event(self, event_id: Any) -> bool:
        """Remove an event. Returns False if it was not joined."""
        current = await self.load()
        if not current.has_joined(event_id):
            return False

        key = str(event_id)
        remaining = [e for e in current.joined_events if e.event_id != key]
        await self._save(current.with_changes(joined_events=remaining))
        return True

    async def retry_pending(self) -> UserProfile:
        """Resend the last edit that failed to save."""
        if self.pending is None:
            raise ValueError("No unsaved profile changes to retry")
        return await self._save(self.pending)

    async def delete_account(self) -> None:
        """Delete the caller's record and forget every local copy."""
        await self._gateway.delete(self.user_id)
        await self._cache.invalidate(self.user_id)
        self.snapshot = None
        self.pending = None
        logger.info("account_deleted", user_id=self.user_id)

    # --- internals ---

    @staticmethod
    def _check_genres(genres: list[str]) -> None:
        unknown = sorted(set(genres) - set(GENRES))
        if unknown:
            raise ProfileValidationError(
                f"Unknown genres: {', '.join(unknown)}",
                details={"genres": unknown},
            )
        if len(genres) > MAX_GENRES:
            raise ProfileValidationError(
                f"Select at most {MAX_GENRES} genres",
                details={"max_genres": MAX_GENRES},
            )

    async def _save(self, draft: UserProfile) -> UserProfile:
        """Send a full record, falling back to create when none exists."""
        self.pending = draft
        try:
            stored = await self._gateway.replace(draft)
        except UserNotFoundError:
            logger.info("profile_update_missing_record_creating", user_id=draft.user_id)
            await self._gateway.create(draft)
            stored = draft

        await self._accept(stored)
        return stored

    async def _accept(self, profile: UserProfile) -> None:
        self.snapshot = profile
        self.pending = None
        self.is_default = False
        await self._cache.put(profile)
