"""Profile cache protocol."""

from typing import Protocol

from domain.entities.user import UserProfile


class IProfileCache(Protocol):
    """Keyed local mirror of user profiles.

    Any successful write replaces the entry for that key; any read miss
    that reaches the store populates it.
    """

    async def get(self, user_id: str) -> UserProfile | None:
        """Return the cached profile, if any."""
        ...

    async def put(self, user: UserProfile) -> None:
        """Store ``user`` under its user_id."""
        ...

    async def invalidate(self, user_id: str) -> None:
        """Drop the entry for ``user_id``."""
        ...
