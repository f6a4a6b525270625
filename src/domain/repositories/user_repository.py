"""User repository protocol."""

from typing import Protocol

from domain.entities.user import UserProfile


class IUserRepository(Protocol):
    """Repository interface over the user profile key-value table."""

    async def get(self, user_id: str) -> UserProfile | None:
        """Get a record by primary key."""
        ...

    async def find_by_email(self, email: str) -> UserProfile | None:
        """Scan for the first record whose email matches exactly."""
        ...

    async def list_all(
        self, limit: int | None = None, offset: int = 0
    ) -> list[UserProfile]:
        """Scan the table, optionally one page at a time."""
        ...

    async def put(self, user: UserProfile) -> UserProfile:
        """Write a whole record, overwriting any record with the same key."""
        ...

    async def replace(self, user: UserProfile) -> bool:
        """Overwrite every tracked field of an existing record.

        Returns False when no record has the key.
        """
        ...

    async def delete(self, user_id: str) -> None:
        """Delete a record; missing keys are ignored."""
        ...
