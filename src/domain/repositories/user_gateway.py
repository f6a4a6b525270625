"""Remote user store protocol, as seen from a client."""

from typing import Protocol

from domain.entities.user import UserProfile


class IUserGateway(Protocol):
    """Client-side view of the user store operations.

    Implementations raise ``UserNotFoundError`` on a lookup miss,
    ``RequestTimeoutError`` when a round-trip times out and
    ``StorageFaultError`` / ``MalformedRequestError`` as reported by the store.
    """

    async def create(self, user: UserProfile) -> str:
        """Create a record and return its userID."""
        ...

    async def get(self, identifier: str) -> UserProfile:
        """Fetch by userID or email."""
        ...

    async def list_all(self) -> list[UserProfile]:
        """Fetch every record."""
        ...

    async def replace(self, user: UserProfile) -> UserProfile:
        """Full-replace update; returns the store's re-read copy."""
        ...

    async def delete(self, user_id: str) -> None:
        """Delete a record."""
        ...

    async def upload_image(self, data: bytes, filename: str, folder: str) -> str:
        """Upload an image and return its public URL."""
        ...
