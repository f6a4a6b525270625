"""User profile store service."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Callable, List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from core.exceptions import StorageFaultError, UserNotFoundError
from domain.entities.user import JoinedEvent, UserProfile, generate_user_id
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class UserService:
    """Create / read / replace / delete for user profile records.

    Writes always carry the whole record. There is no version column, so
    concurrent writers to the same userID race and the last one wins.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    @asynccontextmanager
    async def _unit_of_work(self, operation: str) -> AsyncIterator[IUnitOfWork]:
        """Open a unit of work, reporting store errors as StorageFaultError."""
        try:
            async with self._uow_factory() as uow:
                yield uow
        except SQLAlchemyError as exc:
            logger.error("storage_fault", operation=operation, error=str(exc))
            raise StorageFaultError(operation, str(exc)) from exc

    async def create(
        self,
        *,
        user_id: Optional[str] = None,
        name: Any = None,
        email: Any = None,
        preferences: Optional[dict[str, Any]] = None,
        profile_picture_url: Optional[str] = None,
        bio: Optional[str] = None,
        location: Optional[str] = None,
        website: Optional[str] = None,
        joined_events: Optional[List[JoinedEvent]] = None,
        created_at: Optional[str] = None,
    ) -> str:
        """Write a new record and return its userID.

        An existing record with the same key is overwritten.
        """
        if not user_id:
            user_id = generate_user_id()
            # The key then differs from the identity subject, so later
            # lookups by subject miss this record.
            logger.warning("user_id_generated", user_id=user_id)

        user = UserProfile(
            user_id=user_id,
            name=name,
            email=email,
            preferences=preferences or {},
            profile_picture_url=profile_picture_url,
            bio=bio,
            location=location,
            website=website,
            joined_events=joined_events or [],
            created_at=created_at or "",
        )

        async with self._unit_of_work("create user") as uow:
            await uow.users.put(user)
            await uow.commit()

        logger.info("user_created", user_id=user_id)
        return user_id

    async def get(self, identifier: str) -> UserProfile:
        """Look a user up by userID, falling back to an exact email match.

        Callers sometimes only know the email at call time, so both keys
        are accepted.
        """
        async with self._unit_of_work("retrieve user") as uow:
            user = await uow.users.get(identifier)
            if user:
                return user

            user = await uow.users.find_by_email(identifier)
            if user:
                logger.info("user_lookup_by_email", user_id=user.user_id)
                return user

        raise UserNotFoundError(identifier)

    async def list_all(
        self, limit: Optional[int] = None, offset: int = 0
    ) -> List[UserProfile]:
        """Return every record, or a page of them when limit is given."""
        async with self._unit_of_work("retrieve users") as uow:
            return await uow.users.list_all(limit=limit, offset=offset)

    async def replace(
        self,
        user_id: str,
        *,
        name: Any = None,
        email: Any = None,
        preferences: Optional[dict[str, Any]] = None,
        profile_picture_url: Optional[str] = None,
        bio: Optional[str] = None,
        location: Optional[str] = None,
        website: Optional[str] = None,
        joined_events: Optional[List[JoinedEvent]] = None,
    ) -> UserProfile:
        """Overwrite every tracked field of an existing record.

        Anything not supplied is reset to its empty value, never kept from
        the stored record. userID and createdAt are left alone. Returns the
        record as re-read after the write.
        """
        candidate = UserProfile(
            user_id=user_id,
            name=name,
            email=email,
            preferences=preferences or {},
            profile_picture_url=profile_picture_url,
            bio=bio,
            location=location,
            website=website,
            joined_events=joined_events or [],
        )

        async with self._unit_of_work("update user") as uow:
            replaced = await uow.users.replace(candidate)
            if not replaced:
                raise UserNotFoundError(user_id)
            await uow.commit()

            stored = await uow.users.get(user_id)

        if stored is None:
            # Deleted between the write and the re-read
            raise UserNotFoundError(user_id)

        logger.info(
            "user_updated",
            user_id=user_id,
            joined_events=len(stored.joined_events),
        )
        return stored

    async def delete(self, user_id: str) -> None:
        """Delete a record. Deleting a missing record is not an error."""
        async with self._unit_of_work("delete user") as uow:
            await uow.users.delete(user_id)
            await uow.commit()

        logger.info("user_deleted", user_id=user_id)
