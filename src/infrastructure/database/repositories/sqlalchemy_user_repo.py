"""SQLAlchemy implementation of User repository."""

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.user import JoinedEvent, UserProfile
from infrastructure.database.models import UserModel


class SQLAlchemyUserRepository:
    """SQLAlchemy implementation of IUserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: str) -> UserProfile | None:
        """Get a record by primary key."""
        model = await self._session.get(UserModel, user_id, populate_existing=True)
        return self._to_entity(model) if model else None

    async def find_by_email(self, email: str) -> UserProfile | None:
        """Scan for the first record whose email matches exactly."""
        stmt = (
            select(UserModel)
            .where(UserModel.email == email)
            .order_by(UserModel.created_at)
            .limit(1)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def list_all(
        self, limit: int | None = None, offset: int = 0
    ) -> list[UserProfile]:
        """Scan the table, optionally one page at a time."""
        stmt = select(UserModel).order_by(UserModel.user_id)
        if offset:
            stmt = stmt.offset(offset)
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def put(self, user: UserProfile) -> UserProfile:
        """Write a whole record, overwriting any record with the same key."""
        model = await self._session.merge(self._to_model(user))
        await self._session.flush()
        return self._to_entity(model)

    async def replace(self, user: UserProfile) -> bool:
        """Overwrite every tracked field of an existing record."""
        model = await self._session.get(UserModel, user.user_id)
        if not model:
            return False

        model.name = user.name
        model.email = user.email
        model.preferences = dict(user.preferences)
        model.profile_picture_url = user.profile_picture_url
        model.bio = user.bio
        model.location = user.location
        model.website = user.website
        model.joined_events = [e.to_record() for e in user.joined_events]

        await self._session.flush()
        return True

    async def delete(self, user_id: str) -> None:
        """Delete a record; missing keys are ignored."""
        stmt = delete(UserModel).where(UserModel.user_id == user_id)
        await self._session.execute(stmt)
        await self._session.flush()

    def _to_entity(self, model: UserModel) -> UserProfile:
        """Convert ORM model to domain entity, backfilling legacy gaps."""
        return UserProfile(
            user_id=model.user_id,
            name=model.name,
            email=model.email,
            preferences=model.preferences or {},
            profile_picture_url=model.profile_picture_url,
            bio=model.bio,
            location=model.location,
            website=model.website,
            joined_events=[
                JoinedEvent.from_record(doc) for doc in (model.joined_events or [])
            ],
            created_at=model.created_at,
        )

    def _to_model(self, entity: UserProfile) -> UserModel:
        """Convert domain entity to ORM model."""
        return UserModel(
            user_id=entity.user_id,
            name=entity.name,
            email=entity.email,
            preferences=dict(entity.preferences),
            profile_picture_url=entity.profile_picture_url,
            bio=entity.bio,
            location=entity.location,
            website=entity.website,
            joined_events=[e.to_record() for e in entity.joined_events],
            created_at=entity.created_at,
        )
