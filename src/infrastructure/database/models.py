"""SQLAlchemy ORM models."""

from typing import Any

from sqlalchemy import Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from core.config import settings


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class UserModel(Base):
    """User profile record.

    The table is used as a plain key-value store: one row per userID and
    whole-record writes. Nested data (preferences, joined events) lives in
    JSONB columns rather than child tables.
    """

    __tablename__ = settings.users_table_name

    user_id: Mapped[str] = mapped_column("userID", String(128), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    email: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    preferences: Mapped[dict[str, Any] | None] = mapped_column(JSONB, default=dict)
    profile_picture_url: Mapped[str | None] = mapped_column(Text)
    bio: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str | None] = mapped_column(String(255))
    website: Mapped[str | None] = mapped_column(String(500))
    joined_events: Mapped[list[dict[str, Any]] | None] = mapped_column(
        JSONB, default=list
    )
    created_at: Mapped[str] = mapped_column(String(40), nullable=False)

    __table_args__ = (Index(f"ix_{settings.users_table_name}_email", "email"),)
