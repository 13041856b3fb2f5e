"""
PlaceShare Backend — Place SQLAlchemy Model
=============================================

What:  ORM model representing the `places` table.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from SQLAlchemy's DeclarativeBase; Alembic reads this for migrations.
Who:   Used by PlaceService for CRUD operations and by Alembic for schema management.

Table Design:
    - UUID primary key, assigned on insert
    - lat/lng stored as two floats; the API exposes them as `location`
    - creator_id: FK to users.id, indexed for "places of user" lookups
    - Only title and description change after creation
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from placeshare.database import Base

if TYPE_CHECKING:
    from placeshare.models.user import User


class Place(Base):
    """
    Represents a location record owned by exactly one User.

    Lifecycle:
        1. Created by PlaceService.create_place, appended to its creator's
           collection in the same transaction
        2. title/description updated by PlaceService.update_place
        3. Deleted by PlaceService.delete_place, removed from the creator's
           collection in the same transaction
    """

    __tablename__ = "places"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    address: Mapped[str] = mapped_column(String(512), nullable=False)

    # Reference to an externally stored image, not the image itself
    image: Mapped[str] = mapped_column(String(1024), nullable=False)

    lat: Mapped[float] = mapped_column(Float, nullable=False)
    lng: Mapped[float] = mapped_column(Float, nullable=False)

    creator_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    creator: Mapped["User"] = relationship(back_populates="places")

    def __repr__(self) -> str:
        return f"<Place(id={self.id}, title='{self.title}', creator_id={self.creator_id})>"
