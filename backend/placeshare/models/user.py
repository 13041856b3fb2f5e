"""
PlaceShare Backend — User SQLAlchemy Model
============================================

What:  ORM model representing the `users` table.
Why:   A user owns an ordered collection of places; the collection is one
       side of the bidirectional User.places ↔ Place.creator relationship.
Who:   Used by UserService and PlaceService, and by Alembic.

Only the fields the places API needs are mapped here. Credentials and
avatars belong to the authentication layer, which is not part of this
service.
"""

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING, List

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from placeshare.database import Base

if TYPE_CHECKING:
    from placeshare.models.place import Place


class User(Base):
    """
    Represents an account that owns places.

    Invariant:
        Every Place whose creator is this user appears exactly once in
        `places`, and every entry of `places` points back here. Both sides
        are written in the same flush, so they cannot drift apart.
    """

    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # selectin: async sessions cannot lazy-load on attribute access, so the
    # collection always comes back with the user.
    places: Mapped[List["Place"]] = relationship(
        back_populates="creator",
        order_by="Place.created_at",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
