"""
PlaceShare Backend — Place Service (Business Logic)
=====================================================

What:  The five place operations: get by id, list by user, create, update, delete.
Why:   Keeps database access and the Place ↔ User consistency rules out of
       the HTTP layer.
How:   Each method performs one or two lookups and, for writes, one
       flush + commit. Failures are translated into PlaceShareError
       subclasses; the global handler renders them.
Who:   Called by routes/places.py and routes/users.py.

Consistency (create/delete):
    A new place is appended to its creator's `places` collection and both
    rows are flushed and committed in the session's single transaction.
    Deleting does the reverse. If anything fails between the first write
    and the commit, the session is rolled back and DatabaseError (500) is
    raised, so neither side is ever persisted alone.

Error mapping:
    lookup/write failure, malformed id → DatabaseError (500, generic message)
    missing record                      → NotFoundError (404)
    body validation                     → handled by FastAPI before we run (422)
"""

import logging
from typing import Any, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from placeshare.config import settings
from placeshare.exceptions import DatabaseError, NotFoundError
from placeshare.models import Place, User
from placeshare.schemas.place import PlaceCreate, PlaceResponse, PlaceUpdate

logger = logging.getLogger(__name__)

PLACE_NOT_FOUND = "Could not find a place for the provided id."
PLACE_NOT_FOUND_FOR_WRITE = "Could not find place for this id."
USER_PLACES_NOT_FOUND = "Could not find a places for the provided user id."
CREATOR_NOT_FOUND = "Could not find user for provided id."


def parse_id(raw: Any, resource: str) -> UUID:
    """
    Convert a path/body identifier into a UUID.

    A malformed identifier can never match a stored record, but it is a
    failure of the lookup itself rather than a confirmed absence, so it is
    reported like any other lookup failure.
    """
    if isinstance(raw, UUID):
        return raw
    try:
        return UUID(str(raw))
    except ValueError:
        logger.warning("Malformed %s id: %r", resource, raw)
        raise DatabaseError(
            message=f"Could not look up the {resource}. Please try again later.",
            context={"reason": "malformed_identifier", "resource": resource},
        )


class PlaceService:
    """
    Business logic layer for place operations.

    Stateless: every method receives the request's AsyncSession.
    """

    async def _fetch_place(
        self, db: AsyncSession, place_id: UUID, *options: Any
    ) -> Optional[Place]:
        try:
            result = await db.execute(
                select(Place).options(*options).where(Place.id == place_id)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching place %s: %s", place_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the place. Please try again later.",
                context={"place_id": str(place_id), "original_error": type(e).__name__},
            )

    async def _fetch_user(self, db: AsyncSession, user_id: UUID) -> Optional[User]:
        try:
            result = await db.execute(
                select(User).options(selectinload(User.places)).where(User.id == user_id)
            )
            return result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the user. Please try again later.",
                context={"user_id": str(user_id), "original_error": type(e).__name__},
            )

    async def _commit(self, db: AsyncSession, action: str, **context: Any) -> None:
        """Flush and commit pending writes; roll back and raise DatabaseError on failure."""
        try:
            # Why flush first: constraint violations surface here, while the
            # session still holds the pending objects for the log line
            await db.flush()
            await db.commit()
        except Exception as e:
            # Discards both halves of the Place/User write together
            await db.rollback()
            logger.error("Failed to %s: %s | %s", action, str(e), context, exc_info=True)
            raise DatabaseError(
                message=f"Could not {action}. Please try again later.",
                context={**context, "original_error": type(e).__name__},
            )

    async def get_place(self, db: AsyncSession, place_id: Any) -> PlaceResponse:
        """
        Retrieve a single place by ID.

        Raises:
            NotFoundError: No place with this ID (→ 404)
            DatabaseError: Lookup failed or ID is malformed (→ 500)
        """
        pid = parse_id(place_id, "place")
        place = await self._fetch_place(db, pid)
        if place is None:
            raise NotFoundError(PLACE_NOT_FOUND, resource="place", resource_id=str(pid))
        return PlaceResponse.from_model(place)

    async def list_places_for_user(
        self, db: AsyncSession, user_id: Any
    ) -> List[PlaceResponse]:
        """
        Retrieve every place owned by a user, in collection order.

        A missing user and a user without places both answer 404 with the
        same message; `details.reason` tells them apart.
        """
        uid = parse_id(user_id, "user")
        user = await self._fetch_user(db, uid)

        if user is None:
            raise NotFoundError(
                USER_PLACES_NOT_FOUND,
                resource="user",
                resource_id=str(uid),
                context={"reason": "user_not_found"},
            )
        if not user.places:
            logger.info("User %s has no places", uid)
            raise NotFoundError(
                USER_PLACES_NOT_FOUND,
                resource="user",
                resource_id=str(uid),
                context={"reason": "no_places"},
            )

        return [PlaceResponse.from_model(place) for place in user.places]

    async def create_place(self, db: AsyncSession, data: PlaceCreate) -> PlaceResponse:
        """
        Create a place and append it to its creator's collection.

        Workflow:
            1. Build the Place with the placeholder image
            2. Resolve the creator (404 if missing)
            3. Append to creator.places, flush and commit in one transaction

        Raises:
            NotFoundError: Creator does not exist (→ 404); nothing is written
            DatabaseError: Lookup or write failed (→ 500); transaction rolled back
        """
        place = Place(
            id=uuid4(),
            title=data.title,
            description=data.description,
            address=data.address,
            lat=data.location.lat,
            lng=data.location.lng,
            image=settings.default_place_image,
            creator_id=data.creator,
        )

        user = await self._fetch_user(db, data.creator)
        if user is None:
            raise NotFoundError(
                CREATOR_NOT_FOUND, resource="user", resource_id=str(data.creator)
            )

        # Both sides of the relationship go into the same flush; the
        # back_populates event keeps place.creator in step with the append
        db.add(place)
        user.places.append(place)
        await self._commit(db, "create the place", user_id=str(user.id))

        logger.info("Place %s created for user %s", place.id, user.id)
        return PlaceResponse.from_model(place)

    async def update_place(
        self, db: AsyncSession, place_id: Any, data: PlaceUpdate
    ) -> PlaceResponse:
        """
        Replace a place's title and description; no other field changes.

        Raises:
            NotFoundError: No place with this ID (→ 404)
            DatabaseError: Lookup or write failed (→ 500)
        """
        pid = parse_id(place_id, "place")
        place = await self._fetch_place(db, pid)
        if place is None:
            raise NotFoundError(PLACE_NOT_FOUND_FOR_WRITE, resource="place", resource_id=str(pid))

        # address, location, image and creator are immutable through this route
        place.title = data.title
        place.description = data.description
        await self._commit(db, "update the place", place_id=str(pid))

        logger.info("Place %s updated", pid)
        return PlaceResponse.from_model(place)

    async def delete_place(self, db: AsyncSession, place_id: Any) -> None:
        """
        Delete a place and remove it from its creator's collection.

        Raises:
            NotFoundError: No place with this ID (→ 404)
            DatabaseError: Lookup or write failed (→ 500); transaction rolled back
        """
        pid = parse_id(place_id, "place")
        # Chain the collection load explicitly. The loader stops the model's
        # lazy="selectin" on User.places at the Place→User→Place cycle, and a
        # lazy load inside an AsyncSession raises MissingGreenlet.
        place = await self._fetch_place(
            db, pid, selectinload(Place.creator).selectinload(User.places)
        )
        if place is None:
            raise NotFoundError(PLACE_NOT_FOUND_FOR_WRITE, resource="place", resource_id=str(pid))

        creator_id = place.creator_id
        try:
            creator = place.creator
            if creator is not None and place in creator.places:
                creator.places.remove(place)
            await db.delete(place)
        except Exception as e:
            await db.rollback()
            logger.error("Failed to delete place %s: %s", pid, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not delete the place. Please try again later.",
                context={"place_id": str(pid), "original_error": type(e).__name__},
            )
        await self._commit(db, "delete the place", place_id=str(pid))

        logger.info("Place %s deleted from user %s", pid, creator_id)


# ── Singleton Instance ────────────────────────────────────────────────────
place_service = PlaceService()
