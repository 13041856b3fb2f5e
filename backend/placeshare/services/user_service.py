"""
PlaceShare Backend — User Service
===================================

What:  List, create and fetch the users that own places.
Why:   Places need an existing creator; this is the minimal surface for
       managing creators without an authentication layer.
"""

import logging
import uuid
from typing import Any, List

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from placeshare.exceptions import ConflictError, DatabaseError, NotFoundError
from placeshare.models import User
from placeshare.schemas.user import UserCreate, UserResponse
from placeshare.services.place_service import CREATOR_NOT_FOUND, parse_id

logger = logging.getLogger(__name__)

USER_EXISTS = "User exists already."


class UserService:
    """Business logic layer for user operations."""

    async def list_users(self, db: AsyncSession) -> List[UserResponse]:
        try:
            result = await db.execute(select(User).order_by(User.created_at))
            users = list(result.scalars().all())
        except Exception as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again later.",
                context={"original_error": type(e).__name__},
            )
        return [UserResponse.from_model(user) for user in users]

    async def get_user(self, db: AsyncSession, user_id: Any) -> UserResponse:
        uid = parse_id(user_id, "user")
        try:
            result = await db.execute(select(User).where(User.id == uid))
            user = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error fetching user %s: %s", uid, str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve the user. Please try again later.",
                context={"user_id": str(uid), "original_error": type(e).__name__},
            )
        if user is None:
            raise NotFoundError(CREATOR_NOT_FOUND, resource="user", resource_id=str(uid))
        return UserResponse.from_model(user)

    async def create_user(self, db: AsyncSession, data: UserCreate) -> UserResponse:
        """
        Create a user with an empty place collection.

        Raises:
            ConflictError: Email already registered (→ 409)
            DatabaseError: Lookup or write failed (→ 500)
        """
        email = data.email.lower()
        try:
            result = await db.execute(select(User).where(User.email == email))
            existing = result.scalar_one_or_none()
        except Exception as e:
            logger.error("Database error checking email: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the user. Please try again later.",
                context={"original_error": type(e).__name__},
            )
        if existing is not None:
            raise ConflictError(USER_EXISTS, context={"field": "email"})

        user = User(id=uuid.uuid4(), name=data.name, email=email, places=[])
        db.add(user)
        try:
            await db.flush()
            await db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same email
            await db.rollback()
            raise ConflictError(USER_EXISTS, context={"field": "email"})
        except Exception as e:
            await db.rollback()
            logger.error("Failed to create user: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not create the user. Please try again later.",
                context={"original_error": type(e).__name__},
            )

        logger.info("User %s created", user.id)
        return UserResponse.from_model(user)


user_service = UserService()
