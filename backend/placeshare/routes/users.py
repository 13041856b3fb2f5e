"""
PlaceShare Backend — Users Route Handlers
===========================================

What:  User listing/creation/lookup and the "places of a user" listing.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from placeshare.database import get_db_session
from placeshare.schemas.common import ErrorResponse
from placeshare.schemas.place import PlaceListEnvelope
from placeshare.schemas.user import UserCreate, UserEnvelope, UserListEnvelope
from placeshare.services.place_service import place_service
from placeshare.services.user_service import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get(
    "",
    response_model=UserListEnvelope,
    responses={500: {"description": "Server error", "model": ErrorResponse}},
    summary="List users",
)
async def list_users(db: AsyncSession = Depends(get_db_session)) -> UserListEnvelope:
    users = await user_service.list_users(db=db)
    return UserListEnvelope(users=users)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=UserEnvelope,
    responses={
        409: {"description": "Email already registered", "model": ErrorResponse},
        422: {"description": "Invalid inputs", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a user",
)
async def create_user(
    body: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserEnvelope:
    user = await user_service.create_user(db=db, data=body)
    return UserEnvelope(user=user)


@router.get(
    "/{uid}",
    response_model=UserEnvelope,
    responses={
        404: {"description": "User not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single user by ID",
)
async def get_user(uid: str, db: AsyncSession = Depends(get_db_session)) -> UserEnvelope:
    user = await user_service.get_user(db=db, user_id=uid)
    return UserEnvelope(user=user)


@router.get(
    "/{uid}/places",
    response_model=PlaceListEnvelope,
    responses={
        404: {"description": "User not found or owns no places", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="List the places owned by a user",
    description=(
        "Returns the user's places in the order they were created. "
        "Answers 404 both when the user does not exist and when the user "
        "owns no places; `details.reason` distinguishes the two."
    ),
)
async def get_places_by_user_id(
    uid: str,
    db: AsyncSession = Depends(get_db_session),
) -> PlaceListEnvelope:
    places = await place_service.list_places_for_user(db=db, user_id=uid)
    return PlaceListEnvelope(places=places)
