"""
PlaceShare Backend — Places Route Handlers
============================================

What:  GET/PATCH/DELETE /api/places/{pid} and POST /api/places.
How:   Extracts the path id and validated body, delegates to PlaceService,
       wraps the result in its response envelope.
Who:   Called by the frontend place pages and "new place" form.

Error responses are produced by the global handlers in main.py; nothing
here catches exceptions.
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from placeshare.database import get_db_session
from placeshare.schemas.common import ErrorResponse
from placeshare.schemas.place import (
    MessageResponse,
    PlaceCreate,
    PlaceEnvelope,
    PlaceUpdate,
)
from placeshare.services.place_service import place_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/places", tags=["Places"])


@router.get(
    "/{pid}",
    response_model=PlaceEnvelope,
    responses={
        404: {"description": "Place not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Get a single place by ID",
)
async def get_place_by_id(
    pid: str,
    db: AsyncSession = Depends(get_db_session),
) -> PlaceEnvelope:
    place = await place_service.get_place(db=db, place_id=pid)
    return PlaceEnvelope(place=place)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=PlaceEnvelope,
    responses={
        404: {"description": "Creator not found", "model": ErrorResponse},
        422: {"description": "Invalid inputs", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Create a place",
    description=(
        "Creates a place owned by `creator` and appends it to that user's "
        "place collection in the same transaction."
    ),
)
async def create_place(
    body: PlaceCreate,
    db: AsyncSession = Depends(get_db_session),
) -> PlaceEnvelope:
    place = await place_service.create_place(db=db, data=body)
    return PlaceEnvelope(place=place)


@router.patch(
    "/{pid}",
    response_model=PlaceEnvelope,
    responses={
        404: {"description": "Place not found", "model": ErrorResponse},
        422: {"description": "Invalid inputs", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Update a place's title and description",
)
async def update_place(
    pid: str,
    body: PlaceUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> PlaceEnvelope:
    place = await place_service.update_place(db=db, place_id=pid, data=body)
    return PlaceEnvelope(place=place)


@router.delete(
    "/{pid}",
    response_model=MessageResponse,
    responses={
        404: {"description": "Place not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Delete a place",
    description="Deletes the place and removes it from its creator's place collection.",
)
async def delete_place(
    pid: str,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await place_service.delete_place(db=db, place_id=pid)
    return MessageResponse(message="Deleted place.")
