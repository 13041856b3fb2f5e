"""
PlaceShare Backend — Place Request/Response Schemas
=====================================================

What:  Pydantic models defining the places API contract.
Why:   Strict input validation, consistent serialization, and OpenAPI docs.
How:   FastAPI validates request bodies against PlaceCreate/PlaceUpdate and
       serializes responses through PlaceResponse. Validation failures are
       answered with 422 by the handler registered in main.py.

Place JSON shape:
    {id, title, description, image, address, location: {lat, lng}, creator}
"""

import uuid
from typing import List

from pydantic import BaseModel, Field

from placeshare.models.place import Place


# ══════════════════════════════════════════════════════════════════════════
# Request Models — What the client sends
# ══════════════════════════════════════════════════════════════════════════


class Location(BaseModel):
    """Coordinate pair in decimal degrees."""
    lat: float = Field(ge=-90, le=90, description="Latitude")
    lng: float = Field(ge=-180, le=180, description="Longitude")


class PlaceUpdate(BaseModel):
    """
    What:  Body of PATCH /api/places/{pid}.
    Why:   Only title and description are editable after creation.
    """
    title: str = Field(min_length=1, max_length=255, description="Place title")
    description: str = Field(min_length=5, description="At least 5 characters")

    model_config = {"str_strip_whitespace": True}


class PlaceCreate(PlaceUpdate):
    """
    What:  Body of POST /api/places.
    Who:   Sent by the frontend "new place" form.

    The image is not part of the body; every new place starts with the
    configured placeholder (settings.default_place_image).
    """
    address: str = Field(min_length=1, max_length=512, description="Street address")
    location: Location = Field(description="Coordinates of the address")
    creator: uuid.UUID = Field(description="ID of the owning user")


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns
# ══════════════════════════════════════════════════════════════════════════


class PlaceResponse(BaseModel):
    """
    What:  Full representation of a place.
    Who:   Returned (wrapped) by every place endpoint that yields a place.
    """
    id: uuid.UUID = Field(description="Unique place identifier (UUID)")
    title: str
    description: str
    image: str = Field(description="Image reference")
    address: str
    location: Location
    creator: uuid.UUID = Field(description="ID of the owning user")

    @classmethod
    def from_model(cls, place: Place) -> "PlaceResponse":
        """Builds the API shape from an ORM row, folding lat/lng into `location`."""
        return cls(
            id=place.id,
            title=place.title,
            description=place.description,
            image=place.image,
            address=place.address,
            location=Location(lat=place.lat, lng=place.lng),
            creator=place.creator_id,
        )


class PlaceEnvelope(BaseModel):
    """Single-place response: {"place": {...}}."""
    place: PlaceResponse


class PlaceListEnvelope(BaseModel):
    """Places-of-user response: {"places": [...]}."""
    places: List[PlaceResponse]


class MessageResponse(BaseModel):
    """Plain confirmation, e.g. {"message": "Deleted place."}."""
    message: str
