"""
PlaceShare Backend — User Request/Response Schemas
====================================================

What:  Pydantic models for the users endpoints.
Why:   Places are owned by users; clients need to create and look up owners.
"""

import uuid
from typing import List

from pydantic import BaseModel, Field

from placeshare.models.user import User


class UserCreate(BaseModel):
    """Body of POST /api/users."""
    name: str = Field(min_length=1, max_length=255)
    email: str = Field(
        min_length=3,
        max_length=255,
        pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$",
        description="Unique email address",
    )

    model_config = {"str_strip_whitespace": True}


class UserResponse(BaseModel):
    """
    What:  Public representation of a user.
    Why:   `places` lists place IDs only; full records come from
           GET /api/users/{uid}/places.
    """
    id: uuid.UUID
    name: str
    email: str
    places: List[uuid.UUID] = Field(default_factory=list, description="IDs of owned places")

    @classmethod
    def from_model(cls, user: User) -> "UserResponse":
        return cls(
            id=user.id,
            name=user.name,
            email=user.email,
            places=[place.id for place in user.places],
        )


class UserEnvelope(BaseModel):
    user: UserResponse


class UserListEnvelope(BaseModel):
    users: List[UserResponse]
