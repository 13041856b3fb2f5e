"""
PlaceShare Backend — ORM Models
=================================

Both models are imported here so the User ↔ Place relationship can be
resolved no matter which model a caller imports first.
"""

from placeshare.models.user import User
from placeshare.models.place import Place

__all__ = ["User", "Place"]
