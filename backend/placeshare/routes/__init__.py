# Routes package init
"""
PlaceShare Backend — API Routes Package
=========================================

Route Inventory:
    - places.py:  GET    /api/places/{pid}
                  POST   /api/places
                  PATCH  /api/places/{pid}
                  DELETE /api/places/{pid}
    - users.py:   GET    /api/users
                  POST   /api/users
                  GET    /api/users/{uid}
                  GET    /api/users/{uid}/places
    - health.py:  GET    /health

Design Principle:
    Routes are THIN: extract path/body, call a service, wrap the result
    in its response envelope with the right status code.
"""
