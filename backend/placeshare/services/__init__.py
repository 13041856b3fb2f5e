# Services package init
"""
PlaceShare Backend — Services Layer
=====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Routes handle HTTP; services handle lookups, writes and error mapping.

Service Inventory:
    - PlaceService: get/list/create/update/delete places, keeping each
      creator's place collection in step with the places table
    - UserService: list/create/get the users that own places
"""
