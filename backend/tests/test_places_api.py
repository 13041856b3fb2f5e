"""
PlaceShare Backend — Places API Tests
=======================================

What:  End-to-end tests of the HTTP surface against an in-memory SQLite
       database (see conftest.test_client).
Why:   The create/delete consistency rules only show up with a real
       session, real flushes and real rollbacks.

What we test:
    ✅ create → list → delete → list scenario
    ✅ created place appears exactly once in its creator's list
    ✅ unknown creator → 404 and no orphan place row
    ✅ failed create commit → 500 and no orphan place row
    ✅ failed delete commit → 500, place and collection entry both kept
    ✅ update touches title/description only; missing place → 404
    ✅ request validation → 422 with the standard message
    ✅ store failures never leak their cause
    ✅ unexpected errors still carry X-Request-ID
"""

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from placeshare.models import Place
from placeshare.services.place_service import PlaceService


PLACE_BODY = {
    "title": "Empire State Building",
    "description": "One of the most famous sky scrapers in the world!",
    "address": "20 W 34th St, New York, NY 10001",
    "location": {"lat": 40.7484405, "lng": -73.9878584},
}


async def create_user(client, email="ada@example.com"):
    response = await client.post("/api/users", json={"name": "Ada", "email": email})
    assert response.status_code == 201
    return response.json()["user"]["id"]


async def create_place(client, creator, **overrides):
    body = {**PLACE_BODY, "creator": creator, **overrides}
    return await client.post("/api/places", json=body)


async def count_places(db_session) -> int:
    result = await db_session.execute(select(func.count(Place.id)))
    return result.scalar()


class TestPlaceLifecycle:

    @pytest.mark.asyncio
    async def test_create_list_delete_scenario(self, test_client):
        uid = await create_user(test_client)

        created = await create_place(test_client, uid, title="A")
        assert created.status_code == 201
        place = created.json()["place"]
        assert place["creator"] == uid
        assert place["title"] == "A"

        listed = await test_client.get(f"/api/users/{uid}/places")
        assert listed.status_code == 200
        assert [p["title"] for p in listed.json()["places"]] == ["A"]

        deleted = await test_client.delete(f"/api/places/{place['id']}")
        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Deleted place."}

        listed = await test_client.get(f"/api/users/{uid}/places")
        assert listed.status_code == 404
        assert listed.json()["message"] == "Could not find a places for the provided user id."
        assert listed.json()["details"]["reason"] == "no_places"

    @pytest.mark.asyncio
    async def test_created_place_listed_exactly_once(self, test_client):
        uid = await create_user(test_client)
        first = (await create_place(test_client, uid, title="First")).json()["place"]
        second = (await create_place(test_client, uid, title="Second")).json()["place"]

        listed = (await test_client.get(f"/api/users/{uid}/places")).json()["places"]
        ids = [p["id"] for p in listed]
        assert ids == [first["id"], second["id"]]

        user = (await test_client.get(f"/api/users/{uid}")).json()["user"]
        assert user["places"] == ids

    @pytest.mark.asyncio
    async def test_get_place_returns_full_shape(self, test_client):
        uid = await create_user(test_client)
        created = (await create_place(test_client, uid)).json()["place"]

        response = await test_client.get(f"/api/places/{created['id']}")

        assert response.status_code == 200
        place = response.json()["place"]
        assert place == created
        assert set(place) == {"id", "title", "description", "image", "address", "location", "creator"}
        assert place["location"] == {"lat": 40.7484405, "lng": -73.9878584}

    @pytest.mark.asyncio
    async def test_deleted_place_is_gone(self, test_client):
        uid = await create_user(test_client)
        keep = (await create_place(test_client, uid, title="Keep")).json()["place"]
        doomed = (await create_place(test_client, uid, title="Doomed")).json()["place"]

        await test_client.delete(f"/api/places/{doomed['id']}")

        response = await test_client.get(f"/api/places/{doomed['id']}")
        assert response.status_code == 404
        assert response.json()["message"] == "Could not find a place for the provided id."

        listed = (await test_client.get(f"/api/users/{uid}/places")).json()["places"]
        assert [p["id"] for p in listed] == [keep["id"]]

        user = (await test_client.get(f"/api/users/{uid}")).json()["user"]
        assert user["places"] == [keep["id"]]


class TestDeletePlace:

    @pytest.mark.asyncio
    async def test_delete_removes_row_and_collection_entry(self, test_client, db_session):
        uid = await create_user(test_client)
        place = (await create_place(test_client, uid)).json()["place"]

        response = await test_client.delete(f"/api/places/{place['id']}")

        assert response.status_code == 200
        assert await count_places(db_session) == 0
        user = (await test_client.get(f"/api/users/{uid}")).json()["user"]
        assert user["places"] == []

    @pytest.mark.asyncio
    async def test_failed_commit_keeps_place_and_collection(self, test_client, db_session):
        uid = await create_user(test_client)
        place = (await create_place(test_client, uid)).json()["place"]

        with patch.object(
            AsyncSession, "commit", AsyncMock(side_effect=RuntimeError("disk I/O error"))
        ):
            response = await test_client.delete(f"/api/places/{place['id']}")

        assert response.status_code == 500
        assert "disk" not in response.json()["message"]
        assert "details" not in response.json()
        assert await count_places(db_session) == 1

        fetched = await test_client.get(f"/api/places/{place['id']}")
        assert fetched.status_code == 200

        listed = await test_client.get(f"/api/users/{uid}/places")
        assert listed.status_code == 200
        assert [p["id"] for p in listed.json()["places"]] == [place["id"]]

        user = (await test_client.get(f"/api/users/{uid}")).json()["user"]
        assert user["places"] == [place["id"]]


class TestCreatePlace:

    @pytest.mark.asyncio
    async def test_unknown_creator_leaves_no_orphan(self, test_client, db_session):
        response = await create_place(test_client, str(uuid.uuid4()))

        assert response.status_code == 404
        assert response.json()["message"] == "Could not find user for provided id."
        assert await count_places(db_session) == 0

    @pytest.mark.asyncio
    async def test_failed_commit_leaves_no_orphan(self, test_client, db_session):
        uid = await create_user(test_client)

        with patch.object(
            AsyncSession, "commit", AsyncMock(side_effect=RuntimeError("disk I/O error"))
        ):
            response = await create_place(test_client, uid)

        assert response.status_code == 500
        assert "disk" not in response.json()["message"]
        assert "details" not in response.json()
        assert await count_places(db_session) == 0

        listed = await test_client.get(f"/api/users/{uid}/places")
        assert listed.status_code == 404

    @pytest.mark.asyncio
    async def test_invalid_body(self, test_client):
        uid = await create_user(test_client)

        response = await create_place(test_client, uid, title="", description="abc")

        assert response.status_code == 422
        body = response.json()
        assert body["message"] == "Invalid inputs passed, please check your data."
        assert body["error"] == "validation_error"
        assert set(body["details"]) == {"errors"}
        fields = {err["field"] for err in body["details"]["errors"]}
        assert {"title", "description"} <= fields

    @pytest.mark.asyncio
    async def test_out_of_range_location(self, test_client):
        uid = await create_user(test_client)
        response = await create_place(test_client, uid, location={"lat": 123, "lng": 0})
        assert response.status_code == 422


class TestUpdatePlace:

    @pytest.mark.asyncio
    async def test_update_changes_only_title_and_description(self, test_client):
        uid = await create_user(test_client)
        before = (await create_place(test_client, uid)).json()["place"]

        response = await test_client.patch(
            f"/api/places/{before['id']}",
            json={"title": "Chrysler Building", "description": "Art deco landmark"},
        )

        assert response.status_code == 200
        after = response.json()["place"]
        assert after["title"] == "Chrysler Building"
        assert after["description"] == "Art deco landmark"
        for field in ("id", "image", "address", "location", "creator"):
            assert after[field] == before[field]

        fetched = (await test_client.get(f"/api/places/{before['id']}")).json()["place"]
        assert fetched == after

    @pytest.mark.asyncio
    async def test_update_missing_place(self, test_client):
        response = await test_client.patch(
            f"/api/places/{uuid.uuid4()}",
            json={"title": "Anything", "description": "Anything at all"},
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Could not find place for this id."

    @pytest.mark.asyncio
    async def test_update_invalid_body(self, test_client):
        response = await test_client.patch(
            f"/api/places/{uuid.uuid4()}", json={"title": "Ok"}
        )
        assert response.status_code == 422


class TestLookups:

    @pytest.mark.asyncio
    async def test_unknown_user_places(self, test_client):
        response = await test_client.get(f"/api/users/{uuid.uuid4()}/places")
        assert response.status_code == 404
        assert response.json()["details"]["reason"] == "user_not_found"

    @pytest.mark.asyncio
    async def test_malformed_place_id(self, test_client):
        response = await test_client.get("/api/places/p1")
        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "server_error"
        assert "details" not in body

    @pytest.mark.asyncio
    async def test_delete_missing_place(self, test_client):
        response = await test_client.delete(f"/api/places/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["message"] == "Could not find place for this id."

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.get(
            f"/api/places/{uuid.uuid4()}", headers={"X-Request-ID": "trace-123"}
        )
        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json()["request_id"] == "trace-123"

    @pytest.mark.asyncio
    async def test_unexpected_error_keeps_request_id(self, test_client):
        from placeshare.main import app

        # ServerErrorMiddleware re-raises after responding; keep the response
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        with patch.object(
            PlaceService, "get_place", AsyncMock(side_effect=RuntimeError("kaboom"))
        ):
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                response = await client.get(
                    f"/api/places/{uuid.uuid4()}", headers={"X-Request-ID": "trace-500"}
                )

        assert response.status_code == 500
        body = response.json()
        assert body["error"] == "internal_server_error"
        assert "kaboom" not in body["message"]
        assert body["request_id"] == "trace-500"
        assert response.headers["X-Request-ID"] == "trace-500"


class TestUsers:

    @pytest.mark.asyncio
    async def test_duplicate_email(self, test_client):
        await create_user(test_client, email="ada@example.com")
        response = await test_client.post(
            "/api/users", json={"name": "Ada Again", "email": "ADA@example.com"}
        )
        assert response.status_code == 409
        assert response.json()["message"] == "User exists already."

    @pytest.mark.asyncio
    async def test_list_users(self, test_client):
        uid = await create_user(test_client)
        response = await test_client.get("/api/users")
        assert response.status_code == 200
        assert [u["id"] for u in response.json()["users"]] == [uid]


class TestHealth:

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")
        assert response.status_code == 200
        assert response.json()["database"] == "connected"
