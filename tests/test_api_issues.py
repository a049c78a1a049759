from unittest.mock import AsyncMock

import pytest
from bson import ObjectId

from nagar_connect.api.deps import get_geocoder
from nagar_connect.core.errors import GeocodeNotFound
from nagar_connect.db import mongo
from nagar_connect.main import app
from nagar_connect.services.geocoding import Coordinates

NEW_ISSUE = {
    "title": "Broken light",
    "description": "Street lamp outside the school has been dark for a week",
    "location": "MG Road, Pune",
    "category": "streetlight",
    "priority": "urgent",
    "attachments": [{"url": "https://res.cloudinary.com/demo/image/upload/v1/lamp.jpg", "id": "lamp", "size": 10}],
}


@pytest.fixture
def geocoder():
    g = AsyncMock()
    g.forward_geocode.return_value = Coordinates(73.8567, 18.5204)
    app.dependency_overrides[get_geocoder] = lambda: g
    return g


async def test_health(client):
    res = await client.get("/health")
    assert res.json() == {"ok": True}


async def test_create_requires_session(client, geocoder, db):
    res = await client.post("/issues", json=NEW_ISSUE)

    assert res.status_code == 401
    assert await db[mongo.ISSUES].count_documents({}) == 0


async def test_create_issue(client, geocoder, auth_headers, citizen, db):
    res = await client.post("/issues", json=NEW_ISSUE, headers=auth_headers)

    assert res.status_code == 201
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "Issue reported successfully"
    assert body["issue"]["title"] == "Broken light"
    assert body["issue"]["status"] == "reported"

    stored = await db[mongo.ISSUES].find_one({"_id": ObjectId(body["issue"]["id"])})
    assert stored["reporter_id"] == ObjectId(citizen.id)
    assert stored["priority"] == "critical"


async def test_create_lists_missing_fields(client, geocoder, auth_headers):
    res = await client.post(
        "/issues",
        json={"description": "Bins overflowing", "location": "detecting..."},
        headers=auth_headers,
    )

    assert res.status_code == 400
    assert res.json() == {
        "success": False,
        "error": "Missing required fields (title, location, category)",
        "missing": ["title", "location", "category"],
    }
    geocoder.forward_geocode.assert_not_awaited()


async def test_create_unknown_address(client, geocoder, auth_headers, db):
    geocoder.forward_geocode.side_effect = GeocodeNotFound()

    res = await client.post("/issues", json=NEW_ISSUE, headers=auth_headers)

    assert res.status_code == 400
    assert res.json()["error"] == "Could not find coordinates for the provided address"
    assert await db[mongo.ISSUES].count_documents({}) == 0


async def test_public_list_and_mine(client, geocoder, auth_headers):
    for _ in range(3):
        await client.post("/issues", json=NEW_ISSUE, headers=auth_headers)

    public = await client.get("/issues", params={"limit": 2, "page": 2})
    assert public.status_code == 200
    assert public.json()["pagination"] == {"total": 3, "page": 2, "limit": 2, "totalPages": 2}
    assert len(public.json()["data"]) == 1

    mine = await client.get("/issues/mine", params={"status": "reported"}, headers=auth_headers)
    assert mine.json()["pagination"]["total"] == 3
    assert mine.json()["data"][0]["reporterId"]["name"] == "Asha Kulkarni"


async def test_mine_requires_session(client):
    res = await client.get("/issues/mine")
    assert res.status_code == 401


async def test_list_rejects_bad_paging(client):
    res = await client.get("/issues", params={"page": 0})

    assert res.status_code == 400
    assert res.json()["success"] is False


async def test_list_rejects_operator_sort_key(client):
    res = await client.get("/issues", params={"sortBy": "$where"})

    assert res.status_code == 400
    assert res.json() == {"success": False, "error": "Invalid sort field"}


async def test_overview(client, geocoder, auth_headers):
    await client.post("/issues", json=NEW_ISSUE, headers=auth_headers)
    await client.post("/issues", json={**NEW_ISSUE, "category": "garbage", "priority": None}, headers=auth_headers)

    res = await client.get("/issues/overview", headers=auth_headers)

    assert res.status_code == 200
    overview = res.json()["overview"]
    assert overview["totals"] == {"all": 2, "reported": 2}
    assert overview["byCategory"] == {"Streetlight": 1, "Garbage": 1}
    assert overview["byPriority"] == {"critical": 1, "medium": 1}
    assert len(overview["recent"]) == 2
