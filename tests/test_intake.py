from unittest.mock import AsyncMock

import pytest
from bson import ObjectId

from nagar_connect.core.errors import (
    AddressNotFound,
    FieldTooLong,
    GeocodeFailed,
    GeocodeNotFound,
    GeocodeServiceError,
    InvalidCoordinates,
    MissingFields,
    TooManyAttachments,
    Unauthorized,
)
from nagar_connect.db import mongo
from nagar_connect.repositories.issue_repository import IssueRepository
from nagar_connect.schemas.issue import IssueCreateBody
from nagar_connect.services.geocoding import Coordinates
from nagar_connect.services.intake import IssueIntakePipeline, missing_fields


@pytest.fixture
def geocoder():
    g = AsyncMock()
    g.forward_geocode.return_value = Coordinates(73.8567, 18.5204)
    return g


@pytest.fixture
def pipeline(geocoder, db):
    return IssueIntakePipeline(geocoder, IssueRepository(db[mongo.ISSUES]))


def broken_light(**overrides) -> IssueCreateBody:
    data = {
        "title": "Broken light",
        "description": "Street lamp outside the school has been dark for a week",
        "location": "MG Road, Pune",
        "category": "streetlight",
        "priority": "urgent",
        "attachments": [
            {"url": "https://res.cloudinary.com/demo/image/upload/v1/lamp.jpg", "id": "lamp"},
            {"url": "https://res.cloudinary.com/demo/video/upload/v1/lamp.mp4", "id": "clip"},
            {"id": "no-url"},
        ],
    }
    data.update(overrides)
    return IssueCreateBody(**data)


async def issue_count(db) -> int:
    return await db[mongo.ISSUES].count_documents({})


# =========================
# Happy path
# =========================
async def test_broken_light_creates_one_reported_issue(pipeline, geocoder, citizen, db):
    saved = await pipeline.submit(broken_light(), citizen)

    assert await issue_count(db) == 1
    stored = await db[mongo.ISSUES].find_one({"_id": saved["_id"]})

    assert stored["status"] == "reported"
    assert stored["reporter_id"] == ObjectId(citizen.id)
    assert stored["title"] == "Broken light"
    assert stored["category"] == "Streetlight"
    assert stored["priority"] == "critical"
    assert stored["address"] == "MG Road, Pune"
    assert stored["location"] == {"type": "Point", "coordinates": [73.8567, 18.5204]}
    assert [m["type"] for m in stored["media"]] == ["image", "video"]

    assert len(stored["timeline"]) == 1
    assert stored["timeline"][0]["status"] == "reported"
    assert stored["timeline"][0]["by"] == ObjectId(citizen.id)

    geocoder.forward_geocode.assert_awaited_once_with("MG Road, Pune")


async def test_traffic_lands_in_other_and_priority_defaults(pipeline, citizen, db):
    saved = await pipeline.submit(broken_light(category="traffic", priority=None, attachments=None), citizen)

    assert saved["category"] == "Other"
    assert saved["priority"] == "medium"
    assert saved["media"] == []


async def test_station_road_scenario(pipeline, geocoder, citizen):
    geocoder.forward_geocode.return_value = Coordinates(72.8777, 19.076)
    body = IssueCreateBody(
        title="Broken light",
        description="Lamp post down",
        location="Station Road",
        category="streetlight",
    )

    saved = await pipeline.submit(body, citizen)

    assert saved["category"] == "Streetlight"
    assert saved["priority"] == "medium"
    assert saved["status"] == "reported"
    assert saved["location"]["coordinates"] == [72.8777, 19.076]


# =========================
# Gates
# =========================
async def test_requires_reporter(pipeline, geocoder, db):
    with pytest.raises(Unauthorized):
        await pipeline.submit(broken_light(), None)

    geocoder.forward_geocode.assert_not_awaited()
    assert await issue_count(db) == 0


async def test_missing_fields_are_reported_together(pipeline, geocoder, citizen, db):
    body = IssueCreateBody(description="Overflowing bins", location="  ")

    with pytest.raises(MissingFields) as exc:
        await pipeline.submit(body, citizen)

    assert exc.value.fields == ["title", "location", "category"]
    assert exc.value.to_body()["missing"] == ["title", "location", "category"]
    geocoder.forward_geocode.assert_not_awaited()
    assert await issue_count(db) == 0


def test_location_placeholder_counts_as_missing():
    body = broken_light(location="Detecting...")
    assert missing_fields(body) == ["location"]


async def test_title_too_long(pipeline, citizen, db):
    with pytest.raises(FieldTooLong) as exc:
        await pipeline.submit(broken_light(title="x" * 151), citizen)

    assert exc.value.field == "title"
    assert await issue_count(db) == 0


async def test_description_too_long(pipeline, citizen):
    with pytest.raises(FieldTooLong):
        await pipeline.submit(broken_light(description="y" * 1001), citizen)


async def test_too_many_attachments(pipeline, citizen):
    attachments = [{"url": f"https://cdn.site.in/{i}.jpg"} for i in range(6)]

    with pytest.raises(TooManyAttachments):
        await pipeline.submit(broken_light(attachments=attachments), citizen)


async def test_attachments_without_url_do_not_count_toward_cap(pipeline, citizen, db):
    attachments = [{"url": f"https://cdn.site.in/{i}.jpg"} for i in range(5)] + [{"id": "empty"}]

    saved = await pipeline.submit(broken_light(attachments=attachments), citizen)

    assert len(saved["media"]) == 5
    assert await issue_count(db) == 1


# =========================
# Geocoding outcomes
# =========================
async def test_zero_geocode_results_leave_no_issue(pipeline, geocoder, citizen, db):
    geocoder.forward_geocode.side_effect = GeocodeNotFound()

    with pytest.raises(AddressNotFound):
        await pipeline.submit(broken_light(), citizen)

    assert await issue_count(db) == 0


async def test_geocoder_failure(pipeline, geocoder, citizen, db):
    geocoder.forward_geocode.side_effect = GeocodeServiceError()

    with pytest.raises(GeocodeFailed):
        await pipeline.submit(broken_light(), citizen)

    assert await issue_count(db) == 0


@pytest.mark.parametrize("pair", [(float("nan"), 18.5), (73.8, None), ("73.8", 18.5)])
async def test_non_finite_coordinates(pipeline, geocoder, citizen, db, pair):
    geocoder.forward_geocode.return_value = Coordinates(*pair)

    with pytest.raises(InvalidCoordinates):
        await pipeline.submit(broken_light(), citizen)

    assert await issue_count(db) == 0
