"""
Nagar-Connect - test configuration and fixtures
"""
from typing import AsyncGenerator, Callable

import httpx
import pytest
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from nagar_connect.core.config import Settings, get_settings
from nagar_connect.core.security import CurrentUser, make_token
from nagar_connect.db import mongo
from nagar_connect.main import app
from nagar_connect.models.common import utcnow


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        MONGO_URI="mongodb://localhost:27017",
        MONGO_DB="nagar_connect_test",
        JWT_SECRET="test-jwt-secret-for-testing-only",
        MAPBOX_ACCESS_TOKEN="pk.test-token",
        GEMINI_API_KEY=None,
        CLOUDINARY_CLOUD_NAME="demo",
        CLOUDINARY_API_KEY="123456",
        CLOUDINARY_API_SECRET="cloud-secret",
    )


@pytest.fixture
def db():
    """Fresh in-memory Mongo database per test"""
    return AsyncMongoMockClient()["nagar_connect_test"]


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an httpx client whose requests are answered by `handler`."""

    def _make(handler):
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


async def _insert_user(db, email: str, name: str, user_type: str) -> CurrentUser:
    doc = {
        "_id": ObjectId(),
        "full_name": name,
        "email": email,
        "user_type": user_type,
        "password_hash": "",
        "created_at": utcnow(),
    }
    await db[mongo.USERS].insert_one(doc)
    return CurrentUser(id=str(doc["_id"]), email=email, name=name, role=user_type)


@pytest.fixture
async def citizen(db) -> CurrentUser:
    return await _insert_user(db, "asha.kulkarni@nagar.in", "Asha Kulkarni", "citizen")


@pytest.fixture
async def admin(db) -> CurrentUser:
    return await _insert_user(db, "ops@nagar.in", "Ops Admin", "admin")


@pytest.fixture
def auth_headers(citizen: CurrentUser, settings: Settings) -> dict:
    return {"Authorization": f"Bearer {make_token(citizen, settings)}"}


@pytest.fixture
def admin_headers(admin: CurrentUser, settings: Settings) -> dict:
    return {"Authorization": f"Bearer {make_token(admin, settings)}"}


@pytest.fixture
async def client(settings: Settings, db) -> AsyncGenerator[AsyncClient, None]:
    """App client backed by the mock database; lifespan is not run."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[mongo.get_db] = lambda: db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
