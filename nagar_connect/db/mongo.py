from __future__ import annotations

import logging
from functools import lru_cache

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING, GEOSPHERE

from nagar_connect.core.config import get_settings
from nagar_connect.core.errors import Misconfigured

logger = logging.getLogger(__name__)

USERS = "users"
ISSUES = "issues"
DEPARTMENTS = "departments"
CITIZEN_PROFILES = "citizen_profiles"
FIELD_STAFF_PROFILES = "field_staff_profiles"
NGO_PROFILES = "ngo_profiles"


@lru_cache
def get_client() -> AsyncIOMotorClient:
    settings = get_settings()
    if not settings.mongo_uri:
        raise Misconfigured(["MONGO_URI"])
    # motor connects lazily, nothing touches the network here
    return AsyncIOMotorClient(settings.mongo_uri, tz_aware=True)


def get_db() -> AsyncIOMotorDatabase:
    """
    FastAPI dependency that returns the Mongo database instance
    """
    return get_client()[get_settings().mongo_db]


async def ensure_indexes(db) -> None:
    issues = db[ISSUES]
    await issues.create_index([("location", GEOSPHERE)])
    await issues.create_index([("reporter_id", ASCENDING)])
    await issues.create_index([("status", ASCENDING)])
    await issues.create_index([("category", ASCENDING)])
    await issues.create_index([("priority", ASCENDING)])
    await issues.create_index([("assigned_to.department", ASCENDING)])
    await issues.create_index([("created_at", DESCENDING)])

    users = db[USERS]
    await users.create_index([("email", ASCENDING)], unique=True)
    await users.create_index([("phone_number", ASCENDING)], unique=True, sparse=True)

    departments = db[DEPARTMENTS]
    await departments.create_index([("name", ASCENDING)], unique=True)
    await departments.create_index([("short_code", ASCENDING)], unique=True)

    for name in (CITIZEN_PROFILES, FIELD_STAFF_PROFILES, NGO_PROFILES):
        await db[name].create_index([("user_id", ASCENDING)], unique=True)

    logger.info("Mongo indexes ensured on %s", db.name)
