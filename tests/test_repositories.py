from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo.errors import DuplicateKeyError, ServerSelectionTimeoutError

from nagar_connect.core.errors import Conflict, PersistenceError
from nagar_connect.db import mongo
from nagar_connect.models.common import GeoPoint
from nagar_connect.models.department import Department
from nagar_connect.models.issue import Issue
from nagar_connect.repositories.department_repository import DepartmentRepository
from nagar_connect.repositories.issue_repository import IssueRepository
from nagar_connect.repositories.user_repository import UserRepository


def pothole(reporter_id) -> Issue:
    return Issue(
        reporter_id=reporter_id,
        title="Pothole",
        description="Deep pothole at the junction",
        category="Pothole",
        location=GeoPoint(coordinates=[73.85, 18.52]),
        address="FC Road, Pune",
    )


async def test_insert_stamps_timestamps(db):
    repo = IssueRepository(db[mongo.ISSUES])

    saved = await repo.insert(pothole(ObjectId()))

    assert isinstance(saved["_id"], ObjectId)
    assert saved["created_at"] == saved["updated_at"]
    assert "assigned_to" not in saved
    assert await repo.find_by_id(saved["_id"]) is not None


async def test_insert_failure_becomes_persistence_error():
    col = MagicMock()
    col.insert_one = AsyncMock(side_effect=ServerSelectionTimeoutError("no primary available"))

    with pytest.raises(PersistenceError) as exc:
        await IssueRepository(col).insert(pothole(ObjectId()))

    assert "no primary available" in exc.value.message


async def test_duplicate_user_becomes_conflict():
    col = MagicMock()
    col.insert_one = AsyncMock(side_effect=DuplicateKeyError("E11000 duplicate key"))

    with pytest.raises(Conflict):
        await UserRepository(col).insert({"email": "a@nagar.in"})


async def test_get_by_ids_ignores_non_object_ids(db):
    users = UserRepository(db[mongo.USERS])
    doc = await users.insert({"email": "meera@nagar.in", "full_name": "Meera Iyer"})

    found = await users.get_by_ids([doc["_id"], "bogus", None])

    assert found == {str(doc["_id"]): {"id": str(doc["_id"]), "name": "Meera Iyer", "email": "meera@nagar.in"}}
    assert await users.get_by_ids([]) == {}


async def test_department_short_code_is_upper_cased(db):
    repo = DepartmentRepository(db[mongo.DEPARTMENTS])

    doc = await repo.create(Department(name="Sanitation", short_code=" san "))

    assert doc["short_code"] == "SAN"
    assert await repo.names_by_ids([doc["_id"]]) == {str(doc["_id"]): {"id": str(doc["_id"]), "name": "Sanitation"}}
