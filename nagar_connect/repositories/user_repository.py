from __future__ import annotations

from typing import Any, Dict, Iterable, Optional

from bson import ObjectId
from pymongo.errors import DuplicateKeyError, PyMongoError

from nagar_connect.core.errors import Conflict, PersistenceError
from nagar_connect.models.common import utcnow


class UserRepository:
    def __init__(self, col):
        self.col = col

    async def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        return await self.col.find_one({"email": (email or "").lower().strip()})

    async def get_by_phone(self, phone: str) -> Optional[Dict[str, Any]]:
        return await self.col.find_one({"phone_number": phone})

    async def get_by_ids(self, ids: Iterable[ObjectId]) -> Dict[str, Dict[str, Any]]:
        obj_ids = list({i for i in ids if isinstance(i, ObjectId)})
        if not obj_ids:
            return {}

        cursor = self.col.find(
            {"_id": {"$in": obj_ids}},
            {"email": 1, "full_name": 1},
        )

        users = {}
        async for u in cursor:
            users[str(u["_id"])] = {
                "id": str(u["_id"]),
                "name": u.get("full_name"),
                "email": u.get("email"),
            }

        return users

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        now = utcnow()
        document.setdefault("created_at", now)
        document.setdefault("updated_at", now)
        try:
            res = await self.col.insert_one(document)
        except DuplicateKeyError as exc:
            raise Conflict("User with this email or phone number already exists") from exc
        except PyMongoError as exc:
            raise PersistenceError(str(exc)) from exc
        document["_id"] = res.inserted_id
        return document


class ProfileRepository:
    """One role-profile collection (citizen / field staff / ngo), keyed by user_id."""

    def __init__(self, col):
        self.col = col

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        now = utcnow()
        document.setdefault("created_at", now)
        document.setdefault("updated_at", now)
        try:
            res = await self.col.insert_one(document)
        except PyMongoError as exc:
            raise PersistenceError(str(exc)) from exc
        document["_id"] = res.inserted_id
        return document

