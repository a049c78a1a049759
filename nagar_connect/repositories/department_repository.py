from __future__ import annotations

from typing import Any, Dict, Iterable, List

from bson import ObjectId
from pymongo.errors import DuplicateKeyError

from nagar_connect.core.errors import Conflict
from nagar_connect.models.common import utcnow
from nagar_connect.models.department import Department


class DepartmentRepository:
    def __init__(self, col):
        self.col = col

    async def create(self, department: Department) -> Dict[str, Any]:
        now = utcnow()
        doc = department.model_dump(mode="python", by_alias=True, exclude_none=True)
        doc.setdefault("created_at", now)
        doc.setdefault("updated_at", now)
        try:
            res = await self.col.insert_one(doc)
        except DuplicateKeyError as exc:
            raise Conflict("Department name or short code already exists") from exc
        doc["_id"] = res.inserted_id
        return doc

    async def names_by_ids(self, ids: Iterable[ObjectId]) -> Dict[str, Dict[str, Any]]:
        obj_ids = list({i for i in ids if isinstance(i, ObjectId)})
        if not obj_ids:
            return {}

        out = {}
        async for d in self.col.find({"_id": {"$in": obj_ids}}, {"name": 1}):
            out[str(d["_id"])] = {"id": str(d["_id"]), "name": d.get("name")}
        return out

    async def list_all(self) -> List[Dict[str, Any]]:
        return await self.col.find({}).sort("name", 1).to_list(None)
