from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from bson import ObjectId
from pymongo.errors import PyMongoError

from nagar_connect.core.errors import PersistenceError
from nagar_connect.models.common import utcnow
from nagar_connect.models.issue import Issue

SortSpec = Sequence[Tuple[str, int]]


class IssueRepository:
    def __init__(self, collection):
        self.collection = collection

    async def insert(self, issue: Issue) -> Dict[str, Any]:
        now = utcnow()
        document = issue.to_document()
        document.setdefault("created_at", now)
        document.setdefault("updated_at", now)
        try:
            result = await self.collection.insert_one(document)
        except PyMongoError as exc:
            raise PersistenceError(str(exc)) from exc
        document["_id"] = result.inserted_id
        return document

    async def find_by_id(self, issue_id: ObjectId) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({"_id": issue_id})

    async def find_page(
        self,
        query: Dict[str, Any],
        sort: Optional[SortSpec],
        skip: int,
        limit: int,
        projection: Optional[Dict[str, int]] = None,
    ) -> List[Dict[str, Any]]:
        cursor = self.collection.find(query, projection)
        # $near already orders by distance; an explicit sort overrides it
        if sort:
            cursor = cursor.sort(list(sort))
        cursor = cursor.skip(skip).limit(limit)
        return await cursor.to_list(length=limit)

    async def count(self, query: Dict[str, Any]) -> int:
        return await self.collection.count_documents(query)

    async def count_by(self, match: Dict[str, Any], field: str) -> Dict[str, int]:
        pipeline = [
            {"$match": match},
            {"$group": {"_id": f"${field}", "count": {"$sum": 1}}},
        ]

        data: Dict[str, int] = {}
        async for row in self.collection.aggregate(pipeline):
            data[row["_id"] or "Unknown"] = row["count"]

        return data
