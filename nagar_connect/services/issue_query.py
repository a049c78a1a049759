from __future__ import annotations

import asyncio
import math
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from nagar_connect.core.errors import Unauthorized, ValidationFailed
from nagar_connect.core.security import CurrentUser
from nagar_connect.mapper.issue_mapper import (
    RECENT_PROJECTION,
    stored_field,
    to_issue_out,
    to_recent_out,
)
from nagar_connect.repositories.department_repository import DepartmentRepository
from nagar_connect.repositories.issue_repository import IssueRepository
from nagar_connect.repositories.user_repository import UserRepository
from nagar_connect.utils.mongo import parse_oid

# mean equatorial radius used by MongoDB's spherical geometry
EARTH_RADIUS_M = 6378100.0

DEFAULT_LIMIT = 10
RECENT_COUNT = 5


@dataclass
class IssueFilters:
    status: Optional[str] = None
    category: Optional[str] = None
    priority: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    radius: Optional[float] = None

    @property
    def has_near(self) -> bool:
        return self.lat is not None and self.lon is not None and self.radius is not None


def build_queries(filters: IssueFilters, base: Optional[Dict[str, Any]] = None) -> Tuple[dict, dict]:
    """
    Returns (page query, count query). They differ only for radius searches:
    $near sorts by distance but count_documents refuses it, so the count uses
    the equivalent $geoWithin sphere.
    """
    q: Dict[str, Any] = dict(base or {})

    if filters.status:
        q["status"] = filters.status
    if filters.category:
        q["category"] = filters.category
    if filters.priority:
        q["priority"] = filters.priority

    if not filters.has_near:
        return q, dict(q)

    point = [float(filters.lon), float(filters.lat)]
    page_q = dict(q)
    page_q["location"] = {
        "$near": {
            "$geometry": {"type": "Point", "coordinates": point},
            "$maxDistance": float(filters.radius),
        }
    }
    count_q = dict(q)
    count_q["location"] = {
        "$geoWithin": {"$centerSphere": [point, float(filters.radius) / EARTH_RADIUS_M]}
    }
    return page_q, count_q


def build_sort(sort_by: Optional[str], sort_order: Optional[str], has_near: bool):
    # nearest-first unless the caller asked for an order
    if not sort_by and has_near:
        return None
    if sort_by and sort_by.startswith("$"):
        raise ValidationFailed("Invalid sort field")
    direction = 1 if (sort_order or "").lower() == "asc" else -1
    return [(stored_field(sort_by or "createdAt"), direction)]


class IssueQueryService:
    def __init__(
        self,
        issues: IssueRepository,
        users: Optional[UserRepository] = None,
        departments: Optional[DepartmentRepository] = None,
    ):
        self.issues = issues
        self.users = users
        self.departments = departments

    async def list(
        self,
        filters: IssueFilters,
        page: int = 1,
        limit: int = DEFAULT_LIMIT,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        base: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        page = max(int(page), 1)
        limit = max(int(limit), 1)
        skip = (page - 1) * limit

        page_q, count_q = build_queries(filters, base)
        sort = build_sort(sort_by, sort_order, filters.has_near)

        docs, total = await asyncio.gather(
            self.issues.find_page(page_q, sort, skip, limit),
            self.issues.count(count_q),
        )
        reporters, departments = await self._lookups(docs)

        return {
            "data": [to_issue_out(d, reporters, departments) for d in docs],
            "pagination": {
                "total": total,
                "page": page,
                "limit": limit,
                "totalPages": math.ceil(total / limit),
            },
        }

    async def list_mine(self, caller: Optional[CurrentUser], filters: IssueFilters, **kwargs) -> Dict[str, Any]:
        return await self.list(filters, base={"reporter_id": self._caller_oid(caller)}, **kwargs)

    async def overview(self, caller: Optional[CurrentUser]) -> Dict[str, Any]:
        match = {"reporter_id": self._caller_oid(caller)}

        by_status, by_category, by_priority, total, recent = await asyncio.gather(
            self.issues.count_by(match, "status"),
            self.issues.count_by(match, "category"),
            self.issues.count_by(match, "priority"),
            self.issues.count(match),
            self.issues.find_page(
                match, [("created_at", -1)], 0, RECENT_COUNT, projection=RECENT_PROJECTION
            ),
        )

        return {
            "totals": {"all": total, **by_status},
            "byCategory": by_category,
            "byPriority": by_priority,
            "recent": [to_recent_out(d) for d in recent],
        }

    # -------------------------
    @staticmethod
    def _caller_oid(caller: Optional[CurrentUser]):
        oid = parse_oid(caller.id) if caller else None
        if oid is None:
            raise Unauthorized()
        return oid

    async def _lookups(self, docs):
        reporters: Dict[str, dict] = {}
        departments: Dict[str, dict] = {}
        if self.users is not None:
            reporters = await self.users.get_by_ids(d.get("reporter_id") for d in docs)
        if self.departments is not None:
            departments = await self.departments.names_by_ids(
                (d.get("assigned_to") or {}).get("department") for d in docs
            )
        return reporters, departments
