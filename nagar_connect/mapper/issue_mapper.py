from __future__ import annotations

from typing import Any, Dict, Optional

from nagar_connect.models.common import oid_str
from nagar_connect.utils.mongo import serialize_mongo

# API field name -> stored field name
FIELD_ALIASES = {
    "id": "_id",
    "reporterId": "reporter_id",
    "subCategory": "sub_category",
    "assignedTo": "assigned_to",
    "resolutionDetails": "resolution_details",
    "expectedResolutionDate": "expected_resolution_date",
    "createdAt": "created_at",
    "updatedAt": "updated_at",
}

# what the citizen dashboard may see for its recent list
RECENT_PROJECTION = {
    "title": 1,
    "status": 1,
    "priority": 1,
    "category": 1,
    "address": 1,
    "media": 1,
    "created_at": 1,
    "updated_at": 1,
}


def stored_field(api_name: str) -> str:
    return FIELD_ALIASES.get(api_name, api_name)


def _media_out(items) -> list:
    return [
        {k: v for k, v in {
            "url": m.get("url"),
            "type": m.get("type"),
            "thumbnailUrl": m.get("thumbnail_url"),
        }.items() if v is not None}
        for m in items or []
    ]


def _assigned_out(a: Optional[dict], departments: Dict[str, dict]) -> Optional[dict]:
    if not a:
        return None
    dept_id = oid_str(a.get("department"))
    return serialize_mongo({
        "department": departments.get(dept_id) or dept_id,
        "staffId": a.get("staff_id"),
        "assignedDate": a.get("assigned_date"),
    })


def to_issue_out(
    doc: dict,
    reporters: Optional[Dict[str, dict]] = None,
    departments: Optional[Dict[str, dict]] = None,
) -> Dict[str, Any]:
    """
    Stored issue -> API shape (camelCase). Reporter / department refs are
    swapped for {id, name, ...} when the caller looked them up.
    """
    reporters = reporters or {}
    departments = departments or {}

    reporter_id = oid_str(doc.get("reporter_id"))
    out = {
        "id": oid_str(doc["_id"]),
        "reporterId": reporters.get(reporter_id) or reporter_id,
        "title": doc.get("title"),
        "description": doc.get("description"),
        "category": doc.get("category"),
        "subCategory": doc.get("sub_category"),
        "status": doc.get("status"),
        "priority": doc.get("priority"),
        "location": doc.get("location"),
        "address": doc.get("address"),
        "media": _media_out(doc.get("media")),
        "assignedTo": _assigned_out(doc.get("assigned_to"), departments),
        "timeline": [
            {
                "status": t.get("status"),
                "timestamp": t.get("timestamp"),
                "by": t.get("by"),
                "notes": t.get("notes"),
            }
            for t in doc.get("timeline") or []
        ],
        "feedback": doc.get("feedback"),
        "expectedResolutionDate": doc.get("expected_resolution_date"),
        "createdAt": doc.get("created_at"),
        "updatedAt": doc.get("updated_at"),
    }
    return serialize_mongo(out)


def to_recent_out(doc: dict) -> Dict[str, Any]:
    return serialize_mongo({
        "id": doc["_id"],
        "title": doc.get("title"),
        "status": doc.get("status"),
        "priority": doc.get("priority"),
        "category": doc.get("category"),
        "address": doc.get("address"),
        "media": _media_out(doc.get("media")),
        "createdAt": doc.get("created_at"),
        "updatedAt": doc.get("updated_at"),
    })
