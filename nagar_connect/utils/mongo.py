from datetime import date, datetime
from enum import Enum

from bson import ObjectId


def serialize_mongo(obj):
    """
    Recursively convert MongoDB values to JSON-safe ones
    """
    if isinstance(obj, ObjectId):
        return str(obj)

    if isinstance(obj, (datetime, date)):
        return obj.isoformat()

    if isinstance(obj, Enum):
        return obj.value

    if isinstance(obj, (list, tuple)):
        return [serialize_mongo(i) for i in obj]

    if isinstance(obj, dict):
        return {k: serialize_mongo(v) for k, v in obj.items()}

    return obj


def parse_oid(x) -> ObjectId | None:
    if isinstance(x, ObjectId):
        return x
    if not x:
        return None
    x = str(x).strip()
    if not ObjectId.is_valid(x):
        return None
    return ObjectId(x)
