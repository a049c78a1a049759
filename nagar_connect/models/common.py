# nagar_connect/models/common.py
from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import core_schema


def oid_str(x) -> str | None:
    if x is None:
        return None
    return str(x)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PyObjectId(ObjectId):
    """
    ObjectId usable as a pydantic v2 field:
    - accepts ObjectId or a valid 24-hex string
    - shows up as a string in the OpenAPI schema
    """

    @classmethod
    def __get_pydantic_core_schema__(cls, source, handler):
        def validate(v):
            if isinstance(v, ObjectId):
                return v
            if isinstance(v, str) and ObjectId.is_valid(v):
                return ObjectId(v)
            raise ValueError("Invalid ObjectId")

        return core_schema.no_info_plain_validator_function(
            validate,
            json_schema_input_schema=core_schema.str_schema(),
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="json"
            ),
        )

    @classmethod
    def __get_pydantic_json_schema__(cls, core_schema_, handler):
        return {"type": "string", "examples": ["64b7c2c9f1c2a8b123456789"]}


class NCBaseModel(BaseModel):
    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
        use_enum_values=True,
    )


class GeoPoint(NCBaseModel):
    """GeoJSON point, coordinates stored as [longitude, latitude]."""

    type: str = Field("Point", pattern="^Point$")
    coordinates: List[float]

    @field_validator("coordinates")
    @classmethod
    def _finite_pair(cls, v: List[float]) -> List[float]:
        if len(v) != 2 or not all(math.isfinite(c) for c in v):
            raise ValueError("coordinates must be a finite [longitude, latitude] pair")
        return v

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]


class PostalAddress(NCBaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    pincode: Optional[str] = None


class NotificationPreferences(NCBaseModel):
    email_notifications: bool = True
    push_notifications: bool = True
    whatsapp_notifications: bool = True
