from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import EmailStr, Field, field_validator

from nagar_connect.models.common import NCBaseModel, PyObjectId


class DepartmentSLAs(NCBaseModel):
    """Target resolution hours per priority."""

    low: Optional[float] = None
    medium: Optional[float] = None
    high: Optional[float] = None
    critical: Optional[float] = None


class Department(NCBaseModel):
    id: Optional[PyObjectId] = Field(None, alias="_id")
    name: str
    short_code: str = Field(..., max_length=10)
    contact_email: Optional[EmailStr] = None
    contact_phone: Optional[str] = None
    head_id: Optional[PyObjectId] = None
    members: List[PyObjectId] = Field(default_factory=list)
    operating_hours: Optional[str] = None
    slas: DepartmentSLAs = Field(default_factory=DepartmentSLAs)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("short_code")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.strip().upper()
