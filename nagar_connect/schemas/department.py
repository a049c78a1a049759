from typing import List, Optional

from pydantic import BaseModel, Field


class SLAsIn(BaseModel):
    low: Optional[float] = None
    medium: Optional[float] = None
    high: Optional[float] = None
    critical: Optional[float] = None


class DepartmentCreate(BaseModel):
    name: str = Field(..., min_length=2)
    shortCode: str = Field(..., min_length=1, max_length=10)
    contactEmail: Optional[str] = None
    contactPhone: Optional[str] = None
    operatingHours: Optional[str] = None
    slas: SLAsIn = Field(default_factory=SLAsIn)


class DepartmentOut(BaseModel):
    id: str
    name: str
    shortCode: str
    contactEmail: Optional[str] = None
    contactPhone: Optional[str] = None
    operatingHours: Optional[str] = None
    slas: SLAsIn
    members: List[str] = []
