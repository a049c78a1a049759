from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AttachmentIn(BaseModel):
    # clients echo the whole upload response back; only url matters here
    model_config = ConfigDict(extra="ignore")

    url: Optional[str] = None
    id: Optional[str] = None
    type: Optional[str] = None


class IssueCreateBody(BaseModel):
    """
    Raw submission. Everything is optional at this layer so the intake
    pipeline can report every missing field in one response.
    """

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = Field(None, description="Human-readable address")
    category: Optional[str] = None
    sub_category: Optional[str] = Field(None, alias="subCategory")
    priority: Optional[str] = None
    attachments: Optional[List[AttachmentIn]] = None


class IssueCreatedOut(BaseModel):
    id: str
    title: str
    status: str
    createdAt: datetime


class CreateIssueResponse(BaseModel):
    success: bool = True
    message: str = "Issue reported successfully"
    issue: IssueCreatedOut


class PaginationOut(BaseModel):
    total: int
    page: int
    limit: int
    totalPages: int


class IssueListResponse(BaseModel):
    success: bool = True
    data: List[Dict[str, Any]]
    pagination: PaginationOut


class OverviewOut(BaseModel):
    totals: Dict[str, int]
    byCategory: Dict[str, int]
    byPriority: Dict[str, int]
    recent: List[Dict[str, Any]]


class OverviewResponse(BaseModel):
    success: bool = True
    overview: OverviewOut
