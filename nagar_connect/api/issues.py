# nagar_connect/api/issues.py
from typing import Optional

from fastapi import APIRouter, Depends, Query

from nagar_connect.api.deps import get_intake_pipeline, get_query_service
from nagar_connect.core.security import CurrentUser, get_current_user
from nagar_connect.models.common import oid_str
from nagar_connect.schemas.issue import (
    CreateIssueResponse,
    IssueCreateBody,
    IssueCreatedOut,
    IssueListResponse,
    OverviewResponse,
)
from nagar_connect.services.intake import IssueIntakePipeline
from nagar_connect.services.issue_query import DEFAULT_LIMIT, IssueFilters, IssueQueryService

router = APIRouter(prefix="/issues", tags=["Issues"])


def _filters(
    status: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    priority: Optional[str] = Query(None),
    lat: Optional[float] = Query(None, ge=-90, le=90),
    lon: Optional[float] = Query(None, ge=-180, le=180),
    radius: Optional[float] = Query(None, gt=0, description="metres"),
) -> IssueFilters:
    return IssueFilters(
        status=status, category=category, priority=priority, lat=lat, lon=lon, radius=radius
    )


# =========================
# Report an issue
# =========================
@router.post("", response_model=CreateIssueResponse, status_code=201)
async def create_issue(
    body: IssueCreateBody,
    user: CurrentUser = Depends(get_current_user),
    pipeline: IssueIntakePipeline = Depends(get_intake_pipeline),
):
    saved = await pipeline.submit(body, user)
    return CreateIssueResponse(
        issue=IssueCreatedOut(
            id=oid_str(saved["_id"]),
            title=saved["title"],
            status=saved["status"],
            createdAt=saved["created_at"],
        )
    )


# =========================
# Public listing
# =========================
@router.get("", response_model=IssueListResponse)
async def list_issues(
    filters: IssueFilters = Depends(_filters),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=100),
    sortBy: Optional[str] = Query(None),
    sortOrder: Optional[str] = Query(None, pattern="^(asc|desc)$"),
    service: IssueQueryService = Depends(get_query_service),
):
    result = await service.list(filters, page=page, limit=limit, sort_by=sortBy, sort_order=sortOrder)
    return {"success": True, **result}


# =========================
# Caller's own issues
# =========================
@router.get("/mine", response_model=IssueListResponse)
async def list_my_issues(
    filters: IssueFilters = Depends(_filters),
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=100),
    sortBy: Optional[str] = Query(None),
    sortOrder: Optional[str] = Query(None, pattern="^(asc|desc)$"),
    user: CurrentUser = Depends(get_current_user),
    service: IssueQueryService = Depends(get_query_service),
):
    result = await service.list_mine(
        user, filters, page=page, limit=limit, sort_by=sortBy, sort_order=sortOrder
    )
    return {"success": True, **result}


@router.get("/overview", response_model=OverviewResponse)
async def my_overview(
    user: CurrentUser = Depends(get_current_user),
    service: IssueQueryService = Depends(get_query_service),
):
    return {"success": True, "overview": await service.overview(user)}
