from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import Field

from nagar_connect.core.enums import IssueCategory, IssuePriority, IssueStatus, MediaType
from nagar_connect.models.common import GeoPoint, NCBaseModel, PyObjectId

TITLE_MAX = 150
DESCRIPTION_MAX = 1000


class MediaItem(NCBaseModel):
    url: str
    type: MediaType
    thumbnail_url: Optional[str] = None


class Assignment(NCBaseModel):
    department: PyObjectId
    staff_id: Optional[PyObjectId] = None
    assigned_date: Optional[datetime] = None


class ResolutionMedia(NCBaseModel):
    url: str
    type: str = Field(..., pattern="^(image|video)$")
    thumbnail_url: Optional[str] = None


class ResolutionDetails(NCBaseModel):
    resolved_by: Optional[PyObjectId] = None
    resolved_date: Optional[datetime] = None
    resolution_summary: Optional[str] = None
    resolution_media: List[ResolutionMedia] = Field(default_factory=list)


class TimelineEntry(NCBaseModel):
    status: IssueStatus
    timestamp: datetime
    by: Optional[PyObjectId] = None
    notes: Optional[str] = None


class Feedback(NCBaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    comment: Optional[str] = None
    timestamp: Optional[datetime] = None


class Issue(NCBaseModel):
    id: Optional[PyObjectId] = Field(None, alias="_id")
    reporter_id: PyObjectId
    title: str = Field(..., min_length=1, max_length=TITLE_MAX)
    description: str = Field(..., min_length=1, max_length=DESCRIPTION_MAX)
    category: IssueCategory
    sub_category: Optional[str] = None
    status: IssueStatus = IssueStatus.reported
    priority: IssuePriority = IssuePriority.medium
    location: GeoPoint
    address: str = Field(..., min_length=1)
    media: List[MediaItem] = Field(default_factory=list)
    assigned_to: Optional[Assignment] = None
    resolution_details: Optional[ResolutionDetails] = None
    timeline: List[TimelineEntry] = Field(default_factory=list)
    feedback: Optional[Feedback] = None
    expected_resolution_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_document(self) -> dict:
        """Mongo-ready dict: ObjectIds and datetimes kept native, unset optionals dropped."""
        return self.model_dump(mode="python", by_alias=True, exclude_none=True)
