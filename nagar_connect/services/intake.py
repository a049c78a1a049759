from __future__ import annotations

import logging
import math
from numbers import Real
from typing import Any, Dict, List, Mapping, Optional

from nagar_connect.core.enums import IssueStatus
from nagar_connect.core.errors import (
    AddressNotFound,
    FieldTooLong,
    GeocodeFailed,
    GeocodeNotFound,
    GeocodeServiceError,
    InvalidCoordinates,
    MissingFields,
    TooManyAttachments,
    Unauthorized,
)
from nagar_connect.core.security import CurrentUser
from nagar_connect.models.common import GeoPoint, utcnow
from nagar_connect.models.issue import DESCRIPTION_MAX, TITLE_MAX, Issue, MediaItem, TimelineEntry
from nagar_connect.repositories.issue_repository import IssueRepository
from nagar_connect.schemas.issue import AttachmentIn, IssueCreateBody
from nagar_connect.services.geocoding import GeocodingClient
from nagar_connect.services.normalization import (
    CATEGORY_MAP,
    PRIORITY_MAP,
    infer_media_type,
    normalize_category,
    normalize_priority,
)
from nagar_connect.utils.mongo import parse_oid

logger = logging.getLogger(__name__)

# what the report form shows while browser geolocation is still resolving
LOCATION_PLACEHOLDER = "detecting..."

REQUIRED_FIELDS = ("title", "description", "location", "category")


def _blank(value: Optional[str]) -> bool:
    return not (value or "").strip()


def missing_fields(body: IssueCreateBody) -> List[str]:
    missing = []
    for name in REQUIRED_FIELDS:
        value = getattr(body, name)
        if _blank(value):
            missing.append(name)
        elif name == "location" and value.strip().lower() == LOCATION_PLACEHOLDER:
            missing.append(name)
    return missing


def _finite(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def assemble_media(attachments: Optional[List[AttachmentIn]]) -> List[MediaItem]:
    return [
        MediaItem(url=a.url, type=infer_media_type(a.url))
        for a in attachments or []
        if a is not None and a.url
    ]


class IssueIntakePipeline:
    """
    Turns a raw submission into exactly one stored Issue, or nothing.

    Steps run in order and each one is a hard gate: auth, required fields,
    category / priority normalization, geocoding, media assembly, insert.
    """

    def __init__(
        self,
        geocoder: GeocodingClient,
        issues: IssueRepository,
        category_table: Mapping[str, str] = CATEGORY_MAP,
        priority_table: Mapping[str, str] = PRIORITY_MAP,
        max_attachments: int = 5,
    ):
        self.geocoder = geocoder
        self.issues = issues
        self.category_table = category_table
        self.priority_table = priority_table
        self.max_attachments = max_attachments

    def validate(self, body: IssueCreateBody) -> None:
        missing = missing_fields(body)
        if missing:
            raise MissingFields(missing)

        if len(body.title.strip()) > TITLE_MAX:
            raise FieldTooLong("title", TITLE_MAX)
        if len(body.description.strip()) > DESCRIPTION_MAX:
            raise FieldTooLong("description", DESCRIPTION_MAX)
        if sum(1 for a in body.attachments or [] if a is not None and a.url) > self.max_attachments:
            raise TooManyAttachments(self.max_attachments)

    async def locate(self, address: str) -> GeoPoint:
        try:
            lon, lat = await self.geocoder.forward_geocode(address)
        except GeocodeNotFound as exc:
            raise AddressNotFound() from exc
        except GeocodeServiceError as exc:
            raise GeocodeFailed() from exc

        if not (_finite(lon) and _finite(lat)):
            raise InvalidCoordinates()
        return GeoPoint(coordinates=[float(lon), float(lat)])

    async def submit(self, body: IssueCreateBody, reporter: Optional[CurrentUser]) -> Dict[str, Any]:
        reporter_oid = parse_oid(reporter.id) if reporter else None
        if reporter_oid is None:
            raise Unauthorized()

        self.validate(body)

        category = normalize_category(body.category, self.category_table)
        priority = normalize_priority(body.priority, self.priority_table)

        address = body.location.strip()
        location = await self.locate(address)

        media = assemble_media(body.attachments)

        now = utcnow()
        issue = Issue(
            reporter_id=reporter_oid,
            title=body.title.strip(),
            description=body.description.strip(),
            category=category,
            sub_category=(body.sub_category or "").strip() or None,
            priority=priority,
            status=IssueStatus.reported,
            location=location,
            address=address,
            media=media,
            timeline=[TimelineEntry(status=IssueStatus.reported, timestamp=now, by=reporter_oid)],
            created_at=now,
            updated_at=now,
        )

        saved = await self.issues.insert(issue)
        logger.info(
            "Issue %s reported by %s (%s, %s, %d media)",
            saved["_id"], reporter.id, category, priority, len(media),
        )
        return saved
