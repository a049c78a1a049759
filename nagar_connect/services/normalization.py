from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Optional

from nagar_connect.core.enums import IssueCategory, IssuePriority, MediaType

# client token -> stored category
CATEGORY_MAP: Mapping[str, str] = MappingProxyType({
    "pothole": IssueCategory.pothole.value,
    "streetlight": IssueCategory.streetlight.value,
    "garbage": IssueCategory.garbage.value,
    "water": IssueCategory.water_leak.value,
    "road": IssueCategory.road_damage.value,
    "drainage": IssueCategory.drainage.value,
    "encroachment": IssueCategory.encroachment.value,
    "other": IssueCategory.other.value,
    # no stored slot for traffic yet
    "traffic": IssueCategory.other.value,
    # stored values map to themselves
    **{c.value.lower(): c.value for c in IssueCategory},
})

PRIORITY_MAP: Mapping[str, str] = MappingProxyType({
    "low": IssuePriority.low.value,
    "medium": IssuePriority.medium.value,
    "high": IssuePriority.high.value,
    "urgent": IssuePriority.critical.value,
    "critical": IssuePriority.critical.value,
})

_VIDEO = re.compile(r"(\.mp4|\.mov|\.webm|video)")
_AUDIO = re.compile(r"(\.mp3|\.wav|audio)")


def _token(value: Optional[str]) -> str:
    return (value or "").strip().lower()


def normalize_category(value: Optional[str], table: Mapping[str, str] = CATEGORY_MAP) -> str:
    return table.get(_token(value), IssueCategory.other.value)


def normalize_priority(value: Optional[str], table: Mapping[str, str] = PRIORITY_MAP) -> str:
    return table.get(_token(value) or "medium", IssuePriority.medium.value)


def infer_media_type(url: str) -> str:
    lower = url.lower()
    if _VIDEO.search(lower):
        return MediaType.video.value
    if _AUDIO.search(lower):
        return MediaType.audio.value
    return MediaType.image.value
