from __future__ import annotations

import logging
from typing import Any, NamedTuple, Optional
from urllib.parse import quote

import httpx

from nagar_connect.core.config import Settings
from nagar_connect.core.errors import (
    GeocodeNotFound,
    GeocodeServiceError,
    InvalidAddress,
    Misconfigured,
)

logger = logging.getLogger(__name__)


class Coordinates(NamedTuple):
    longitude: Any
    latitude: Any


class GeocodingClient:
    """
    Mapbox Places geocoder. One request per call, no cache, no retry:
    failures go straight back to the caller.
    """

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        if not settings.mapbox_access_token:
            raise Misconfigured(["MAPBOX_ACCESS_TOKEN"])
        self.token = settings.mapbox_access_token
        self.base_url = settings.mapbox_base_url.rstrip("/")
        self.timeout = settings.http_timeout_seconds
        self._client = client

    async def _features(self, query: str) -> list:
        url = f"{self.base_url}/{quote(query, safe=',')}.json"
        params = {"access_token": self.token, "limit": 1}
        try:
            if self._client is not None:
                r = await self._client.get(url, params=params)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    r = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Mapbox request failed: %s", exc.__class__.__name__)
            raise GeocodeServiceError() from exc

        if r.status_code != 200:
            logger.warning("Mapbox returned %s", r.status_code)
            raise GeocodeServiceError(f"Geocoding service returned {r.status_code}")

        try:
            data = r.json()
        except ValueError as exc:
            raise GeocodeServiceError("Geocoding service returned invalid JSON") from exc

        features = data.get("features") or []
        if not features:
            raise GeocodeNotFound()
        return features

    async def forward_geocode(self, address: str) -> Coordinates:
        """
        Free-text address -> (longitude, latitude) exactly as the service
        returned them; callers decide whether the numbers are usable.
        """
        address = (address or "").strip()
        if not address:
            raise InvalidAddress()

        features = await self._features(address)
        center = features[0].get("center") or []
        lon = center[0] if len(center) > 0 else None
        lat = center[1] if len(center) > 1 else None
        return Coordinates(lon, lat)

    async def reverse_geocode(self, longitude: float, latitude: float) -> str:
        features = await self._features(f"{longitude},{latitude}")
        place = features[0].get("place_name")
        if not place:
            raise GeocodeNotFound()
        return place
