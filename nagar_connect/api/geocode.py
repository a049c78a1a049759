# nagar_connect/api/geocode.py
from fastapi import APIRouter, Depends, Query

from nagar_connect.api.deps import get_geocoder
from nagar_connect.core.security import CurrentUser, get_current_user
from nagar_connect.services.geocoding import GeocodingClient

router = APIRouter(prefix="/geocode", tags=["Geocoding"])


@router.get("/forward")
async def forward(
    address: str = Query(""),
    user: CurrentUser = Depends(get_current_user),
    geocoder: GeocodingClient = Depends(get_geocoder),
):
    coords = await geocoder.forward_geocode(address)
    return {"longitude": coords.longitude, "latitude": coords.latitude}


@router.get("/reverse")
async def reverse(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
    user: CurrentUser = Depends(get_current_user),
    geocoder: GeocodingClient = Depends(get_geocoder),
):
    return {"address": await geocoder.reverse_geocode(lon, lat)}
