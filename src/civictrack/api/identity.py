"""Caller identity and geocoding endpoints"""

from fastapi import APIRouter, Depends, Query

from ..core.security import RequestContext, get_request_context
from ..services.geocoder import get_geocoder
from ..storage.role_service import role_service
from .schemas import AddressResponse, IdentityResponse

router = APIRouter()


@router.get("/me", response_model=IdentityResponse)
def who_am_i(context: RequestContext = Depends(get_request_context)):
    """Identity behind the bearer token, and whether it holds the admin role"""
    if context.is_anonymous:
        return IdentityResponse()

    return IdentityResponse(
        identity_id=context.identity_id,
        email=context.email,
        is_admin=role_service.is_admin(context.identity_id),
    )


@router.get("/geocode/reverse", response_model=AddressResponse)
def reverse_geocode(
    lat: float = Query(..., ge=-90, le=90),
    lon: float = Query(..., ge=-180, le=180),
):
    """Human-readable address for a map click; falls back to the coordinates"""
    return AddressResponse(
        latitude=lat,
        longitude=lon,
        address=get_geocoder().reverse_geocode(lat, lon),
    )
