import logging
from typing import List, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from ..models import Vendor
from ..nearby_vendors import find_nearby_vendors


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/nearby-vendors", response_model=List[Vendor])
def nearby_vendors(
    lat: Optional[str] = None,
    lng: Optional[str] = None,
    pincode: Optional[str] = None,
    area: Optional[str] = None,
):
    """Up to 10 vendors, nearest first.
    Coordinates arrive as strings so malformed values can be ignored rather than rejected.
    """
    logger.info("[nearby] query lat=%s lng=%s pincode=%s area=%s", lat, lng, pincode, area)
    try:
        return find_nearby_vendors(area=area, pincode=pincode, lat=lat, lng=lng)
    except Exception:
        logger.exception("[nearby] Error fetching nearby vendors")
        return JSONResponse({"error": "Failed to fetch nearby vendors"}, status_code=500)
