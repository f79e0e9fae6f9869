import json
import logging
import math
from functools import lru_cache
from types import MappingProxyType
from typing import List, Optional, Tuple

from .config import DATA_DIR
from .models import Vendor


logger = logging.getLogger(__name__)

VENDORS_PATH = DATA_DIR / "nearby_vendors.json"

EARTH_RADIUS_M = 6_371_000
MAX_RESULTS = 10

PINCODE_AREAS = MappingProxyType({
    "110005": ("Karol Bagh",),
    "110024": ("Lajpat Nagar",),
    "110001": ("Connaught Place",),
    "110006": ("Karol Bagh",),
    "110017": ("Lajpat Nagar",),
})


@lru_cache(maxsize=1)
def load_vendors() -> Tuple[Vendor, ...]:
    """Load and cache the seeded vendor list.
    Returns an empty tuple if the file is missing or invalid.
    """
    try:
        with open(VENDORS_PATH, "r", encoding="utf-8") as f:
            data = json.load(f)
        return tuple(Vendor(**item) for item in data)
    except Exception as e:
        logger.warning("[nearby] Failed to load vendors: %s", e)
        return ()


def haversine_distance(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters between two lat/lng points (degrees)."""
    d_lat = math.radians(lat2 - lat1)
    d_lng = math.radians(lng2 - lng1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def parse_coordinate(value) -> Optional[float]:
    """Parse a query-string coordinate; anything unusable counts as absent."""
    if value is None:
        return None
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(parsed):
        return None
    return parsed


def _area_matches(vendor_area: str, query: str) -> bool:
    # Bidirectional: "karol" finds "Karol Bagh", "karol bagh market" finds "Karol Bagh"
    a = vendor_area.lower()
    q = query.lower()
    return q in a or a in q


def find_nearby_vendors(
    area: Optional[str] = None,
    pincode: Optional[str] = None,
    lat=None,
    lng=None,
    vendors: Optional[List[Vendor]] = None,
) -> List[Vendor]:
    """Filter the vendor list by area and pincode, rank nearest-first.

    Distances are recomputed from the requester's coordinates when both
    ``lat`` and ``lng`` parse; otherwise the seeded distances are used.
    At most ``MAX_RESULTS`` vendors are returned.
    """
    source = load_vendors() if vendors is None else vendors
    results: List[Vendor] = [v.model_copy() for v in source]

    if area:
        results = [v for v in results if _area_matches(v.area, area)]

    if pincode:
        mapped = PINCODE_AREAS.get(pincode, ())
        if mapped:
            results = [
                v for v in results
                if any(m.lower() in v.area.lower() for m in mapped)
            ]

    user_lat = parse_coordinate(lat)
    user_lng = parse_coordinate(lng)
    if user_lat is not None and user_lng is not None:
        for v in results:
            if v.coordinates is not None:
                # half-up rounding to whole meters
                v.distance = math.floor(
                    haversine_distance(user_lat, user_lng, v.coordinates.lat, v.coordinates.lng) + 0.5
                )

    results.sort(key=lambda v: v.distance)
    return results[:MAX_RESULTS]
