"""Geographic utilities for distance and commute calculations."""

import math
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Tuple

import httpx
from geopy.exc import GeocoderServiceError, GeocoderTimedOut
from geopy.geocoders import Nominatim
from rich.console import Console

from otodom_summarizer.config.settings import COUNTRY, DEFAULT_BASE_LOCATION, BaseLocation

console = Console()

# Initialize geocoder
geolocator = Nominatim(user_agent="otodom_summarizer")

# OSRM public demo server (free, no API key required)
OSRM_BASE_URL = "http://router.project-osrm.org/route/v1"

# Transitous API (MOTIS-based, free public transit routing, covers Poland)
TRANSITOUS_BASE_URL = "https://api.transitous.org/api/v1"

# Commute mode -> OSRM profile
OSRM_MODES = {
    "walk": "foot",
    "bike": "cycling",
    "drive": "driving",
}

# Rate limiting for the public routing services
_last_osrm_request = 0.0
OSRM_MIN_INTERVAL = 1.0  # seconds between requests

_last_transitous_request = 0.0
TRANSITOUS_MIN_INTERVAL = 1.0  # seconds between requests


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate the great circle distance between two points in km."""
    R = 6371  # Earth's radius in km

    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(lat1_rad) * math.cos(lat2_rad) * math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return R * c


def geocode_address(address: str) -> Optional[Tuple[float, float]]:
    """Geocode an address to latitude/longitude coordinates."""
    if not address:
        return None

    if COUNTRY.lower() not in address.lower() and "polska" not in address.lower():
        address = f"{address}, {COUNTRY}"

    try:
        location = geolocator.geocode(address, timeout=10)
        if location:
            return (location.latitude, location.longitude)
    except GeocoderTimedOut:
        console.print(f"[yellow]Geocoding timed out for: {address}[/]")
    except GeocoderServiceError as e:
        console.print(f"[yellow]Geocoding failed for {address}: {e}[/]")

    return None


def _rate_limit_osrm():
    """Keep OSRM requests at least OSRM_MIN_INTERVAL apart."""
    global _last_osrm_request
    elapsed = time.time() - _last_osrm_request
    if elapsed < OSRM_MIN_INTERVAL:
        time.sleep(OSRM_MIN_INTERVAL - elapsed)
    _last_osrm_request = time.time()


def _rate_limit_transitous():
    """Keep Transitous requests at least TRANSITOUS_MIN_INTERVAL apart."""
    global _last_transitous_request
    elapsed = time.time() - _last_transitous_request
    if elapsed < TRANSITOUS_MIN_INTERVAL:
        time.sleep(TRANSITOUS_MIN_INTERVAL - elapsed)
    _last_transitous_request = time.time()


def get_osrm_route(
    from_lat: float,
    from_lon: float,
    to_lat: float,
    to_lon: float,
    profile: str = "cycling",
) -> Optional[dict]:
    """
    Get route from OSRM.

    Args:
        from_lat, from_lon: Origin coordinates
        to_lat, to_lon: Destination coordinates
        profile: "cycling", "driving", or "foot"

    Returns:
        dict with 'duration_min', 'distance_km' or None on failure
    """
    _rate_limit_osrm()

    # OSRM uses lon,lat order (not lat,lon)
    url = f"{OSRM_BASE_URL}/{profile}/{from_lon},{from_lat};{to_lon},{to_lat}?overview=false"

    try:
        with httpx.Client(timeout=10.0) as client:
            resp = client.get(url)
            resp.raise_for_status()
            data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        console.print(f"[yellow]OSRM request failed: {e}[/]")
        return None

    if data.get("code") != "Ok" or not data.get("routes"):
        return None

    route = data["routes"][0]
    return {
        "duration_min": int(route["duration"] / 60),  # seconds to minutes
        "distance_km": round(route["distance"] / 1000, 2),  # meters to km
    }


def get_transit_route(
    from_lat: float,
    from_lon: float,
    to_lat: float,
    to_lon: float,
) -> Optional[dict]:
    """
    Get public transit route from Transitous (MOTIS API).

    Returns:
        dict with 'duration_min', 'transfers' or None on failure
    """
    url = (
        f"{TRANSITOUS_BASE_URL}/plan?"
        f"fromPlace={from_lat},{from_lon}&"
        f"toPlace={to_lat},{to_lon}&"
        f"directModes=WALK&"
        f"transitModes=TRANSIT"
    )
    headers = {"User-Agent": "OtodomSummarizer/1.0"}
    _rate_limit_transitous()

    try:
        with httpx.Client(timeout=15.0) as client:
            resp = client.get(url, headers=headers)
            resp.raise_for_status()
            data = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        console.print(f"[yellow]Transitous request failed: {e}[/]")
        return None

    itineraries = data.get("itineraries", [])
    if not itineraries:
        return None

    # Shortest duration first, then fewest transfers
    best = min(itineraries, key=lambda x: (x.get("duration", 99999), x.get("transfers", 99)))
    return {
        "duration_min": int(best["duration"] / 60),
        "transfers": best.get("transfers", 0),
    }


def _osrm_durations(lat: float, lon: float, base: BaseLocation) -> dict:
    """Walk, bike and drive minutes, one throttled OSRM request after another."""
    result = {}
    for mode, profile in OSRM_MODES.items():
        route = get_osrm_route(lat, lon, base.lat, base.lng, profile)
        result[f"{mode}_min"] = route["duration_min"] if route else None
    return result


def get_commute_routes(lat: float, lon: float, base: BaseLocation = None) -> dict:
    """
    Look up walk, bike, drive and transit times to the base location.

    OSRM modes run one after another under the OSRM rate limit while the
    Transitous lookup runs alongside them.

    Returns:
        dict with walk_min, bike_min, drive_min, transit_min, transit_transfers
        (None for any mode whose lookup failed)
    """
    base = base or DEFAULT_BASE_LOCATION

    with ThreadPoolExecutor(max_workers=1) as pool:
        transit_future = pool.submit(get_transit_route, lat, lon, base.lat, base.lng)
        result = _osrm_durations(lat, lon, base)
        transit = transit_future.result()

    result["transit_min"] = transit["duration_min"] if transit else None
    result["transit_transfers"] = transit["transfers"] if transit else None
    return result


def enrich_with_geo(
    latitude: Optional[float],
    longitude: Optional[float],
    location: Optional[str] = None,
    base: BaseLocation = None,
    with_commute: bool = False,
) -> dict:
    """
    Resolve coordinates and compute distance (and optionally commute) to the base location.

    Args:
        latitude, longitude: Coordinates from the listing, if any
        location: Free-form address used for geocoding when coordinates are missing
        base: Reference point (default: central Warsaw)
        with_commute: Also look up routed commute times
    """
    base = base or DEFAULT_BASE_LOCATION
    result = {
        "latitude": latitude,
        "longitude": longitude,
        "distance_km": None,
        "commute": None,
    }

    if latitude is None or longitude is None:
        coords = geocode_address(location) if location else None
        if not coords:
            return result
        latitude, longitude = coords
        result["latitude"], result["longitude"] = coords

    result["distance_km"] = round(haversine_distance(latitude, longitude, base.lat, base.lng), 2)

    if with_commute:
        result["commute"] = get_commute_routes(latitude, longitude, base)

    return result
