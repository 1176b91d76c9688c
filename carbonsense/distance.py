# carbonsense/distance.py
"""OpenRouteService proxy: geocode both ends, fetch a route, format the result."""
import logging
import re

import requests

from .calculations import to_fixed
from .config import settings

logger = logging.getLogger(__name__)

COORD_RE = re.compile(r"^-?\d+\.?\d*,-?\d+\.?\d*$")

# ORS has no public transit profile, bus and train are routed as driving
ORS_PROFILES = {
    "car": "driving-car",
    "motorbike": "driving-car",
    "cycle": "cycling-regular",
    "walk": "foot-walking",
    "bus": "driving-car",
    "train": "driving-car",
}
DEFAULT_PROFILE = "driving-car"


class DistanceError(Exception):
    pass


def get_ors_profile(mode):
    return ORS_PROFILES.get(mode, DEFAULT_PROFILE)


def parse_coordinates(text):
    """'lat,lng' -> (lat, lng), or None when the text is a free-form address."""
    text = text.strip()
    if not COORD_RE.match(text):
        return None
    lat, lng = (float(part) for part in text.split(","))
    return lat, lng


def geocode(address, api_key, base_url=None, timeout=None):
    base_url = (base_url or settings.services.ors_base_url).rstrip("/")
    r = requests.get(
        f"{base_url}/geocode/search",
        params={"api_key": api_key, "text": address, "size": 1},
        timeout=timeout or settings.services.request_timeout,
    )
    data = r.json()
    features = data.get("features") or []
    if not features:
        raise DistanceError(f"Could not geocode address: {address}")
    lng, lat = features[0]["geometry"]["coordinates"][:2]
    return lat, lng


def format_distance(distance_km, distance_m):
    if distance_km >= 1:
        return f"{to_fixed(distance_km, 1)} km"
    return f"{round(distance_m)} m"


def format_duration(minutes):
    if minutes >= 60:
        hours, mins = divmod(minutes, 60)
        return f"{hours} hr {mins} min" if mins > 0 else f"{hours} hr"
    return f"{minutes} min"


def _resolve(place, api_key, base_url, timeout):
    coords = parse_coordinates(place)
    if coords is not None:
        return coords
    return geocode(place, api_key, base_url=base_url, timeout=timeout)


def _raise_for_error(data):
    err = data.get("error")
    if err:
        message = err.get("message") if isinstance(err, dict) else str(err)
        raise DistanceError(message or "OpenRouteService API error")


def calculate_distance(origin, destination, mode="car", api_key=None, base_url=None, timeout=None):
    api_key = api_key or settings.services.ors_api_key
    if not api_key:
        raise DistanceError("OpenRouteService API key not configured")
    if not origin or not destination:
        raise DistanceError("Origin and destination are required")

    base_url = (base_url or settings.services.ors_base_url).rstrip("/")
    timeout = timeout or settings.services.request_timeout
    logger.info('Calculating distance from "%s" to "%s" via %s', origin, destination, mode)

    try:
        origin_lat, origin_lng = _resolve(origin, api_key, base_url, timeout)
        dest_lat, dest_lng = _resolve(destination, api_key, base_url, timeout)

        profile = get_ors_profile(mode)
        r = requests.post(
            f"{base_url}/v2/directions/{profile}",
            headers={"Authorization": api_key, "Content-Type": "application/json"},
            json={"coordinates": [[origin_lng, origin_lat], [dest_lng, dest_lat]]},
            timeout=timeout,
        )
        data = r.json()
        _raise_for_error(data)

        routes = data.get("routes") or []
        if not routes:
            raise DistanceError("Could not calculate route for the given locations")

        summary = routes[0].get("summary", {})
        distance_m = float(summary.get("distance", 0.0))
        duration_s = float(summary.get("duration", 0.0))
        distance_km = distance_m / 1000
        duration_min = int(to_fixed(duration_s / 60, 0))
    except requests.RequestException as e:
        raise DistanceError(f"OpenRouteService request failed: {e}") from e
    # unexpected payload shapes: lists instead of objects, missing keys, bad numbers
    except (KeyError, IndexError, TypeError, AttributeError, ValueError, ArithmeticError) as e:
        raise DistanceError("OpenRouteService returned an invalid response") from e

    return {
        "success": True,
        "distance": {"km": distance_km, "text": format_distance(distance_km, distance_m)},
        "duration": {"minutes": duration_min, "text": format_duration(duration_min)},
        "origin": origin,
        "destination": destination,
    }
