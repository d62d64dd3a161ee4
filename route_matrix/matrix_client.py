"""Thin wrapper around the Routes API ``computeRouteMatrix`` endpoint."""
from __future__ import annotations

import logging
import os
from typing import Dict, List, Sequence

import requests

from .models import Coordinate

ROUTE_MATRIX_URL = "https://routes.googleapis.com/distanceMatrix/v2:computeRouteMatrix"
FIELD_MASK = "originIndex,destinationIndex,distanceMeters,duration,condition"
API_KEY_ENV = "GOOGLE_MAPS_API_KEY"
REQUEST_TIMEOUT = 10
DESTINATION_SEPARATOR = "|"

logger = logging.getLogger(__name__)


def get_api_key() -> str:
    return os.getenv(API_KEY_ENV, "").strip()


def _parse_pair(text: str) -> Coordinate:
    parts = text.split(",")
    if len(parts) < 2:
        raise ValueError(f"invalid coordinate pair: {text!r}")
    return Coordinate(lat=float(parts[0]), lng=float(parts[1]))


def parse_origin(origins: str) -> Coordinate:
    """Parse a single ``"lat,lng"`` origin."""
    return _parse_pair(origins)


def parse_destinations(destinations: str) -> List[Coordinate]:
    """Parse ``"lat,lng|lat,lng|..."`` keeping the caller's order."""
    return [_parse_pair(item) for item in destinations.split(DESTINATION_SEPARATOR)]


def count_destinations(destinations: str) -> int:
    return len(destinations.split(DESTINATION_SEPARATOR))


def _waypoint(coordinate: Coordinate) -> Dict[str, object]:
    return {
        "waypoint": {
            "location": {
                "latLng": {
                    "latitude": coordinate.lat,
                    "longitude": coordinate.lng,
                }
            }
        }
    }


def build_matrix_body(
    origin: Coordinate,
    destinations: Sequence[Coordinate],
    *,
    mode: str,
    units: str,
    language: str,
) -> Dict[str, object]:
    """Reshape parsed coordinates into the Routes API request schema."""
    return {
        "origins": [_waypoint(origin)],
        "destinations": [_waypoint(destination) for destination in destinations],
        "travelMode": mode.upper(),
        "languageCode": language,
        "units": units.upper(),
    }


def compute_route_matrix(
    body: Dict[str, object],
    api_key: str,
    *,
    timeout: float = REQUEST_TIMEOUT,
) -> requests.Response:
    """POST ``body`` to the Routes API and hand back the raw response.

    Status interpretation is left to the caller; transport failures propagate
    as :class:`requests.RequestException`.
    """
    headers = {
        "Content-Type": "application/json",
        "X-Goog-Api-Key": api_key,
        "X-Goog-FieldMask": FIELD_MASK,
    }
    logger.info("Fetching from Routes API (%s destinations)", len(body.get("destinations") or []))
    return requests.post(ROUTE_MATRIX_URL, json=body, headers=headers, timeout=timeout)
