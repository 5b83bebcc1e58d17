"""Road geometry for display of an already ordered route."""

from __future__ import annotations

import logging
from typing import Sequence

from ...config import settings
from ...exceptions import UpstreamUnavailableError
from ...models.domain import Location, RouteGeometry
from ..geospatial import decode_polyline, haversine_km, travel_seconds
from .osrm_client import OSRMClient

logger = logging.getLogger(__name__)


def _haversine_geometry(locations: Sequence[Location]) -> RouteGeometry:
    distance_km = sum(
        haversine_km(src.latitude, src.longitude, dst.latitude, dst.longitude)
        for src, dst in zip(locations, locations[1:])
    )
    return RouteGeometry(
        distance=distance_km * 1000.0,
        duration=travel_seconds(distance_km, settings.fallback_average_speed_kmh),
        geometry=None,
        source="haversine",
    )


def fetch_route_geometry(locations: Sequence[Location], client: OSRMClient | None = None) -> RouteGeometry:
    """Fetch the OSRM route through ``locations`` in order, falling back to haversine legs."""
    if len(locations) < 2:
        raise ValueError("At least two locations are required for a route geometry.")

    try:
        client = client or OSRMClient()
    except ValueError as exc:
        logger.warning(f"OSRM client unavailable ({exc}); estimating route geometry with haversine.")
        return _haversine_geometry(locations)

    try:
        data = client.route([location.coordinates for location in locations])
        route = data["routes"][0]
        polyline = route.get("geometry")
        if polyline is not None:
            decode_polyline(polyline)
        return RouteGeometry(
            distance=float(route["distance"]),
            duration=float(route["duration"]),
            geometry=polyline,
            source="osrm",
        )
    except UpstreamUnavailableError as exc:
        logger.warning(f"OSRM route request failed: {exc}. Using haversine fallback.")
    except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
        logger.warning(f"Malformed OSRM route response: {exc}. Using haversine fallback.")
    return _haversine_geometry(locations)


def build_route_overlay(locations: Sequence[Location], geometry: RouteGeometry) -> dict:
    """Map overlay payload: decoded road path when available, straight lines otherwise."""
    coordinates = geometry.coordinates() or [location.coordinates for location in locations]
    return {
        "location_ids": [location.id for location in locations],
        "coordinates": [[lat, lon] for lat, lon in coordinates],
        "distance_m": geometry.distance,
        "duration_s": geometry.duration,
        "source": geometry.source,
    }
