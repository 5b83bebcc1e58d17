"""Collector route optimization engine."""

from .exceptions import (
    InsufficientLocationsError,
    InvalidIndexError,
    RouteEngineError,
    UpstreamUnavailableError,
)
from .models.domain import DistanceMatrix, Location, RouteGeometry, RouteLeg, RouteResult, VisitAssignment
from .services.geospatial import decode_polyline
from .services.outputs.routing_formatter import route_result_to_csv, route_result_to_json
from .services.routing import (
    build_collector_locations,
    build_route_overlay,
    check_health,
    fetch_route_geometry,
    optimize,
    optimize_request,
    plan_collector_route,
    visit_sequence,
)

__all__ = [
    "build_collector_locations",
    "build_route_overlay",
    "check_health",
    "decode_polyline",
    "DistanceMatrix",
    "fetch_route_geometry",
    "InsufficientLocationsError",
    "InvalidIndexError",
    "Location",
    "optimize",
    "optimize_request",
    "plan_collector_route",
    "route_result_to_csv",
    "route_result_to_json",
    "RouteEngineError",
    "RouteGeometry",
    "RouteLeg",
    "RouteResult",
    "UpstreamUnavailableError",
    "visit_sequence",
    "VisitAssignment",
]
