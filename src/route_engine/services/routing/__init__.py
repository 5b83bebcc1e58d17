"""Route optimization services."""

from .assembler import assemble
from .geometry import build_route_overlay, fetch_route_geometry
from .matrix import (
    DistanceMatrixPort,
    FallbackMatrixProvider,
    HaversineMatrixProvider,
    OSRMMatrixProvider,
    default_matrix_provider,
)
from ..geospatial import decode_polyline
from .osrm_client import OSRMClient, check_health
from .service import (
    build_collector_locations,
    optimize,
    optimize_request,
    plan_collector_route,
    visit_sequence,
)
from .solver import solve, validate_indices

__all__ = [
    "assemble",
    "build_collector_locations",
    "build_route_overlay",
    "check_health",
    "decode_polyline",
    "default_matrix_provider",
    "DistanceMatrixPort",
    "FallbackMatrixProvider",
    "fetch_route_geometry",
    "HaversineMatrixProvider",
    "optimize",
    "optimize_request",
    "OSRMClient",
    "OSRMMatrixProvider",
    "plan_collector_route",
    "solve",
    "validate_indices",
    "visit_sequence",
]
