"""Routing orchestration service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional, Sequence

from ...exceptions import InsufficientLocationsError
from ...models.domain import (
    END_LOCATION_ID,
    START_LOCATION_ID,
    Location,
    RouteResult,
    VisitAssignment,
)
from ...schemas.routing import (
    LocationModel,
    OptimizeRouteRequest,
    RouteLegModel,
    RouteResponse,
)
from .assembler import assemble
from .geometry import build_route_overlay, fetch_route_geometry
from .matrix import DistanceMatrixPort, default_matrix_provider
from .osrm_client import OSRMClient
from .solver import solve, validate_indices

logger = logging.getLogger(__name__)


def optimize(
    locations: Sequence[Location],
    start_index: int,
    end_index: Optional[int] = None,
    *,
    provider: DistanceMatrixPort | None = None,
) -> RouteResult:
    """Order ``locations`` from ``start_index`` (to ``end_index`` when given) by nearest neighbor.

    Only structural input errors are raised (``InsufficientLocationsError`` and
    its ``InvalidIndexError`` subclass), before any network call is made. The
    distance matrix is fetched once and shared by the solver and the assembler.
    """
    validate_indices(len(locations), start_index, end_index)

    provider = provider or default_matrix_provider()
    matrix = provider.get_matrix(locations)
    solved = solve(matrix, start_index, end_index)
    result = assemble(locations, solved.order, matrix)
    logger.info(
        f"Optimized route over {len(locations)} locations: "
        f"{result.total_distance / 1000.0:.2f} km, {result.total_duration / 60.0:.1f} min "
        f"(source={matrix.source})"
    )
    return result


def build_collector_locations(
    stops: Sequence[Location],
    home: Optional[tuple[float, float]] = None,
    office: Optional[tuple[float, float]] = None,
) -> tuple[list[Location], int, Optional[int]]:
    """Lay out ``[home?] + stops + [office?]`` with the matching start/end indices.

    Without a home the first stop is the start; without an office the route is open.
    """
    if not stops:
        raise InsufficientLocationsError("No customers with valid locations found.")

    locations: list[Location] = []
    if home is not None:
        locations.append(Location(id=START_LOCATION_ID, latitude=home[0], longitude=home[1], name="Start (Home)"))
    locations.extend(stops)
    if office is not None:
        locations.append(Location(id=END_LOCATION_ID, latitude=office[0], longitude=office[1], name="End (Office)"))

    if len(locations) < 2:
        raise InsufficientLocationsError("Need at least 2 locations to optimize route.")

    end_index = len(locations) - 1 if office is not None else None
    return locations, 0, end_index


def plan_collector_route(
    stops: Sequence[Location],
    home: Optional[tuple[float, float]] = None,
    office: Optional[tuple[float, float]] = None,
    *,
    provider: DistanceMatrixPort | None = None,
) -> RouteResult:
    locations, start_index, end_index = build_collector_locations(stops, home=home, office=office)
    return optimize(locations, start_index, end_index, provider=provider)


def visit_sequence(result: RouteResult) -> list[VisitAssignment]:
    """Customer stops in visiting order, numbered from 1, without home/office."""
    stops = [
        location
        for location in result.ordered_locations
        if location.id not in (START_LOCATION_ID, END_LOCATION_ID)
    ]
    return [
        VisitAssignment(location_id=location.id, optimized_order=position, name=location.name)
        for position, location in enumerate(stops, start=1)
    ]


def optimize_request(
    payload: OptimizeRouteRequest,
    *,
    provider: DistanceMatrixPort | None = None,
    client: OSRMClient | None = None,
) -> RouteResponse:
    """Run ``optimize`` for a validated request; ``client`` is used for the optional route geometry."""
    locations = [model.to_domain() for model in payload.locations]
    result = optimize(locations, payload.start_index, payload.end_index, provider=provider)

    metadata: dict = {
        "matrix_source": result.matrix_source,
        "location_count": len(locations),
        "optimized_at": datetime.now(timezone.utc).isoformat(),
    }
    if payload.include_geometry:
        geometry = fetch_route_geometry(result.ordered_locations, client=client)
        metadata["map_overlay"] = build_route_overlay(result.ordered_locations, geometry)

    return RouteResponse(
        ordered_locations=[LocationModel.from_domain(location) for location in result.ordered_locations],
        total_distance=result.total_distance,
        total_duration=result.total_duration,
        legs=[
            RouteLegModel(
                from_location=LocationModel.from_domain(leg.from_location),
                to_location=LocationModel.from_domain(leg.to_location),
                distance=leg.distance,
                duration=leg.duration,
            )
            for leg in result.legs
        ],
        metadata=metadata,
    )
