"""Turn a solved visit order into a route result."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import DistanceMatrix, Location, RouteLeg, RouteResult


def assemble(locations: Sequence[Location], order: Sequence[int], matrix: DistanceMatrix) -> RouteResult:
    ordered_locations = tuple(locations[index] for index in order)
    legs = tuple(
        RouteLeg(
            from_location=locations[src],
            to_location=locations[dst],
            distance=matrix.distances[src][dst],
            duration=matrix.durations[src][dst],
        )
        for src, dst in zip(order, order[1:])
    )
    return RouteResult(
        ordered_locations=ordered_locations,
        total_distance=sum(leg.distance for leg in legs),
        total_duration=sum(leg.duration for leg in legs),
        legs=legs,
        matrix_source=matrix.source,
    )
