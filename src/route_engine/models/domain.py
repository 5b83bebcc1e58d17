"""Domain models for route optimization."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple

from ..services.geospatial import decode_polyline

Grid = Tuple[Tuple[float, ...], ...]

START_LOCATION_ID = "start"
END_LOCATION_ID = "end"


@dataclass(frozen=True, slots=True)
class Location:
    """A point to visit: a customer, or the collector's home/office."""

    id: str
    latitude: float
    longitude: float
    name: Optional[str] = None

    @property
    def coordinates(self) -> tuple[float, float]:
        return (self.latitude, self.longitude)


def _as_grid(rows: Sequence[Sequence[Any]], size: int, label: str) -> Grid:
    if not isinstance(rows, (list, tuple)) or len(rows) != size:
        raise ValueError(f"{label} matrix must have {size} rows.")
    grid = []
    for row in rows:
        if not isinstance(row, (list, tuple)) or len(row) != size:
            raise ValueError(f"{label} matrix must be {size}x{size}.")
        values = []
        for value in row:
            # bool is an int subclass but never a valid cell
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{label} matrix contains a non-numeric cell: {value!r}")
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{label} matrix contains an invalid cell: {value!r}")
            values.append(float(value))
        grid.append(tuple(values))
    return tuple(grid)


@dataclass(frozen=True, slots=True)
class DistanceMatrix:
    """Pairwise distances (meters) and durations (seconds) aligned with a location list."""

    distances: Grid
    durations: Grid
    source: str = "osrm"

    @property
    def size(self) -> int:
        return len(self.distances)

    @classmethod
    def from_table(cls, payload: dict, size: int, source: str = "osrm") -> "DistanceMatrix":
        """Validate an OSRM-style ``{"distances": ..., "durations": ...}`` payload."""

        if "distances" not in payload or "durations" not in payload:
            raise ValueError("Table payload missing distances/durations.")
        return cls(
            distances=_as_grid(payload["distances"], size, "Distance"),
            durations=_as_grid(payload["durations"], size, "Duration"),
            source=source,
        )


@dataclass(frozen=True, slots=True)
class SolveResult:
    order: Tuple[int, ...]
    total_distance: float


@dataclass(frozen=True, slots=True)
class RouteLeg:
    from_location: Location
    to_location: Location
    distance: float
    duration: float


@dataclass(frozen=True, slots=True)
class RouteResult:
    ordered_locations: Tuple[Location, ...]
    total_distance: float
    total_duration: float
    legs: Tuple[RouteLeg, ...]
    matrix_source: str = "osrm"


@dataclass(frozen=True, slots=True)
class RouteGeometry:
    """Road geometry for an already ordered list of locations."""

    distance: float
    duration: float
    geometry: Optional[str] = None
    source: str = "osrm"

    def coordinates(self) -> list[tuple[float, float]]:
        """Decoded road path as ``(lat, lon)`` pairs; empty without a polyline."""
        if not self.geometry:
            return []
        return decode_polyline(self.geometry)


@dataclass(frozen=True, slots=True)
class VisitAssignment:
    location_id: str
    optimized_order: int
    name: Optional[str] = None
