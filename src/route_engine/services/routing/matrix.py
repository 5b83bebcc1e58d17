"""Distance matrix providers.

``DistanceMatrixPort`` is the capability the solver pipeline depends on. The
OSRM provider talks to the road network, the haversine provider estimates
from coordinates alone, and ``FallbackMatrixProvider`` composes the two so a
matrix is always produced.
"""

from __future__ import annotations

import logging
from typing import Protocol, Sequence

from ...config import settings
from ...exceptions import UpstreamUnavailableError
from ...models.domain import DistanceMatrix, Location
from ..geospatial import haversine_km, travel_seconds
from .osrm_client import OSRMClient

logger = logging.getLogger(__name__)


class DistanceMatrixPort(Protocol):
    def get_matrix(self, locations: Sequence[Location]) -> DistanceMatrix:
        ...


class OSRMMatrixProvider:
    """Road-network matrix from the OSRM table service."""

    def __init__(self, client: OSRMClient) -> None:
        self.client = client

    def get_matrix(self, locations: Sequence[Location]) -> DistanceMatrix:
        table = self.client.table([location.coordinates for location in locations])
        try:
            return DistanceMatrix.from_table(table, size=len(locations), source="osrm")
        except ValueError as exc:
            raise UpstreamUnavailableError(f"Malformed OSRM table: {exc}") from exc


class HaversineMatrixProvider:
    """Great-circle estimate; symmetric, zero diagonal, never touches the network."""

    def __init__(self, average_speed_kmh: float | None = None) -> None:
        self.average_speed_kmh = (
            average_speed_kmh if average_speed_kmh is not None else settings.fallback_average_speed_kmh
        )
        if self.average_speed_kmh <= 0:
            raise ValueError("Average speed must be positive.")

    def get_matrix(self, locations: Sequence[Location]) -> DistanceMatrix:
        n = len(locations)
        distances = [[0.0] * n for _ in range(n)]
        durations = [[0.0] * n for _ in range(n)]

        for i in range(n):
            for j in range(i + 1, n):
                distance_km = haversine_km(
                    locations[i].latitude,
                    locations[i].longitude,
                    locations[j].latitude,
                    locations[j].longitude,
                )
                distances[i][j] = distances[j][i] = distance_km * 1000.0
                durations[i][j] = durations[j][i] = travel_seconds(distance_km, self.average_speed_kmh)

        return DistanceMatrix(
            distances=tuple(tuple(row) for row in distances),
            durations=tuple(tuple(row) for row in durations),
            source="haversine",
        )


class FallbackMatrixProvider:
    """Try ``primary`` once and fall back on any failure."""

    def __init__(self, primary: DistanceMatrixPort, fallback: DistanceMatrixPort) -> None:
        self.primary = primary
        self.fallback = fallback

    def get_matrix(self, locations: Sequence[Location]) -> DistanceMatrix:
        try:
            matrix = self.primary.get_matrix(locations)
        except UpstreamUnavailableError as exc:
            logger.warning(f"OSRM table request failed: {exc}. Using haversine fallback.")
        except Exception as exc:
            logger.error(f"Unexpected error getting distance matrix: {exc}. Using haversine fallback.")
        else:
            logger.info(f"Distance matrix for {len(locations)} locations computed from {matrix.source}")
            return matrix

        matrix = self.fallback.get_matrix(locations)
        logger.info(f"Fallback distance matrix for {len(locations)} locations computed from {matrix.source}")
        return matrix


def default_matrix_provider() -> DistanceMatrixPort:
    """OSRM with haversine fallback, or haversine alone when OSRM is not configured."""
    fallback = HaversineMatrixProvider()
    try:
        client = OSRMClient()
    except ValueError as exc:
        logger.warning(f"OSRM client unavailable ({exc}); distances will be estimated with haversine.")
        return fallback
    return FallbackMatrixProvider(OSRMMatrixProvider(client), fallback)
