"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator, Sequence

import httpx

from ...config import settings
from ...exceptions import UpstreamUnavailableError
from ..geospatial import decode_polyline

logger = logging.getLogger(__name__)


def format_coordinates(coordinates: Sequence[tuple[float, float]]) -> str:
    """Convert ``(lat, lon)`` pairs to the OSRM ``lon,lat;lon,lat`` path segment."""

    return ";".join(f"{lon},{lat}" for lat, lon in coordinates)


class OSRMClient:
    """Single-attempt OSRM client.

    Every failure (transport, timeout, HTTP status, unparsable body or a
    ``code`` other than ``"Ok"``) is raised as ``UpstreamUnavailableError``.
    Pass ``http_client`` to control timeouts/transport; an injected client is
    left open, otherwise a short-lived client is created per request.
    """

    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.base_url = (base_url if base_url is not None else settings.osrm_base_url).strip().rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self._http_client = http_client

    @contextmanager
    def _client(self) -> Iterator[httpx.Client]:
        if self._http_client is not None:
            yield self._http_client
            return
        client = httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=settings.osrm_connect_timeout_seconds),
        )
        try:
            yield client
        finally:
            client.close()

    def _get(self, service: str, coordinates: Sequence[tuple[float, float]], params: dict) -> dict:
        url = f"{self.base_url}/{service}/v1/{self.profile}/{format_coordinates(coordinates)}"
        logger.debug(f"OSRM {service} request: {url} {params}")
        try:
            with self._client() as client:
                response = client.get(url, params=params)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise UpstreamUnavailableError(
                f"OSRM {service} request returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.TimeoutException as exc:
            raise UpstreamUnavailableError(f"OSRM {service} request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamUnavailableError(
                f"Failed to connect to OSRM service at {self.base_url}: {exc}"
            ) from exc
        except ValueError as exc:
            raise UpstreamUnavailableError(f"OSRM {service} response is not valid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise UpstreamUnavailableError(f"OSRM {service} response is not a JSON object.")
        if data.get("code") != "Ok":
            message = data.get("message") or data.get("code") or "Unknown OSRM error"
            raise UpstreamUnavailableError(f"OSRM {service} request failed: {message}")
        return data

    def table(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Get the distance/duration matrix for ``(lat, lon)`` coordinates."""
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM table.")

        data = self._get("table", coordinates, {"annotations": "distance,duration"})
        if "durations" not in data or "distances" not in data:
            raise UpstreamUnavailableError("OSRM response missing durations/distances.")
        return data

    def route(self, coordinates: Sequence[tuple[float, float]]) -> dict:
        """Get the road route through ``(lat, lon)`` waypoints, in the given order.

        Returns the raw OSRM payload; ``routes[0]`` carries ``distance`` (meters),
        ``duration`` (seconds) and ``geometry`` (encoded polyline).
        """
        if len(coordinates) < 2:
            raise ValueError("At least two coordinates are required for OSRM route.")

        data = self._get("route", coordinates, {"overview": "full", "geometries": "polyline"})
        routes = data.get("routes")
        if not isinstance(routes, list) or not routes:
            raise UpstreamUnavailableError("OSRM route response contains no routes.")
        return data


def check_health(base_url: str | None = None, http_client: httpx.Client | None = None) -> bool:
    """Check OSRM availability with a minimal two-point table request."""
    base = base_url if base_url is not None else settings.osrm_base_url
    if not base:
        return False
    try:
        client = OSRMClient(base_url=base, timeout=5.0, http_client=http_client)
        # Two points in central Cairo
        client.table([(30.0444, 31.2357), (30.0131, 31.2089)])
    except UpstreamUnavailableError as exc:
        logger.info(f"OSRM health check failed: {exc}")
        return False
    return True
