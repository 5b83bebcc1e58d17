"""Exceptions raised by the route engine."""

from __future__ import annotations


class RouteEngineError(Exception):
    """Base route engine error."""


class InsufficientLocationsError(RouteEngineError, ValueError):
    """Raised when there are too few usable locations to build a route."""


class InvalidIndexError(InsufficientLocationsError):
    """Raised when a start or end index is out of range or the two coincide."""


class UpstreamUnavailableError(RouteEngineError):
    """Raised when the OSRM service fails or answers with an unusable payload.

    Never leaves the engine: matrix and geometry lookups catch it and fall back
    to haversine estimates.
    """
