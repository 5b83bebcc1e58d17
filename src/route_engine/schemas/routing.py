"""Routing request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import Location


class LocationModel(BaseModel):
    id: str = Field(..., min_length=1)
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    name: Optional[str] = None

    def to_domain(self) -> Location:
        return Location(id=self.id, latitude=self.latitude, longitude=self.longitude, name=self.name)

    @classmethod
    def from_domain(cls, location: Location) -> "LocationModel":
        return cls(id=location.id, latitude=location.latitude, longitude=location.longitude, name=location.name)


class OptimizeRouteRequest(BaseModel):
    locations: List[LocationModel] = Field(..., min_length=2)
    start_index: int = Field(default=0, ge=0, description="Index of the fixed starting point (e.g. home).")
    end_index: Optional[int] = Field(
        default=None,
        ge=0,
        description="Index of the fixed ending point (e.g. office). Omit for an open route.",
    )
    include_geometry: bool = Field(
        default=False,
        description="If True, also fetch the road polyline for the optimized order.",
    )


class RouteLegModel(BaseModel):
    from_location: LocationModel
    to_location: LocationModel
    distance: float
    duration: float


class RouteResponse(BaseModel):
    ordered_locations: List[LocationModel]
    total_distance: float
    total_duration: float
    legs: List[RouteLegModel]
    metadata: dict
