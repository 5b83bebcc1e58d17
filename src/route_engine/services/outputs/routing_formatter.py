"""Serializers for routing outputs."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict

from ...models.domain import RouteResult


def route_result_to_json(result: RouteResult) -> dict:
    return {
        "ordered_locations": [asdict(location) for location in result.ordered_locations],
        "total_distance": result.total_distance,
        "total_duration": result.total_duration,
        "matrix_source": result.matrix_source,
        "legs": [
            {
                "from": asdict(leg.from_location),
                "to": asdict(leg.to_location),
                "distance": leg.distance,
                "duration": leg.duration,
            }
            for leg in result.legs
        ],
    }


def route_result_to_csv(result: RouteResult) -> str:
    buffer = io.StringIO()
    fieldnames = [
        "sequence",
        "from_id",
        "to_id",
        "distance_m",
        "duration_s",
        "total_distance_m",
        "total_duration_s",
    ]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames)
    writer.writeheader()
    for sequence, leg in enumerate(result.legs, start=1):
        writer.writerow(
            {
                "sequence": sequence,
                "from_id": leg.from_location.id,
                "to_id": leg.to_location.id,
                "distance_m": leg.distance,
                "duration_s": leg.duration,
                "total_distance_m": result.total_distance,
                "total_duration_s": result.total_duration,
            }
        )
    return buffer.getvalue()
