"""Nearest-neighbor visit ordering with a fixed start and optional fixed end.

Greedy heuristic, O(N^2): from the current point always move to the closest
unvisited point, scanning indices in ascending order so the first of several
equally close points wins. There is no local improvement pass, so tours on
clustered inputs can be noticeably longer than optimal.
"""

from __future__ import annotations

from typing import Optional, Sequence

from ...exceptions import InsufficientLocationsError, InvalidIndexError
from ...models.domain import DistanceMatrix, SolveResult


def validate_indices(size: int, start_index: int, end_index: Optional[int] = None) -> None:
    if size < 2:
        raise InsufficientLocationsError(f"Need at least 2 locations to optimize route, got {size}.")
    if not 0 <= start_index < size:
        raise InvalidIndexError(f"Start index {start_index} is out of range for {size} locations.")
    if end_index is not None:
        if not 0 <= end_index < size:
            raise InvalidIndexError(f"End index {end_index} is out of range for {size} locations.")
        if end_index == start_index:
            raise InvalidIndexError("Start and end index must differ.")


def route_distance(distances: Sequence[Sequence[float]], order: Sequence[int]) -> float:
    return sum(distances[order[k]][order[k + 1]] for k in range(len(order) - 1))


def solve(matrix: DistanceMatrix, start_index: int, end_index: Optional[int] = None) -> SolveResult:
    distances = matrix.distances
    n = len(distances)
    if any(len(row) != n for row in distances):
        raise InsufficientLocationsError("Distance matrix must be square.")
    validate_indices(n, start_index, end_index)

    order = [start_index]
    visited = {start_index}
    current = start_index
    target_length = n - 1 if end_index is not None else n

    while len(order) < target_length:
        nearest_index = None
        nearest_distance = 0.0
        for i in range(n):
            if i in visited or i == end_index:
                continue
            distance = distances[current][i]
            if nearest_index is None or distance < nearest_distance:
                nearest_index = i
                nearest_distance = distance

        if nearest_index is None:
            break

        visited.add(nearest_index)
        order.append(nearest_index)
        current = nearest_index

    if end_index is not None:
        order.append(end_index)

    return SolveResult(order=tuple(order), total_distance=route_distance(distances, order))
