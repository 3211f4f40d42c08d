"""Greedy nearest-neighbor sequencing of delivery stops."""

from __future__ import annotations

import logging
from typing import Callable, Sequence, TypeVar

from ...config import settings
from ...models.domain import DeliveryStop, GeoPoint, LegMatrix, OptimizedSequence
from .distance import distance_km, duration_min

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Synthetic spacing used when no origin is available to measure from.
APPROXIMATE_STEP_DEGREES = 0.01
APPROXIMATE_FIRST_LEG_KM = 1.0
APPROXIMATE_LEG_KM_PER_INDEX = 0.5
APPROXIMATE_FIRST_LEG_MIN = 5
APPROXIMATE_LEG_MIN_PER_INDEX = 2


def nearest_neighbor_indices(count: int, cost: Callable[[int, int], float]) -> list[int]:
    """Visit order over nodes ``1..count`` starting at node 0.

    ``cost(a, b)`` is the travel cost between nodes. Ties go to the lowest index,
    so equal inputs always yield the same order.
    """
    remaining = list(range(1, count + 1))
    order: list[int] = []
    current = 0
    while remaining:
        best_position = 0
        best_cost = float("inf")
        for position, node in enumerate(remaining):
            leg = cost(current, node)
            if leg < best_cost:
                best_cost = leg
                best_position = position
        current = remaining.pop(best_position)
        order.append(current)
    return order


def nearest_neighbor_order(
    origin: GeoPoint,
    items: Sequence[T],
    point_of: Callable[[T], GeoPoint],
    distance: Callable[[GeoPoint, GeoPoint], float] = distance_km,
) -> list[T]:
    """Order ``items`` by repeatedly travelling to the closest unvisited one."""
    points = [origin, *(point_of(item) for item in items)]
    order = nearest_neighbor_indices(len(items), lambda a, b: distance(points[a], points[b]))
    return [items[node - 1] for node in order]


def approximate_sequence(stops: Sequence[DeliveryStop], base: GeoPoint | None = None) -> OptimizedSequence:
    """Input-order sequence with synthetic, evenly spaced coordinates."""
    base = base or GeoPoint(settings.default_base_lat, settings.default_base_lng)
    points = [base]
    distances: list[float] = []
    durations: list[int] = []
    for index, _stop in enumerate(stops):
        offset = index * APPROXIMATE_STEP_DEGREES
        points.append(GeoPoint(lat=base.lat + offset, lng=base.lng + offset))
        if index == 0:
            distances.append(APPROXIMATE_FIRST_LEG_KM)
            durations.append(APPROXIMATE_FIRST_LEG_MIN)
        else:
            distances.append(index * APPROXIMATE_LEG_KM_PER_INDEX)
            durations.append(index * APPROXIMATE_LEG_MIN_PER_INDEX)
    return OptimizedSequence(
        ordered_stops=list(stops),
        leg_distances_km=distances,
        leg_durations_min=durations,
        points=points,
        optimized=False,
    )


def optimize(
    origin: GeoPoint | None,
    stops: Sequence[DeliveryStop],
    matrix: LegMatrix | None = None,
    minutes_per_km: float | None = None,
) -> OptimizedSequence:
    """Sequence ``stops`` from ``origin`` using the nearest-neighbor heuristic.

    ``matrix`` holds leg costs with the origin at index 0 and ``stops[i]`` at
    index ``i + 1``; when omitted, haversine distances between the resolved
    points are used. Without an origin the stops keep their input order on
    synthetic coordinates and the sequence is marked as not optimized.
    """
    if not stops:
        return OptimizedSequence(
            ordered_stops=[],
            leg_distances_km=[],
            leg_durations_min=[],
            points=[origin] if origin is not None else [],
            optimized=False,
        )

    if origin is None or any(stop.resolved_point is None for stop in stops):
        logger.warning(f"No origin available for {len(stops)} stops; using approximate ordering")
        return approximate_sequence(stops)

    points = [origin, *(stop.resolved_point for stop in stops)]
    if matrix is None:

        def leg_distance(a: int, b: int) -> float:
            return distance_km(points[a], points[b])

        def leg_duration(a: int, b: int) -> int:
            return duration_min(distance_km(points[a], points[b]), minutes_per_km)

    else:

        def leg_distance(a: int, b: int) -> float:
            return matrix.distances_km[a][b]

        def leg_duration(a: int, b: int) -> int:
            return matrix.durations_min[a][b]

    order = nearest_neighbor_indices(len(stops), leg_distance)

    leg_distances: list[float] = []
    leg_durations: list[int] = []
    previous = 0
    for node in order:
        leg_distances.append(leg_distance(previous, node))
        leg_durations.append(leg_duration(previous, node))
        logger.debug(f"Leg {previous} -> {node}: {leg_distances[-1]:.3f} km, {leg_durations[-1]} min")
        previous = node

    return OptimizedSequence(
        ordered_stops=[stops[node - 1] for node in order],
        leg_distances_km=leg_distances,
        leg_durations_min=leg_durations,
        points=[origin, *(points[node] for node in order)],
        optimized=True,
    )
