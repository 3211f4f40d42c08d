"""Turn an optimized stop sequence into a displayable route."""

from __future__ import annotations

from ...models.domain import Address, GeoPoint, OptimizedSequence, RouteResult, Waypoint

ORIGIN_IDENTIFIER = "ORIGIN"
DEFAULT_ORIGIN_LABEL = "Starting Point"
NO_ACTIVE_DELIVERIES_MESSAGE = "No active deliveries for route optimization"


def format_distance(distance_km: float) -> str:
    return f"{distance_km:.1f} km"


def format_duration(duration_min: int) -> str:
    return f"{duration_min} min"


def build_summary(stop_count: int, optimized: bool) -> str:
    if stop_count == 0:
        return NO_ACTIVE_DELIVERIES_MESSAGE
    if optimized:
        return f"Optimized route with {stop_count} deliveries"
    return "Using approximate coordinates for mapping"


def assemble(
    origin: GeoPoint | None,
    sequence: OptimizedSequence,
    origin_address: Address | None = None,
    metadata: dict | None = None,
) -> RouteResult:
    origin_point = sequence.points[0] if sequence.points else origin
    if origin_point is None:
        # Nothing to place: no stops and no origin to start from
        return RouteResult(
            waypoints=[],
            total_distance_km=0.0,
            total_duration_min=0,
            polyline=[],
            optimized=False,
            summary=build_summary(0, False),
            metadata=dict(metadata or {}),
        )

    waypoints = [
        Waypoint(
            point=origin_point,
            address=origin_address.label() if origin_address else DEFAULT_ORIGIN_LABEL,
            type="origin",
            distance_from_previous_km=0.0,
            duration_from_previous_min=0,
            identifier=ORIGIN_IDENTIFIER,
            status="origin",
        )
    ]

    for position, stop in enumerate(sequence.ordered_stops):
        waypoints.append(
            Waypoint(
                point=sequence.points[position + 1],
                address=stop.destination.label(),
                type="delivery",
                distance_from_previous_km=sequence.leg_distances_km[position],
                duration_from_previous_min=sequence.leg_durations_min[position],
                identifier=stop.identifier,
                status=stop.status,
                stop_metadata=stop.metadata,
            )
        )

    total_distance = sum(waypoint.distance_from_previous_km for waypoint in waypoints[1:])
    total_duration = sum(waypoint.duration_from_previous_min for waypoint in waypoints[1:])

    return RouteResult(
        waypoints=waypoints,
        total_distance_km=total_distance,
        total_duration_min=total_duration,
        polyline=[waypoint.point for waypoint in waypoints],
        optimized=sequence.optimized,
        summary=build_summary(len(sequence.ordered_stops), sequence.optimized),
        metadata=dict(metadata or {}),
    )
