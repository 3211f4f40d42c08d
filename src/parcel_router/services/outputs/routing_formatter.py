"""Serializers for routing outputs."""

from __future__ import annotations

from typing import Sequence

from ...models.domain import RouteResult, Waypoint
from ...schemas.routing import (
    OptimizedRouteResponse,
    ParcelDataModel,
    ParcelPayload,
    WaypointModel,
)
from ..routing.assembler import NO_ACTIVE_DELIVERIES_MESSAGE, format_distance, format_duration


def waypoint_to_model(sequence: int, waypoint: Waypoint) -> WaypointModel:
    meta = waypoint.stop_metadata
    return WaypointModel(
        sequence=sequence,
        type=waypoint.type,
        address=waypoint.address,
        lat=waypoint.point.lat,
        lng=waypoint.point.lng,
        tracking_number=waypoint.identifier,
        status=waypoint.status,
        distance_from_previous_km=waypoint.distance_from_previous_km,
        duration_from_previous_min=waypoint.duration_from_previous_min,
        distance_from_previous=format_distance(waypoint.distance_from_previous_km),
        duration_from_previous=format_duration(waypoint.duration_from_previous_min),
        customer_name=(meta.customer_name or "Unknown") if meta else None,
        customer_phone=(meta.customer_phone or "N/A") if meta else None,
        parcel_data=ParcelDataModel(
            weight=meta.weight,
            dimensions=meta.dimensions,
            payment_type=meta.payment_type,
            cod_amount=meta.cod_amount,
            special_instructions=meta.special_instructions,
        )
        if meta
        else None,
    )


def route_result_to_response(
    result: RouteResult,
    parcels: Sequence[ParcelPayload] = (),
    road_geometry: Sequence[tuple[float, float]] | None = None,
) -> OptimizedRouteResponse:
    return OptimizedRouteResponse(
        success=True,
        waypoints=[waypoint_to_model(index, waypoint) for index, waypoint in enumerate(result.waypoints)],
        distance=format_distance(result.total_distance_km),
        duration=format_duration(result.total_duration_min),
        total_distance_km=result.total_distance_km,
        total_duration_min=result.total_duration_min,
        optimized=result.optimized,
        summary=result.summary,
        polyline=[[point.lat, point.lng] for point in result.polyline],
        road_geometry=[[lat, lng] for lat, lng in road_geometry] if road_geometry is not None else None,
        parcels=list(parcels),
        metadata=result.metadata,
    )


def empty_route_response() -> OptimizedRouteResponse:
    return OptimizedRouteResponse(
        success=True,
        message=NO_ACTIVE_DELIVERIES_MESSAGE,
        waypoints=[],
        distance="0 km",
        duration="0 min",
        total_distance_km=0.0,
        total_duration_min=0,
        optimized=False,
        polyline=[],
        parcels=[],
    )
