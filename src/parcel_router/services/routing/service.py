"""Routing orchestration service."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Sequence

from ...config import settings
from ...models.domain import Address, DeliveryStop, GeoPoint, RouteResult, StopMetadata
from ...schemas.routing import AddressPayload, OptimizedRouteRequest, OptimizedRouteResponse, ParcelPayload
from ..geocoding.base import GeoResolver
from ..outputs.routing_formatter import empty_route_response, route_result_to_response
from ..parcels.status import is_active
from .assembler import assemble
from .optimizer import optimize
from .provider import RouteProvider

logger = logging.getLogger(__name__)


def to_address(payload: AddressPayload) -> Address:
    return Address(
        street=payload.street,
        city=payload.city,
        state=payload.state,
        zip_code=payload.zip_code,
        country=payload.country or settings.default_country,
    )


def to_delivery_stop(parcel: ParcelPayload) -> DeliveryStop:
    customer = parcel.customer
    return DeliveryStop(
        identifier=parcel.tracking_number,
        destination=to_address(parcel.destination),
        status=parcel.status,
        metadata=StopMetadata(
            customer_name=customer.name if customer else None,
            customer_phone=customer.phone if customer else None,
            special_instructions=parcel.special_instructions,
            weight=parcel.weight,
            dimensions=parcel.dimensions,
            payment_type=parcel.payment_type,
            cod_amount=parcel.cod_amount,
        ),
    )


def filter_active_parcels(parcels: Sequence[ParcelPayload]) -> list[ParcelPayload]:
    """Parcels still awaiting delivery; unknown statuses raise ``ValueError``."""
    return [parcel for parcel in parcels if is_active(parcel.status)]


def select_origin_address(request: OptimizedRouteRequest, active: Sequence[ParcelPayload]) -> Address | None:
    if request.origin is not None:
        return to_address(request.origin)
    if active and active[0].origin is not None:
        return to_address(active[0].origin)
    return None


def compute_route(
    origin_address: Address | None,
    stops: Sequence[DeliveryStop],
    resolver: GeoResolver,
    provider: RouteProvider,
) -> RouteResult:
    """Resolve, sequence and assemble a route for ``stops``.

    Every destination is validated first so a malformed address fails the
    request before any geocoding happens. ``GeocodingUnavailable`` from the
    resolver propagates to the caller.
    """
    for stop in stops:
        stop.destination.validate(reference=stop.identifier)
    if origin_address is not None:
        origin_address.validate(reference="origin")

    metadata: dict = {
        "resolver": resolver.name,
        "provider": provider.name,
        "minutes_per_km": settings.minutes_per_km,
        "stop_count": len(stops),
        "approximate_points": 0,
    }

    origin: GeoPoint | None = None
    resolved_stops = list(stops)
    if origin_address is not None:
        origin_resolution = resolver.resolve(origin_address)
        origin = origin_resolution.point
        approximate = int(origin_resolution.approximate)
        resolved_stops = []
        for stop in stops:
            resolution = resolver.resolve(stop.destination)
            approximate += int(resolution.approximate)
            resolved_stops.append(
                replace(stop, resolved_point=resolution.point, approximate=resolution.approximate)
            )
        metadata["approximate_points"] = approximate
        if approximate:
            logger.warning(f"{approximate} address(es) placed by approximation near the default base")

    matrix = None
    if origin is not None and resolved_stops:
        matrix = provider.matrix([origin, *(stop.resolved_point for stop in resolved_stops)])
        metadata["provider"] = matrix.source

    sequence = optimize(origin, resolved_stops, matrix)
    if metadata["approximate_points"] and sequence.optimized:
        # Order is still nearest-neighbor, but over guessed coordinates
        sequence = replace(sequence, optimized=False)
    result = assemble(origin, sequence, origin_address=origin_address, metadata=metadata)
    logger.info(
        f"Computed route with {len(resolved_stops)} stops: "
        f"{result.total_distance_km:.1f} km, {result.total_duration_min} min, optimized={result.optimized}"
    )
    return result


def build_agent_route(
    request: OptimizedRouteRequest,
    resolver: GeoResolver,
    provider: RouteProvider,
) -> OptimizedRouteResponse:
    active = filter_active_parcels(request.parcels)
    if not active:
        logger.info("No active deliveries for route optimization")
        return empty_route_response()

    origin_address = select_origin_address(request, active)
    if origin_address is None:
        logger.warning("No origin address supplied or recorded on parcels; route will be approximate")

    stops = [to_delivery_stop(parcel) for parcel in active]
    result = compute_route(origin_address, stops, resolver, provider)

    road_geometry = None
    if request.include_road_geometry and origin_address is not None:
        road_geometry = [point.as_pair() for point in provider.path(result.polyline)]

    return route_result_to_response(result, parcels=active, road_geometry=road_geometry)
