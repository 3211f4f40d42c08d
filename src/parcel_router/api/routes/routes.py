"""Routing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from ...schemas.routing import OptimizedRouteRequest, OptimizedRouteResponse
from ...services.dependencies import get_geo_resolver, get_route_provider
from ...services.errors import GeocodingUnavailable
from ...services.export.geojson import route_to_geojson
from ...services.geocoding.base import GeoResolver
from ...services.routing.provider import RouteProvider
from ...services.routing.service import (
    build_agent_route,
    compute_route,
    filter_active_parcels,
    select_origin_address,
    to_delivery_stop,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/routes", tags=["routes"])


def _translate_errors(exc: Exception) -> HTTPException:
    if isinstance(exc, GeocodingUnavailable):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    if isinstance(exc, ValueError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))
    logger.exception(f"Error optimizing route: {exc}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Failed to optimize route: {exc}",
    )


@router.post("/optimize", response_model=OptimizedRouteResponse, status_code=status.HTTP_200_OK)
def optimize(
    payload: OptimizedRouteRequest,
    resolver: GeoResolver = Depends(get_geo_resolver),
    provider: RouteProvider = Depends(get_route_provider),
) -> OptimizedRouteResponse:
    try:
        return build_agent_route(payload, resolver, provider)
    except Exception as exc:
        raise _translate_errors(exc) from exc


@router.post("/optimize/geojson", status_code=status.HTTP_200_OK)
def optimize_geojson(
    payload: OptimizedRouteRequest,
    resolver: GeoResolver = Depends(get_geo_resolver),
    provider: RouteProvider = Depends(get_route_provider),
) -> dict:
    """Compute the route and return it as a GeoJSON FeatureCollection."""
    try:
        active = filter_active_parcels(payload.parcels)
        if not active:
            return {"type": "FeatureCollection", "features": []}
        stops = [to_delivery_stop(parcel) for parcel in active]
        result = compute_route(select_origin_address(payload, active), stops, resolver, provider)
        return route_to_geojson(result)
    except Exception as exc:
        raise _translate_errors(exc) from exc
