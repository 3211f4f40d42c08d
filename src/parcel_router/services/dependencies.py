"""Dependency providers wiring geocoding and routing backends into the API."""

from __future__ import annotations

import logging
from functools import lru_cache

from ..config import settings
from .geocoding import AnchorTableResolver, CachedResolver, GeoResolver, NominatimResolver
from .routing.provider import HaversineRouteProvider, OSRMRouteProvider, RouteProvider

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_geo_resolver() -> GeoResolver:
    """Process-wide resolver selected by ``settings.geocoder_backend``."""
    if settings.geocoder_backend == "nominatim":
        logger.info(f"Using Nominatim geocoder at {settings.geocoder_base_url}")
        return CachedResolver(NominatimResolver(), max_entries=settings.geocoder_cache_size)
    return AnchorTableResolver()


@lru_cache(maxsize=1)
def get_route_provider() -> RouteProvider:
    """Process-wide leg-cost provider selected by ``settings.route_provider``."""
    if settings.route_provider == "osrm":
        logger.info(f"Using OSRM route provider at {settings.osrm_base_url}")
        return OSRMRouteProvider()
    return HaversineRouteProvider()
