"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...config import settings

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/geocoder", status_code=status.HTTP_200_OK)
def health_geocoder() -> dict:
    """Check the configured geocoding backend."""
    try:
        from ...services.dependencies import get_geo_resolver

        resolver = get_geo_resolver()
        return {"service": "geocoder", "backend": resolver.name, "healthy": resolver.check_health()}
    except Exception as e:
        return {"service": "geocoder", "backend": settings.geocoder_backend, "healthy": False, "error": str(e)}


@router.get("/health/osrm", status_code=status.HTTP_200_OK)
def health_osrm() -> dict:
    """Check OSRM service health."""
    try:
        from ...services.routing.osrm_client import check_health as osrm_health_check

        return {"service": "osrm", "configured": bool(settings.osrm_base_url), "healthy": osrm_health_check()}
    except Exception as e:
        return {"service": "osrm", "configured": bool(settings.osrm_base_url), "healthy": False, "error": str(e)}
