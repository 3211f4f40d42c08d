#!/usr/bin/env python3
"""Check configuration and connectivity of the geocoding and routing backends."""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))

from parcel_router.config import settings
from parcel_router.models.domain import Address
from parcel_router.services.dependencies import get_geo_resolver, get_route_provider


def main():
    print("=" * 60)
    print("Parcel Router Backend Check")
    print("=" * 60)
    print()

    env_file = project_root / ".env"
    if env_file.exists():
        print(f"[OK] Found .env file at: {env_file}")
    else:
        print(f"[INFO] No .env file at {env_file}; using environment variables and defaults")
    print()

    print("1. Geocoder...")
    print(f"   Backend: {settings.geocoder_backend}")
    if settings.geocoder_backend == "nominatim" and not settings.geocoder_base_url:
        print("   [ERROR] PARCEL_ROUTER_GEOCODER_BASE_URL is not configured")
        return 1
    try:
        resolver = get_geo_resolver()
        sample = Address(street="House 12, Road 4", city="Dhaka", state="Dhaka", zip_code="1212")
        resolution = resolver.resolve(sample)
        print(f"   [OK] {sample.label()} -> {resolution.point.lat:.5f}, {resolution.point.lng:.5f}"
              f"{' (approximate)' if resolution.approximate else ''}")
    except Exception as e:
        print(f"   [ERROR] Geocoding failed: {e}")
        return 1
    print()

    print("2. Route provider...")
    print(f"   Provider: {settings.route_provider}")
    if settings.route_provider == "osrm":
        if not settings.osrm_base_url:
            print("   [ERROR] PARCEL_ROUTER_OSRM_BASE_URL is not configured")
            return 1
        print(f"   OSRM Base URL: {settings.osrm_base_url}")
        print(f"   OSRM Profile: {settings.osrm_profile}")
    try:
        provider = get_route_provider()
        if not provider.check_health():
            print("   [ERROR] Route provider is not responding")
            return 1
        origin = resolver.resolve(Address(street="Road 11", city="Banasree", state="Dhaka", zip_code="1219")).point
        target = resolver.resolve(Address(street="Road 2", city="Gulshan", state="Dhaka", zip_code="1212")).point
        matrix = provider.matrix([origin, target])
        print(f"   [OK] Matrix from '{matrix.source}': "
              f"{matrix.distances_km[0][1]:.2f} km, {matrix.durations_min[0][1]} min")
    except Exception as e:
        print(f"   [ERROR] Route provider check failed: {e}")
        return 1
    print()

    print("=" * 60)
    print("[SUCCESS] Backends are configured and working!")
    print("=" * 60)
    return 0


if __name__ == "__main__":
    sys.exit(main())
