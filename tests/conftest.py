import pytest


@pytest.fixture(autouse=True)
def clear_backend_cache():
    from src.parcel_router.services.dependencies import get_geo_resolver, get_route_provider

    get_geo_resolver.cache_clear()
    get_route_provider.cache_clear()
    yield
    get_geo_resolver.cache_clear()
    get_route_provider.cache_clear()
