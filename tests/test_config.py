import pytest
from pydantic import ValidationError

from src.parcel_router.config import Settings


def test_nominatim_backend_requires_base_url():
    with pytest.raises(ValidationError, match="geocoder_base_url"):
        Settings(_env_file=None, geocoder_backend="nominatim", geocoder_base_url=None)


def test_osrm_provider_requires_base_url():
    with pytest.raises(ValidationError, match="osrm_base_url"):
        Settings(_env_file=None, route_provider="osrm", osrm_base_url=None)


def test_network_backends_accept_configured_urls():
    configured = Settings(
        _env_file=None,
        geocoder_backend="nominatim",
        geocoder_base_url="http://geocoder.test",
        route_provider="osrm",
        osrm_base_url="http://osrm.test",
    )

    assert configured.geocoder_backend == "nominatim"
    assert configured.route_provider == "osrm"


def test_anchor_table_and_origins_parse_from_strings():
    configured = Settings(
        _env_file=None,
        area_anchors='{"Banani": [23.7937, 90.4066]}',
        frontend_allowed_origins="http://a.test, http://b.test",
    )

    assert configured.area_anchors == {"Banani": (23.7937, 90.4066)}
    assert configured.frontend_allowed_origins == ("http://a.test", "http://b.test")
