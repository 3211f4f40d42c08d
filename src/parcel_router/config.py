"""Application configuration and settings management."""

from typing import Any, Literal, Optional

import json
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_AREA_ANCHORS: dict[str, tuple[float, float]] = {
    "banasree": (23.7741, 90.4277),
    "gulshan": (23.7940, 90.4150),
    "dhanmondi": (23.7465, 90.3760),
    "uttara": (23.8759, 90.3795),
    "mirpur": (23.8223, 90.3654),
    "motijheel": (23.7341, 90.4129),
    "farmgate": (23.7550, 90.3850),
    "mohakhali": (23.7791, 90.4054),
}


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PARCEL_ROUTER_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Parcel Router API"
    api_prefix: str = "/api"
    log_level: str = Field(default="INFO", description="Root log level applied at startup.")
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    # Geocoding
    default_country: str = "Bangladesh"
    default_base_lat: float = Field(default=23.8103, ge=-90.0, le=90.0)
    default_base_lng: float = Field(default=90.4125, ge=-180.0, le=180.0)
    area_anchors: dict[str, tuple[float, float]] = Field(
        default_factory=lambda: dict(DEFAULT_AREA_ANCHORS),
        description="Named areas with known coordinates, matched by substring against addresses.",
    )
    geocoder_backend: Literal["anchor", "nominatim"] = Field(
        default="anchor",
        description="Which geocoder implementation the API resolves addresses with.",
    )
    geocoder_base_url: Optional[str] = Field(
        default=None,
        description="Base URL of a Nominatim-compatible geocoder (e.g., https://nominatim.openstreetmap.org).",
    )
    geocoder_user_agent: str = "parcel-router/0.1"
    geocoder_timeout_seconds: float = Field(default=10.0, gt=0.0)
    geocoder_max_retries: int = Field(default=3, ge=0)
    geocoder_backoff_seconds: float = Field(default=0.5, ge=0.0)
    geocoder_cache_size: int = Field(default=1024, ge=0)

    # Distance / routing
    minutes_per_km: float = Field(
        default=3.0,
        gt=0.0,
        description="Travel-time factor; 3 min/km is an average urban speed of 20 km/h.",
    )
    route_provider: Literal["haversine", "osrm"] = Field(
        default="haversine",
        description="Leg-cost provider used to build distance/duration matrices.",
    )
    osrm_base_url: Optional[str] = Field(
        default=None,
        description="Base URL for the OSRM routing service (e.g., http://localhost:5000).",
    )
    osrm_profile: Literal["driving", "driving-hgv"] = Field(
        default="driving",
        description="OSRM profile to use when computing travel times.",
    )
    osrm_timeout_seconds: float = Field(default=30.0, gt=0.0)
    osrm_max_retries: int = Field(default=3, ge=0)
    osrm_backoff_seconds: float = Field(default=1.0, ge=0.0)

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("area_anchors", mode="before")
    @classmethod
    def _parse_anchor_table(cls, value: Any) -> dict[str, tuple[float, float]]:
        """Accept a JSON object of ``name -> [lat, lng]`` (or ``{"lat", "lng"}``) pairs."""
        if isinstance(value, str):
            value = json.loads(value) if value.strip() else {}
        if not isinstance(value, dict):
            raise ValueError("area_anchors must be a mapping of area name to coordinates.")
        anchors: dict[str, tuple[float, float]] = {}
        for name, coords in value.items():
            if isinstance(coords, dict):
                anchors[str(name)] = (float(coords["lat"]), float(coords["lng"]))
            else:
                lat, lng = coords
                anchors[str(name)] = (float(lat), float(lng))
        return anchors

    @model_validator(mode="after")
    def _require_backend_urls(self) -> "Settings":
        """Network backends need a base URL; fail at startup instead of on the first request."""
        if self.geocoder_backend == "nominatim" and not self.geocoder_base_url:
            raise ValueError("geocoder_base_url is required when geocoder_backend is 'nominatim'.")
        if self.route_provider == "osrm" and not self.osrm_base_url:
            raise ValueError("osrm_base_url is required when route_provider is 'osrm'.")
        return self


settings = Settings()
