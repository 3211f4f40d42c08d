"""HTTP client for interacting with OSRM services."""

from __future__ import annotations

import logging
import time
from typing import Sequence

import httpx

from ...config import settings
from ...models.domain import GeoPoint

# A single table request handles an agent's whole batch; OSRM's default limit is 100 locations.
DEFAULT_MAX_COORDINATES_PER_REQUEST = 100

logger = logging.getLogger(__name__)


def _coordinate_string(points: Sequence[GeoPoint]) -> str:
    # OSRM expects "lon,lat;lon,lat;..."
    return ";".join(f"{point.lng},{point.lat}" for point in points)


class OSRMClient:
    def __init__(
        self,
        base_url: str | None = None,
        profile: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        max_coordinates_per_request: int = DEFAULT_MAX_COORDINATES_PER_REQUEST,
    ) -> None:
        self.base_url = (base_url or settings.osrm_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("OSRM base URL is not configured.")
        self.profile = profile or settings.osrm_profile
        self.timeout = timeout if timeout is not None else settings.osrm_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.osrm_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.osrm_backoff_seconds
        self.max_coordinates_per_request = max_coordinates_per_request

    def _get_client(self) -> httpx.Client:
        return httpx.Client(timeout=httpx.Timeout(self.timeout, connect=10.0))

    def _get_json(self, url: str, params: dict) -> dict:
        """GET ``url`` with bounded retries; network failures surface as ``ConnectionError``."""
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    data = response.json()
                    if data.get("code", "Ok") != "Ok":
                        raise ValueError(f"OSRM request failed: {data.get('message', data.get('code'))}")
                    return data
                except httpx.HTTPStatusError as e:
                    if e.response.status_code == 414:
                        raise ValueError("OSRM request URL too large; reduce the number of stops.") from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ConnectionError(
                            f"OSRM service at {self.base_url} returned {e.response.status_code}"
                        ) from e
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TransportError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"OSRM request failed after {self.max_retries} retries: {e}")
                        raise ConnectionError(
                            f"Failed to connect to OSRM service at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))  # Exponential backoff
                    logger.debug(f"OSRM network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
        finally:
            client.close()

    def table(self, points: Sequence[GeoPoint]) -> dict:
        """Distance (metres) and duration (seconds) matrices between all ``points``."""
        if len(points) < 2:
            raise ValueError("At least two coordinates are required for OSRM table.")
        if len(points) > self.max_coordinates_per_request:
            raise ValueError(
                f"OSRM table supports at most {self.max_coordinates_per_request} coordinates, got {len(points)}."
            )

        url = f"{self.base_url}/table/v1/{self.profile}/{_coordinate_string(points)}"
        data = self._get_json(url, {"annotations": "duration,distance"})
        if "durations" not in data or "distances" not in data:
            raise ValueError("OSRM response missing durations/distances.")
        return data

    def route(self, points: Sequence[GeoPoint]) -> dict:
        """Street-following route through ``points`` in the given order.

        Returns the raw OSRM response; ``routes[0]["geometry"]`` is an encoded polyline.
        """
        if len(points) < 2:
            raise ValueError("At least two coordinates are required for OSRM route.")

        url = f"{self.base_url}/route/v1/{self.profile}/{_coordinate_string(points)}"
        params = {
            "overview": "full",
            "geometries": "polyline",
            "steps": "false",
        }
        return self._get_json(url, params)


def decode_polyline(polyline: str) -> list[tuple[float, float]]:
    """Decode Google polyline string to list of (lat, lon) coordinates.

    OSRM uses Google's polyline encoding format for route geometry.
    """
    coordinates = []
    index = 0
    lat = 0
    lon = 0

    while index < len(polyline):
        deltas = []
        for _ in range(2):
            shift = 0
            result = 0
            while True:
                b = ord(polyline[index]) - 63
                index += 1
                result |= (b & 0x1f) << shift
                shift += 5
                if b < 0x20:
                    break
            deltas.append(~(result >> 1) if (result & 1) else (result >> 1))
        lat += deltas[0]
        lon += deltas[1]
        coordinates.append((lat / 1e5, lon / 1e5))

    return coordinates


def check_health(base_url: str | None = None) -> bool:
    """Check OSRM service health by making a minimal table request.

    Public OSRM endpoints may not have a /health endpoint, so connectivity is
    tested with two coordinates in central Dhaka.
    """
    base = base_url or settings.osrm_base_url
    if not base:
        return False
    try:
        test_coords = "90.4125,23.8103;90.4150,23.7940"
        url = f"{base.rstrip('/')}/table/v1/{settings.osrm_profile}/{test_coords}"
        response = httpx.get(url, params={"annotations": "duration"}, timeout=5.0)
        response.raise_for_status()
        data = response.json()
        return "durations" in data and isinstance(data.get("durations"), list)
    except (httpx.HTTPError, ValueError):
        return False
