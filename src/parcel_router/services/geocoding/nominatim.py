"""HTTP geocoder for Nominatim-compatible search services."""

from __future__ import annotations

import logging
import time

import httpx

from ...config import settings
from ...models.domain import Address, GeoPoint
from ..errors import GeocodingUnavailable
from .base import GeoResolver, Resolution

logger = logging.getLogger(__name__)


class NominatimResolver(GeoResolver):
    name = "nominatim"

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        user_agent: str | None = None,
    ) -> None:
        self.base_url = (base_url or settings.geocoder_base_url or "").rstrip("/")
        if not self.base_url:
            raise ValueError("Geocoder base URL is not configured.")
        self.timeout = timeout if timeout is not None else settings.geocoder_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.geocoder_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.geocoder_backoff_seconds
        self.user_agent = user_agent or settings.geocoder_user_agent

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            headers={"User-Agent": self.user_agent},
        )

    @staticmethod
    def _query(address: Address) -> str:
        return ", ".join(
            part for part in (address.street, address.city, address.state, address.zip_code, address.country) if part
        )

    def _search(self, address: Address) -> list[dict]:
        params = {"q": self._query(address), "format": "jsonv2", "limit": 1}
        url = f"{self.base_url}/search"

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    data = response.json()
                    if not isinstance(data, list):
                        raise ValueError("Geocoder response is not a list of places.")
                    return data
                except httpx.HTTPStatusError as e:
                    # Client errors will not improve on retry
                    if e.response.status_code < 500 and e.response.status_code != 429:
                        raise GeocodingUnavailable(
                            f"Geocoder rejected the request ({e.response.status_code}) for '{address.label()}'"
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        raise GeocodingUnavailable(
                            f"Geocoder returned {e.response.status_code} after {self.max_retries} retries"
                        ) from e
                    time.sleep(self.backoff_seconds * (2 ** (attempt - 1)))
                except httpx.TransportError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"Geocoder unreachable after {self.max_retries} retries: {e}")
                        raise GeocodingUnavailable(
                            f"Geocoder at {self.base_url} is not reachable: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"Geocoder request failed, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except ValueError as e:
                    raise GeocodingUnavailable(f"Geocoder returned an unreadable response: {e}") from e
        finally:
            client.close()

    def resolve(self, address: Address) -> Resolution:
        address.validate()
        places = self._search(address)
        if not places:
            raise GeocodingUnavailable(f"Geocoder found no match for '{address.label()}'.")
        place = places[0]
        try:
            point = GeoPoint(lat=float(place["lat"]), lng=float(place["lon"]))
        except (KeyError, TypeError, ValueError) as e:
            raise GeocodingUnavailable(f"Geocoder result for '{address.label()}' has no coordinates.") from e
        return Resolution(point=point, approximate=False)

    def check_health(self) -> bool:
        try:
            response = httpx.get(
                f"{self.base_url}/status",
                params={"format": "json"},
                headers={"User-Agent": self.user_agent},
                timeout=5.0,
            )
            response.raise_for_status()
            return True
        except httpx.HTTPError:
            return False
