"""Geocoder interface and shared wrappers."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from functools import lru_cache

from ...models.domain import Address, GeoPoint

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Resolution:
    point: GeoPoint
    approximate: bool = False


class GeoResolver(ABC):
    """Capability interface: place a postal address on the map."""

    name: str = "resolver"

    @abstractmethod
    def resolve(self, address: Address) -> Resolution:
        """Return the coordinates of ``address`` or raise ``GeocodingUnavailable``."""

    def check_health(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class _CacheKey:
    """Hashes on the normalized address only; carries the original for the lookup."""

    key: tuple[str, str]
    address: Address = field(compare=False)


class CachedResolver(GeoResolver):
    """Memoize successful resolutions of another resolver, least recently used evicted first."""

    def __init__(self, inner: GeoResolver, max_entries: int = 1024) -> None:
        self.inner = inner
        self.max_entries = max_entries
        self.name = f"cached:{inner.name}"
        # lru_cache does not store calls that raise
        self._cached_resolve = lru_cache(maxsize=max_entries)(self._resolve_uncached)

    @staticmethod
    def _key(address: Address) -> tuple[str, str]:
        return (address.search_key(), "".join(address.country.lower().split()))

    def _resolve_uncached(self, lookup: _CacheKey) -> Resolution:
        return self.inner.resolve(lookup.address)

    def resolve(self, address: Address) -> Resolution:
        return self._cached_resolve(_CacheKey(self._key(address), address))

    def check_health(self) -> bool:
        return self.inner.check_health()

    def __len__(self) -> int:
        return self._cached_resolve.cache_info().currsize
