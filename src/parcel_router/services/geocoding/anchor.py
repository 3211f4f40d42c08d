"""Deterministic geocoder backed by a table of known area coordinates."""

from __future__ import annotations

import logging
from typing import Mapping

from ...config import settings
from ...models.domain import Address, GeoPoint
from .base import GeoResolver, Resolution

logger = logging.getLogger(__name__)

# (hash % JITTER_BUCKETS - JITTER_BUCKETS / 2) / JITTER_SCALE stays within +/-0.01 degrees
JITTER_BUCKETS = 200
JITTER_SCALE = 10000.0


def street_hash(street: str) -> int:
    return sum(ord(char) for char in street)


def jitter_degrees(street: str) -> float:
    return ((street_hash(street) % JITTER_BUCKETS) - JITTER_BUCKETS // 2) / JITTER_SCALE


class AnchorTableResolver(GeoResolver):
    """Place addresses near a named-area anchor, or near a default base when no anchor matches.

    The result depends only on the address and the configured table, so repeated
    calls always produce the same point. Unmatched addresses are flagged as
    approximate rather than rejected.
    """

    name = "anchor"

    def __init__(
        self,
        anchors: Mapping[str, tuple[float, float]] | None = None,
        default_base: GeoPoint | None = None,
    ) -> None:
        table = settings.area_anchors if anchors is None else anchors
        # Keys are normalized the same way as address search keys.
        self._anchors: tuple[tuple[str, GeoPoint], ...] = tuple(
            ("".join(name.lower().split()), GeoPoint(lat=float(lat), lng=float(lng)))
            for name, (lat, lng) in table.items()
        )
        self.default_base = default_base or GeoPoint(settings.default_base_lat, settings.default_base_lng)

    @property
    def anchors(self) -> dict[str, GeoPoint]:
        return dict(self._anchors)

    def match_anchor(self, address: Address) -> GeoPoint | None:
        key = address.search_key()
        for name, point in self._anchors:
            if name and name in key:
                return point
        return None

    def resolve(self, address: Address) -> Resolution:
        address.validate()
        base = self.match_anchor(address)
        approximate = base is None
        if approximate:
            logger.debug(f"No anchor matched '{address.label()}', using default base")
            base = self.default_base

        delta = jitter_degrees(address.street)
        return Resolution(
            point=GeoPoint(lat=base.lat + delta, lng=base.lng + delta),
            approximate=approximate,
        )
