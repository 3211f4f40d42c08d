"""Distance and travel-time estimation between resolved points."""

from __future__ import annotations

import math

from ...config import settings
from ...models.domain import GeoPoint
from ..geospatial import haversine_km


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def distance_km(a: GeoPoint, b: GeoPoint) -> float:
    if a == b:
        return 0.0
    return haversine_km(a.lat, a.lng, b.lat, b.lng)


def duration_min(distance: float, minutes_per_km: float | None = None) -> int:
    """Estimated driving minutes for ``distance`` km at a fixed average speed.

    The default of 3 minutes per km corresponds to 20 km/h in city traffic.
    """

    factor = settings.minutes_per_km if minutes_per_km is None else minutes_per_km
    return round_half_up(distance * factor)
