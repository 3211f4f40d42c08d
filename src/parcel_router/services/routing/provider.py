"""Leg-cost providers: distance/duration matrices and road paths between points."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Sequence

from ...config import settings
from ...models.domain import GeoPoint, LegMatrix
from .distance import distance_km, duration_min, round_half_up
from .osrm_client import OSRMClient, check_health as osrm_check_health, decode_polyline

logger = logging.getLogger(__name__)


class RouteProvider(ABC):
    """Capability interface: travel costs between points."""

    name: str = "provider"

    @abstractmethod
    def matrix(self, points: Sequence[GeoPoint]) -> LegMatrix:
        """Pairwise distances (km) and durations (min) between ``points``."""

    def path(self, points: Sequence[GeoPoint]) -> list[GeoPoint]:
        """Geometry travelled when visiting ``points`` in order."""
        return list(points)

    def check_health(self) -> bool:
        return True


class HaversineRouteProvider(RouteProvider):
    """Straight-line distances with a fixed minutes-per-km travel time."""

    name = "haversine"

    def __init__(self, minutes_per_km: float | None = None) -> None:
        self.minutes_per_km = settings.minutes_per_km if minutes_per_km is None else minutes_per_km

    def matrix(self, points: Sequence[GeoPoint]) -> LegMatrix:
        n = len(points)
        distances = [[0.0] * n for _ in range(n)]
        durations = [[0] * n for _ in range(n)]
        for i in range(n):
            for j in range(i + 1, n):
                km = distance_km(points[i], points[j])
                minutes = duration_min(km, self.minutes_per_km)
                distances[i][j] = distances[j][i] = km
                durations[i][j] = durations[j][i] = minutes
        return LegMatrix(distances_km=distances, durations_min=durations, source=self.name)


class OSRMRouteProvider(RouteProvider):
    """Road distances from an OSRM server, with straight-line fallback.

    If OSRM cannot be reached, or more than half of the legs leaving the origin
    come back unreachable, the whole matrix is computed with the haversine
    provider instead. Individual unreachable legs are filled from it too.
    """

    name = "osrm"

    def __init__(self, client: OSRMClient | None = None, fallback: RouteProvider | None = None) -> None:
        self.client = client or OSRMClient()
        self.fallback = fallback or HaversineRouteProvider()

    def matrix(self, points: Sequence[GeoPoint]) -> LegMatrix:
        if len(points) < 2:
            return self.fallback.matrix(points)
        try:
            table = self.client.table(points)
        except (ConnectionError, ValueError) as e:
            logger.warning(f"OSRM table request failed: {e}. Using haversine fallback.")
            return self.fallback.matrix(points)

        raw_distances = table["distances"]
        raw_durations = table["durations"]
        origin_row = raw_distances[0] if raw_distances else []
        unreachable = sum(1 for value in origin_row[1:] if value is None)
        if origin_row[1:] and unreachable / len(origin_row[1:]) > 0.5:
            logger.warning(
                f"Too many unreachable legs from OSRM ({unreachable}/{len(origin_row) - 1}). "
                f"Using haversine fallback."
            )
            return self.fallback.matrix(points)

        estimate = None
        n = len(points)
        distances = [[0.0] * n for _ in range(n)]
        durations = [[0] * n for _ in range(n)]
        for i in range(n):
            for j in range(n):
                if i == j:
                    continue
                metres = raw_distances[i][j]
                seconds = raw_durations[i][j]
                if metres is None or seconds is None:
                    if estimate is None:
                        estimate = self.fallback.matrix(points)
                    distances[i][j] = estimate.distances_km[i][j]
                    durations[i][j] = estimate.durations_min[i][j]
                    continue
                distances[i][j] = metres / 1000.0
                durations[i][j] = round_half_up(seconds / 60.0)

        return LegMatrix(distances_km=distances, durations_min=durations, source=self.name)

    def path(self, points: Sequence[GeoPoint]) -> list[GeoPoint]:
        if len(points) < 2:
            return list(points)
        try:
            data = self.client.route(points)
            geometry = data["routes"][0]["geometry"]
        except (ConnectionError, ValueError, KeyError, IndexError) as e:
            logger.warning(f"OSRM route request failed: {e}. Using straight segments.")
            return list(points)
        return [GeoPoint(lat=lat, lng=lng) for lat, lng in decode_polyline(geometry)]

    def check_health(self) -> bool:
        return osrm_check_health(self.client.base_url)
