"""GeoJSON export of computed delivery routes."""

from __future__ import annotations

from typing import Any, Dict, List

from shapely.geometry import LineString, Point, mapping

from ...models.domain import RouteResult
from ..routing.assembler import format_distance, format_duration


def _feature(geometry: Any, properties: Dict[str, Any]) -> Dict[str, Any]:
    # shapely returns tuples; GeoJSON consumers expect arrays
    geo = mapping(geometry)
    coordinates = geo["coordinates"]
    if geo["type"] == "Point":
        geo = {"type": "Point", "coordinates": list(coordinates)}
    else:
        geo = {"type": geo["type"], "coordinates": [list(pair) for pair in coordinates]}
    return {"type": "Feature", "geometry": geo, "properties": properties}


def route_to_geojson(result: RouteResult) -> Dict[str, Any]:
    """Convert a route into a GeoJSON FeatureCollection.

    Each waypoint becomes a Point feature carrying its sequence and leg
    details; the polyline becomes a single LineString feature when the route
    has at least two points. Coordinates are written in (lng, lat) order.
    """
    features: List[Dict[str, Any]] = []

    for sequence, waypoint in enumerate(result.waypoints):
        properties: Dict[str, Any] = {
            "sequence": sequence,
            "type": waypoint.type,
            "address": waypoint.address,
            "tracking_number": waypoint.identifier,
            "status": waypoint.status,
            "distance_from_previous": format_distance(waypoint.distance_from_previous_km),
            "duration_from_previous": format_duration(waypoint.duration_from_previous_min),
        }
        if waypoint.stop_metadata is not None:
            properties["customer_name"] = waypoint.stop_metadata.customer_name or "Unknown"
        features.append(_feature(Point(waypoint.point.lng, waypoint.point.lat), properties))

    if len(result.polyline) >= 2:
        path = LineString([(point.lng, point.lat) for point in result.polyline])
        features.append(
            _feature(
                path,
                {
                    "type": "route",
                    "distance": format_distance(result.total_distance_km),
                    "duration": format_duration(result.total_duration_min),
                    "optimized": result.optimized,
                    "summary": result.summary,
                },
            )
        )

    return {"type": "FeatureCollection", "features": features}
