from src.parcel_router.models.domain import Address, DeliveryStop, GeoPoint, StopMetadata
from src.parcel_router.services.export import route_to_geojson
from src.parcel_router.services.routing.assembler import assemble
from src.parcel_router.services.routing.optimizer import optimize

ORIGIN = GeoPoint(23.7741, 90.4277)


def _stop(identifier: str, lat: float, lng: float) -> DeliveryStop:
    return DeliveryStop(
        identifier=identifier,
        destination=Address(street=f"House {identifier}", city="Gulshan", state="Dhaka", zip_code="1212"),
        status="assigned",
        metadata=StopMetadata(customer_name=None),
        resolved_point=GeoPoint(lat, lng),
    )


def test_route_to_geojson_emits_points_and_path():
    stops = [_stop("T2", 23.79, 90.41), _stop("T1", 23.78, 90.42)]
    result = assemble(ORIGIN, optimize(ORIGIN, stops))

    collection = route_to_geojson(result)

    assert collection["type"] == "FeatureCollection"
    points = [feature for feature in collection["features"] if feature["geometry"]["type"] == "Point"]
    lines = [feature for feature in collection["features"] if feature["geometry"]["type"] == "LineString"]
    assert len(points) == 3
    assert len(lines) == 1

    origin = points[0]
    assert origin["geometry"]["coordinates"] == [ORIGIN.lng, ORIGIN.lat]
    assert origin["properties"]["type"] == "origin"
    assert points[1]["properties"]["tracking_number"] == "T1"
    assert points[1]["properties"]["customer_name"] == "Unknown"

    path = lines[0]
    assert path["geometry"]["coordinates"] == [[point.lng, point.lat] for point in result.polyline]
    assert path["properties"]["optimized"] is True
    assert path["properties"]["summary"] == "Optimized route with 2 deliveries"


def test_route_to_geojson_skips_path_for_single_point():
    result = assemble(ORIGIN, optimize(ORIGIN, []))

    collection = route_to_geojson(result)

    assert [feature["geometry"]["type"] for feature in collection["features"]] == ["Point"]


def test_route_to_geojson_handles_empty_route_without_origin():
    result = assemble(None, optimize(None, []))

    assert route_to_geojson(result) == {"type": "FeatureCollection", "features": []}
