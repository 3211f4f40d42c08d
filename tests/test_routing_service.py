import pytest

from src.parcel_router.models.domain import Address, GeoPoint, LegMatrix
from src.parcel_router.schemas.routing import OptimizedRouteRequest
from src.parcel_router.services.errors import GeocodingUnavailable, MalformedAddress
from src.parcel_router.services.geocoding import AnchorTableResolver, GeoResolver, Resolution
from src.parcel_router.services.geospatial import offset_point
from src.parcel_router.services.routing import service as routing_service
from src.parcel_router.services.routing.distance import distance_km
from src.parcel_router.services.routing.provider import HaversineRouteProvider

DEPOT = GeoPoint(23.7741, 90.4277)


class StreetTableResolver(GeoResolver):
    """Resolve addresses by street name from a fixed table."""

    name = "street-table"

    def __init__(self, points: dict[str, GeoPoint], approximate: frozenset[str] = frozenset()) -> None:
        self.points = points
        self.approximate = approximate
        self.calls: list[str] = []

    def resolve(self, address: Address) -> Resolution:
        self.calls.append(address.street)
        return Resolution(point=self.points[address.street], approximate=address.street in self.approximate)


def _north_of_depot(km: float) -> GeoPoint:
    lat, lng = offset_point(DEPOT.lat, DEPOT.lng, north_km=km)
    return GeoPoint(lat, lng)


def _address(street: str, city: str = "Dhaka") -> dict:
    return {"street": street, "city": city, "state": "Dhaka", "zip_code": "1219", "country": "Bangladesh"}


def _parcel(tracking: str, street: str, status: str = "assigned", origin: dict | None = None, **extra) -> dict:
    return {
        "tracking_number": tracking,
        "status": status,
        "destination": _address(street),
        "origin": origin,
        "customer": {"name": f"Customer {tracking}", "phone": "01700000000"},
        "weight": 1.5,
        "dimensions": "20x10x10",
        **extra,
    }


def _scenario_resolver() -> StreetTableResolver:
    return StreetTableResolver(
        {
            "Depot": DEPOT,
            "Two": _north_of_depot(2.0),
            "Five": _north_of_depot(5.0),
            "One": _north_of_depot(1.0),
        }
    )


def test_end_to_end_route_orders_by_nearest_neighbor():
    request = OptimizedRouteRequest(
        parcels=[
            _parcel("TRK-2", "Two", origin=_address("Depot")),
            _parcel("TRK-5", "Five"),
            _parcel("TRK-1", "One"),
        ]
    )

    response = routing_service.build_agent_route(request, _scenario_resolver(), HaversineRouteProvider())

    assert response.optimized is True
    assert [waypoint.tracking_number for waypoint in response.waypoints] == ["ORIGIN", "TRK-1", "TRK-2", "TRK-5"]
    expected_total = (
        distance_km(DEPOT, _north_of_depot(1.0))
        + distance_km(_north_of_depot(1.0), _north_of_depot(2.0))
        + distance_km(_north_of_depot(2.0), _north_of_depot(5.0))
    )
    assert response.total_distance_km == pytest.approx(expected_total)
    assert response.total_distance_km == pytest.approx(5.0, rel=1e-3)
    assert response.distance == "5.0 km"
    assert response.duration == "15 min"
    assert response.summary == "Optimized route with 3 deliveries"
    assert response.polyline[0] == [DEPOT.lat, DEPOT.lng]
    assert len(response.polyline) == 4


def test_waypoints_carry_display_strings_and_parcel_data():
    request = OptimizedRouteRequest(
        parcels=[
            _parcel("TRK-1", "One", origin=_address("Depot"), payment_type="cod", cod_amount=300.0),
        ]
    )

    response = routing_service.build_agent_route(request, _scenario_resolver(), HaversineRouteProvider())

    origin, delivery = response.waypoints
    assert origin.type == "origin"
    assert origin.distance_from_previous == "0.0 km"
    assert origin.duration_from_previous == "0 min"
    assert delivery.type == "delivery"
    assert delivery.address == "One, Dhaka, Dhaka"
    assert delivery.distance_from_previous == "1.0 km"
    assert delivery.duration_from_previous == "3 min"
    assert delivery.customer_name == "Customer TRK-1"
    assert delivery.parcel_data.payment_type == "cod"
    assert delivery.parcel_data.cod_amount == 300.0


def test_inactive_parcels_are_excluded():
    request = OptimizedRouteRequest(
        parcels=[
            _parcel("TRK-D", "Two", status="delivered", origin=_address("Depot")),
            _parcel("TRK-C", "Five", status="cancelled"),
            _parcel("TRK-1", "One", status="pending", origin=_address("Depot")),
        ]
    )

    response = routing_service.build_agent_route(request, _scenario_resolver(), HaversineRouteProvider())

    assert [waypoint.tracking_number for waypoint in response.waypoints] == ["ORIGIN", "TRK-1"]
    assert [parcel.tracking_number for parcel in response.parcels] == ["TRK-1"]


def test_no_active_deliveries_returns_empty_route():
    request = OptimizedRouteRequest(parcels=[_parcel("TRK-D", "Two", status="delivered")])

    response = routing_service.build_agent_route(request, _scenario_resolver(), HaversineRouteProvider())

    assert response.success is True
    assert response.message == "No active deliveries for route optimization"
    assert response.waypoints == []
    assert response.distance == "0 km"
    assert response.duration == "0 min"
    assert response.optimized is False


def test_unknown_status_is_rejected():
    request = OptimizedRouteRequest(parcels=[_parcel("TRK-X", "One", status="lost")])

    with pytest.raises(ValueError, match="Unknown parcel status"):
        routing_service.build_agent_route(request, _scenario_resolver(), HaversineRouteProvider())


def test_request_origin_overrides_parcel_origin():
    resolver = _scenario_resolver()
    resolver.points["Hub"] = _north_of_depot(6.0)
    request = OptimizedRouteRequest(
        origin=_address("Hub"),
        parcels=[_parcel("TRK-1", "One", origin=_address("Depot")), _parcel("TRK-5", "Five")],
    )

    response = routing_service.build_agent_route(request, resolver, HaversineRouteProvider())

    assert response.waypoints[0].address == "Hub, Dhaka, Dhaka"
    assert [waypoint.tracking_number for waypoint in response.waypoints[1:]] == ["TRK-5", "TRK-1"]


def test_missing_origin_produces_approximate_route():
    resolver = _scenario_resolver()
    request = OptimizedRouteRequest(parcels=[_parcel("TRK-5", "Five"), _parcel("TRK-1", "One")])

    response = routing_service.build_agent_route(request, resolver, HaversineRouteProvider())

    assert response.optimized is False
    assert response.summary == "Using approximate coordinates for mapping"
    assert [waypoint.tracking_number for waypoint in response.waypoints[1:]] == ["TRK-5", "TRK-1"]
    assert response.distance == "1.5 km"
    assert response.duration == "7 min"
    assert resolver.calls == []


def test_malformed_destination_fails_fast():
    resolver = _scenario_resolver()
    parcel = _parcel("TRK-1", "One", origin=_address("Depot"))
    parcel["destination"]["city"] = " "
    request = OptimizedRouteRequest(parcels=[parcel])

    with pytest.raises(MalformedAddress, match="TRK-1"):
        routing_service.build_agent_route(request, resolver, HaversineRouteProvider())
    assert resolver.calls == []


def test_geocoding_failure_propagates():
    class UnavailableResolver(GeoResolver):
        name = "down"

        def resolve(self, address: Address) -> Resolution:
            raise GeocodingUnavailable("geocoder offline")

    request = OptimizedRouteRequest(parcels=[_parcel("TRK-1", "One", origin=_address("Depot"))])

    with pytest.raises(GeocodingUnavailable):
        routing_service.build_agent_route(request, UnavailableResolver(), HaversineRouteProvider())


def test_metadata_counts_approximate_placements():
    resolver = _scenario_resolver()
    resolver.approximate = frozenset({"Five", "Two"})
    request = OptimizedRouteRequest(
        parcels=[_parcel("TRK-2", "Two", origin=_address("Depot")), _parcel("TRK-5", "Five")]
    )

    response = routing_service.build_agent_route(request, resolver, HaversineRouteProvider())

    assert response.optimized is False
    assert response.summary == "Using approximate coordinates for mapping"
    assert response.metadata["approximate_points"] == 2
    assert response.metadata["resolver"] == "street-table"
    assert response.metadata["provider"] == "haversine"
    assert response.metadata["stop_count"] == 2


def test_approximate_points_keep_nearest_neighbor_order():
    resolver = _scenario_resolver()
    resolver.approximate = frozenset({"One", "Two", "Five"})
    request = OptimizedRouteRequest(
        parcels=[_parcel("TRK-2", "Two", origin=_address("Depot")), _parcel("TRK-5", "Five"), _parcel("TRK-1", "One")]
    )

    response = routing_service.build_agent_route(request, resolver, HaversineRouteProvider())

    assert [waypoint.tracking_number for waypoint in response.waypoints[1:]] == ["TRK-1", "TRK-2", "TRK-5"]
    assert response.optimized is False
    assert response.distance == "5.0 km"


def test_approximate_origin_alone_marks_route_approximate():
    resolver = _scenario_resolver()
    resolver.approximate = frozenset({"Depot"})
    request = OptimizedRouteRequest(parcels=[_parcel("TRK-1", "One", origin=_address("Depot"))])

    response = routing_service.build_agent_route(request, resolver, HaversineRouteProvider())

    assert response.optimized is False
    assert response.metadata["approximate_points"] == 1


def test_unmatched_anchor_addresses_are_not_reported_as_optimized():
    request = OptimizedRouteRequest(
        parcels=[
            _parcel("TRK-1", "Lane 4, Block Q", origin=_address("Warehouse Lane")),
            _parcel("TRK-2", "Plot 19, Sector Z"),
        ]
    )

    response = routing_service.build_agent_route(request, AnchorTableResolver(), HaversineRouteProvider())

    assert response.metadata["approximate_points"] == 3
    assert response.optimized is False
    assert response.summary == "Using approximate coordinates for mapping"
    assert len(response.waypoints) == 3


def test_anchor_resolver_route_is_reproducible():
    request = OptimizedRouteRequest(
        parcels=[
            _parcel("TRK-1", "Road 11, Gulshan", origin=_address("Block C", city="Banasree")),
            _parcel("TRK-2", "Road 2, Mirpur"),
            _parcel("TRK-3", "Sector 7, Uttara"),
        ]
    )

    first = routing_service.build_agent_route(request, AnchorTableResolver(), HaversineRouteProvider())
    second = routing_service.build_agent_route(request, AnchorTableResolver(), HaversineRouteProvider())

    assert first == second
    assert first.optimized is True
    assert len(first.waypoints) == 4


def test_road_geometry_comes_from_provider_path():
    class PathProvider(HaversineRouteProvider):
        name = "path"

        def path(self, points):
            return [points[0], GeoPoint(0.0, 0.0), points[-1]]

    request = OptimizedRouteRequest(
        parcels=[_parcel("TRK-1", "One", origin=_address("Depot"))],
        include_road_geometry=True,
    )

    response = routing_service.build_agent_route(request, _scenario_resolver(), PathProvider())

    assert response.road_geometry is not None
    assert response.road_geometry[1] == [0.0, 0.0]
    assert len(response.road_geometry) == 3


def test_provider_matrix_drives_ordering():
    class FixedMatrixProvider(HaversineRouteProvider):
        name = "fixed"

        def matrix(self, points):
            # origin, Two, One: make Two the cheaper first leg
            return LegMatrix(
                distances_km=[[0.0, 1.0, 4.0], [1.0, 0.0, 2.0], [4.0, 2.0, 0.0]],
                durations_min=[[0, 4, 12], [4, 0, 6], [12, 6, 0]],
                source="fixed",
            )

    request = OptimizedRouteRequest(
        parcels=[_parcel("TRK-2", "Two", origin=_address("Depot")), _parcel("TRK-1", "One")]
    )

    response = routing_service.build_agent_route(request, _scenario_resolver(), FixedMatrixProvider())

    assert [waypoint.tracking_number for waypoint in response.waypoints[1:]] == ["TRK-2", "TRK-1"]
    assert response.total_distance_km == pytest.approx(3.0)
    assert response.total_duration_min == 10
    assert response.metadata["provider"] == "fixed"
