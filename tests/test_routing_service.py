import httpx
import pytest
from pydantic import ValidationError

from route_engine.exceptions import InsufficientLocationsError, InvalidIndexError
from route_engine.models.domain import DistanceMatrix, Location
from route_engine.schemas.routing import OptimizeRouteRequest
from route_engine.services.routing import service as routing_service
from route_engine.services.routing.matrix import FallbackMatrixProvider, HaversineMatrixProvider, OSRMMatrixProvider
from route_engine.services.routing.osrm_client import OSRMClient


def _location(lid: str, lat: float, lon: float) -> Location:
    return Location(id=lid, latitude=lat, longitude=lon, name=f"Customer {lid}")


class DummyProvider:
    """Returns a fixed matrix and counts calls."""

    def __init__(self, distances, durations=None):
        self.distances = tuple(tuple(float(v) for v in row) for row in distances)
        self.durations = tuple(
            tuple(float(v) for v in row) for row in (durations if durations is not None else distances)
        )
        self.calls = 0

    def get_matrix(self, locations):
        self.calls += 1
        return DistanceMatrix(distances=self.distances, durations=self.durations, source="osrm")


SCENARIO_A = [
    [0, 100, 500, 50],
    [100, 0, 200, 400],
    [500, 200, 0, 300],
    [50, 400, 300, 0],
]


def _four_locations() -> list[Location]:
    return [
        _location("home", 30.00, 31.20),
        _location("C1", 30.01, 31.21),
        _location("C2", 30.02, 31.22),
        _location("office", 30.03, 31.23),
    ]


def test_optimize_orders_locations_and_builds_legs():
    locations = _four_locations()
    durations = [[0, 10, 50, 5], [10, 0, 20, 40], [50, 20, 0, 30], [5, 40, 30, 0]]
    provider = DummyProvider(SCENARIO_A, durations)

    result = routing_service.optimize(locations, 0, 3, provider=provider)

    assert [loc.id for loc in result.ordered_locations] == ["home", "C1", "C2", "office"]
    assert result.total_distance == 600
    assert result.total_duration == 60
    assert len(result.legs) == len(result.ordered_locations) - 1
    assert [(leg.from_location.id, leg.to_location.id) for leg in result.legs] == [
        ("home", "C1"),
        ("C1", "C2"),
        ("C2", "office"),
    ]
    assert [leg.distance for leg in result.legs] == [100, 200, 300]
    assert provider.calls == 1


def test_optimize_two_points_gives_single_leg():
    locations = [_location("start", 30.0, 31.2), _location("end", 30.1, 31.3)]
    provider = DummyProvider([[0, 1200], [1300, 0]])

    result = routing_service.optimize(locations, 0, 1, provider=provider)

    assert [loc.id for loc in result.ordered_locations] == ["start", "end"]
    assert len(result.legs) == 1
    assert result.total_distance == 1200


def test_optimize_rejects_bad_input_before_fetching_matrix():
    provider = DummyProvider(SCENARIO_A)

    with pytest.raises(InvalidIndexError):
        routing_service.optimize(_four_locations(), 2, 2, provider=provider)
    with pytest.raises(InsufficientLocationsError):
        routing_service.optimize(_four_locations()[:1], 0, provider=provider)
    assert provider.calls == 0


def test_optimize_survives_unreachable_router():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    client = OSRMClient(base_url="http://osrm.invalid", http_client=httpx.Client(transport=httpx.MockTransport(handler)))
    provider = FallbackMatrixProvider(OSRMMatrixProvider(client), HaversineMatrixProvider(average_speed_kmh=30.0))
    locations = [
        _location("A", 30.0444, 31.2357),
        _location("B", 30.0131, 31.2089),
        _location("C", 30.0500, 31.2400),
    ]

    result = routing_service.optimize(locations, 0, provider=provider)

    assert result.matrix_source == "haversine"
    assert sorted(loc.id for loc in result.ordered_locations) == ["A", "B", "C"]
    assert result.ordered_locations[0].id == "A"
    # C is ~0.8 km from A, B is ~4.3 km
    assert [loc.id for loc in result.ordered_locations] == ["A", "C", "B"]
    assert result.total_distance == pytest.approx(sum(leg.distance for leg in result.legs))


def test_optimize_uses_default_provider(monkeypatch):
    provider = DummyProvider([[0, 1, 2], [1, 0, 1], [2, 1, 0]])
    monkeypatch.setattr(routing_service, "default_matrix_provider", lambda: provider)
    locations = [_location("A", 30.0, 31.0), _location("B", 30.1, 31.1), _location("C", 30.2, 31.2)]

    result = routing_service.optimize(locations, 0)

    assert provider.calls == 1
    assert [loc.id for loc in result.ordered_locations] == ["A", "B", "C"]


def test_build_collector_locations_with_home_and_office():
    stops = [_location("C1", 30.01, 31.21), _location("C2", 30.02, 31.22)]

    locations, start_index, end_index = routing_service.build_collector_locations(
        stops, home=(30.0, 31.2), office=(30.05, 31.25)
    )

    assert [loc.id for loc in locations] == ["start", "C1", "C2", "end"]
    assert locations[0].name == "Start (Home)"
    assert locations[-1].name == "End (Office)"
    assert (start_index, end_index) == (0, 3)


def test_build_collector_locations_without_home_or_office():
    stops = [_location("C1", 30.01, 31.21), _location("C2", 30.02, 31.22)]

    locations, start_index, end_index = routing_service.build_collector_locations(stops)

    assert [loc.id for loc in locations] == ["C1", "C2"]
    assert (start_index, end_index) == (0, None)


def test_build_collector_locations_requires_stops():
    with pytest.raises(InsufficientLocationsError):
        routing_service.build_collector_locations([], home=(30.0, 31.2), office=(30.05, 31.25))
    with pytest.raises(InsufficientLocationsError):
        routing_service.build_collector_locations([_location("C1", 30.01, 31.21)])


def test_plan_collector_route_and_visit_sequence():
    stops = [_location("C1", 30.01, 31.21), _location("C2", 30.02, 31.22)]
    provider = DummyProvider(SCENARIO_A)

    result = routing_service.plan_collector_route(
        [stops[1], stops[0]], home=(30.0, 31.2), office=(30.05, 31.25), provider=provider
    )

    # matrix index 1 is C2 here, so C2 is visited first
    assert [loc.id for loc in result.ordered_locations] == ["start", "C2", "C1", "end"]
    visits = routing_service.visit_sequence(result)
    assert [(visit.location_id, visit.optimized_order) for visit in visits] == [("C2", 1), ("C1", 2)]
    assert visits[0].name == "Customer C2"


def test_optimize_request_returns_response():
    provider = DummyProvider(SCENARIO_A)
    payload = OptimizeRouteRequest(
        locations=[
            {"id": loc.id, "latitude": loc.latitude, "longitude": loc.longitude, "name": loc.name}
            for loc in _four_locations()
        ],
        start_index=0,
        end_index=3,
    )

    response = routing_service.optimize_request(payload, provider=provider)

    assert [loc.id for loc in response.ordered_locations] == ["home", "C1", "C2", "office"]
    assert response.total_distance == 600
    assert len(response.legs) == 3
    assert response.metadata["matrix_source"] == "osrm"
    assert response.metadata["location_count"] == 4
    assert "map_overlay" not in response.metadata


def _geometry_request() -> OptimizeRouteRequest:
    return OptimizeRouteRequest(
        locations=[
            {"id": "A", "latitude": 30.0, "longitude": 31.2},
            {"id": "B", "latitude": 30.1, "longitude": 31.3},
        ],
        include_geometry=True,
    )


def _route_client(route: dict) -> OSRMClient:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path.startswith("/route/v1/driving/")
        return httpx.Response(200, json={"code": "Ok", "routes": [route]})

    return OSRMClient(base_url="http://osrm.test", http_client=httpx.Client(transport=httpx.MockTransport(handler)))


def test_optimize_request_with_geometry():
    client = _route_client({"distance": 700.0, "duration": 90.0, "geometry": "_p~iF~ps|U"})

    response = routing_service.optimize_request(
        _geometry_request(), provider=DummyProvider([[0, 5], [5, 0]]), client=client
    )

    overlay = response.metadata["map_overlay"]
    assert overlay["location_ids"] == ["A", "B"]
    assert overlay["coordinates"] == [[38.5, -120.2]]
    assert overlay["distance_m"] == 700.0
    assert overlay["source"] == "osrm"


@pytest.mark.parametrize("geometry", ["_p~iF~ps|", {"type": "LineString", "coordinates": [[31.2, 30.0]]}])
def test_optimize_request_with_unusable_geometry_draws_straight_lines(geometry):
    client = _route_client({"distance": 700.0, "duration": 90.0, "geometry": geometry})

    response = routing_service.optimize_request(
        _geometry_request(), provider=DummyProvider([[0, 5], [5, 0]]), client=client
    )

    overlay = response.metadata["map_overlay"]
    assert overlay["source"] == "haversine"
    assert overlay["coordinates"] == [[30.0, 31.2], [30.1, 31.3]]


def test_route_result_is_immutable():
    result = routing_service.optimize(_four_locations(), 0, 3, provider=DummyProvider(SCENARIO_A))

    assert isinstance(result.ordered_locations, tuple)
    assert isinstance(result.legs, tuple)
    with pytest.raises(AttributeError):
        result.legs.append(result.legs[0])


def test_request_schema_rejects_invalid_coordinates():
    with pytest.raises(ValidationError):
        OptimizeRouteRequest(
            locations=[
                {"id": "A", "latitude": 95.0, "longitude": 31.2},
                {"id": "B", "latitude": 30.1, "longitude": 31.3},
            ]
        )
    with pytest.raises(ValidationError):
        OptimizeRouteRequest(locations=[{"id": "A", "latitude": 30.0, "longitude": 31.2}])
