import route_engine
from route_engine.services.outputs import routing_formatter
from route_engine.services.routing import service as routing_service


def test_public_helpers_are_exported():
    for name in route_engine.__all__:
        assert hasattr(route_engine, name), name

    assert route_engine.optimize is routing_service.optimize
    assert route_engine.optimize_request is routing_service.optimize_request
    assert route_engine.build_collector_locations is routing_service.build_collector_locations
    assert route_engine.route_result_to_csv is routing_formatter.route_result_to_csv
    assert callable(route_engine.fetch_route_geometry)
    assert callable(route_engine.decode_polyline)
