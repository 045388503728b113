from raza.schemas.customer import CustomerKind
from raza.schemas.ledger import PersistedKey
from raza.screens.route import RouteScreen

def references(backend):
    backend.on("GET", "/vehicles", [{"id": 1, "vehicalid": "V01", "rcnumber": "KA01"}])
    backend.on("GET", "/users", [{"id": 2, "name": "Driver Dan"}])
    backend.on("GET", "/customers", [
        {"id": 4, "customer_name": "Acme Hotel", "customer_typeid": "1"},
        {"id": 5, "customer_name": "Corner Shop", "customer_typeid": "2"},
    ])
    backend.on("GET", "/items", [{"id": 6, "itemname": "Broiler"}])

async def test_fixed_route_defaults_to_first_vehicle_and_driver(agent, backend, admin_session):
    references(backend)
    screen = RouteScreen(agent, admin_session)
    await screen.load()
    assert screen.header_form.vehicle_id == 1
    assert screen.header_form.driver_id == 2
    assert [customer.name for customer in screen.tab_customers()] == ["Acme Hotel"]

    screen.select_tab(CustomerKind.SHOP)
    assert screen.header_form.route_type == "variable"
    assert [customer.name for customer in screen.tab_customers()] == ["Corner Shop"]

async def test_existing_fixed_route_refuses_a_new_stop(agent, backend, admin_session):
    references(backend)
    backend.on("GET", "/route-builder/filter", {"data": [
        {"id": 3, "vehicleid": 1, "driverid": 2, "deliverydate": "2024-01-05", "type": "fixed"},
    ]})
    backend.on("GET", "/route-stops/index/3", [{"id": 8, "routeid": 3, "customerid": 4, "itemid": 6, "itemqty": 2}])
    screen = RouteScreen(agent, admin_session)
    await screen.load()
    screen.set_header(date="2024-01-05")

    route = await screen.find_fixed_route()
    assert route.id == 3
    assert screen.editing_stop == PersistedKey(server_id=8)

    screen.editing_stop = None
    assert not await screen.save_stop({"customer_id": 4, "item_id": 6, "quantity": 1})
    assert screen.notice.text == "Fixed route already exists. Please edit an existing stop."
    assert backend.sent("POST", "/route-stops") == []

async def test_fixed_route_lookup_falls_back_to_post(agent, backend, admin_session):
    references(backend)
    backend.on("GET", "/route-builder/filter", {"message": "Method not allowed"}, status=405)
    backend.on("POST", "/route-builder/filter", [])
    screen = RouteScreen(agent, admin_session)
    await screen.load()
    screen.set_header(date="2024-01-05")

    assert await screen.find_fixed_route() is None
    payload = backend.sent("POST", "/route-builder/filter")[0][2]
    assert payload == {"vehicleid": 1, "driverid": 2, "type": "fixed", "deliverydate": "2024-01-05"}

async def test_stop_needs_a_route_header(agent, backend, admin_session):
    screen = RouteScreen(agent, admin_session)
    assert not await screen.save_stop({"customer_id": 4, "item_id": 6, "quantity": 1})
    assert screen.notice.text == "Please create a route header first."

async def test_create_route_then_add_stop(agent, backend, admin_session):
    references(backend)
    routes, stops = [], []

    def create_route(request, payload):
        routes.append({**payload, "id": 3})
        return {"data": {"id": 3}}

    def create_stop(request, payload):
        stops.append({**payload, "id": 20 + len(stops)})
        return stops[-1]

    backend.on("GET", "/route-builder", lambda request, payload: routes)
    backend.on("POST", "/route-builder", create_route)
    backend.on("GET", "/route-stops/index/3", lambda request, payload: stops)
    backend.on("POST", "/route-stops", create_stop)
    screen = RouteScreen(agent, admin_session)
    await screen.load()
    screen.select_tab(CustomerKind.SHOP)
    screen.set_header(date="2024-01-05", vehicle_id=1, driver_id=2)

    assert await screen.create_route() == 3
    assert routes[0]["type"] == "variable"
    assert routes[0]["created_by"] == 7
    assert screen.active_route_id == 3

    assert not await screen.save_stop({"customer_id": 5, "item_id": 6, "quantity": 0})
    assert screen.notice.text == "Please select shop, item and quantity."

    assert await screen.save_stop({"customer_id": 5, "item_id": 6, "quantity": 2, "weight": 3, "rate": 100})
    assert stops[0]["routeid"] == 3
    assert stops[0]["rateofsale"] == 100
    assert [stop.key for stop in screen.stops] == [PersistedKey(server_id=20)]
    assert screen.stop_totals() == {"total_weight": 3.0, "total_value": 300.0}

async def test_variable_route_needs_vehicle_and_driver(agent, backend, admin_session):
    screen = RouteScreen(agent, admin_session)
    screen.select_tab(CustomerKind.SHOP)
    assert await screen.create_route() is None
    assert screen.notice.text == "Please select vehicle and driver for variable routes."
    assert backend.calls == []

async def test_route_stop_search_and_filters(agent, backend, admin_session):
    references(backend)
    backend.on("GET", "/route-builder", [
        {"id": 3, "vehicleid": 1, "driverid": 2, "deliverydate": "2024-01-05"},
        {"id": 4, "vehicleid": 1, "driverid": 2, "deliverydate": "2024-01-06"},
    ])
    backend.on("GET", "/route-stops/index/3", [
        {"id": 8, "routeid": 3, "customerid": 4, "itemid": 6, "itemqty": 2, "itemweight": 4, "rateofsale": 100},
        {"id": 9, "routeid": 3, "customerid": 5, "itemid": 6, "itemqty": 1, "itemweight": 1, "rateofsale": 100},
    ])
    screen = RouteScreen(agent, admin_session)
    await screen.load()
    assert screen.active_route_id == 3

    screen.route_date_filter = "2024-01-06"
    assert [route.id for route in screen.filtered_routes()] == [4]

    screen.stop_search = "corner"
    assert [stop.customer_id for stop in screen.filtered_stops()] == [5]
    assert screen.stop_totals(filtered=True) == {"total_weight": 1.0, "total_value": 100.0}
    assert screen.vehicle_label(1) == "V01 KA01"
    assert screen.vehicle_label(9) == "Vehicle 9"
