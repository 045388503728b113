from raza.screens.master import CUSTOMERS, USERS, VEHICLES, MasterScreen

CUSTOMER_ROWS = [
    {"id": 2, "customer_name": "zephyr Inn", "customer_owner_name": "Kiran", "customer_location": "Hubli"},
    {"id": 1, "customer_name": "Acme Hotel", "customer_owner_name": "Ravi", "customer_location": "Mysore"},
]

async def test_customers_sorted_and_searchable(agent, backend, admin_session):
    backend.on("GET", "/customers", CUSTOMER_ROWS)
    screen = MasterScreen(agent, admin_session, CUSTOMERS)
    assert await screen.load()
    assert [row.name for row in screen.rows] == ["Acme Hotel", "zephyr Inn"]

    screen.search = "hubli"
    assert [row.id for row in screen.filtered()] == [2]
    screen.search = "ravi"
    assert [row.id for row in screen.filtered()] == [1]

async def test_customer_phone_must_have_ten_digits(agent, backend, admin_session):
    screen = MasterScreen(agent, admin_session, CUSTOMERS)
    data = {"name": "Acme Hotel", "owner_name": "Ravi", "phone": "12345", "location": "Mysore"}
    assert not await screen.save(data)
    assert screen.field_errors == {"phone": "Phone number must be exactly 10 digits."}
    assert backend.calls == []

async def test_customer_create_sends_backend_fields(agent, backend, admin_session):
    backend.on("POST", "/customers", {"data": {"id": 12}})
    screen = MasterScreen(agent, admin_session, CUSTOMERS)
    data = {"name": "Acme Hotel", "owner_name": "Ravi", "phone": "98450 12345", "location": "Mysore", "type_id": "1"}
    assert await screen.save(data)
    assert screen.saved_id == 12
    payload = backend.sent("POST", "/customers")[0][2]
    assert payload["customer_name"] == "Acme Hotel"
    assert payload["customer_typeid"] == "1"
    assert screen.notice.text == "Customers created successfully!"

async def test_vehicles_are_created_through_add_endpoint(agent, backend, admin_session):
    backend.on("POST", "/vehicles/add", {"id": 3})
    screen = MasterScreen(agent, admin_session, VEHICLES)
    assert await screen.save({"code": "v01", "registration": "ka01ab1234"})
    payload = backend.sent("POST", "/vehicles/add")[0][2]
    assert payload["vehicalid"] == "V01"
    assert payload["rcnumber"] == "KA01AB1234"

async def test_new_user_needs_password(agent, backend, admin_session):
    screen = MasterScreen(agent, admin_session, USERS)
    data = {"name": "Dan", "email": "dan@example.com", "mobile": "9845012345"}
    assert not await screen.save(data)
    assert "password" in screen.field_errors

    backend.on("POST", "/users", {"id": 4})
    assert await screen.save(data, password="s3cret")
    assert backend.sent("POST", "/users")[0][2]["password"] == "s3cret"

async def test_updating_a_user_does_not_need_password(agent, backend, admin_session):
    backend.on("PUT", "/users/4", {"id": 4})
    screen = MasterScreen(agent, admin_session, USERS)
    assert await screen.save({"name": "Dan", "email": "dan@example.com", "mobile": "9845012345"}, editing_id=4)
    assert "password" not in backend.sent("PUT", "/users/4")[0][2]
    assert screen.notice.text == "Users updated successfully!"

async def test_toggle_user_status(agent, backend, admin_session):
    backend.on("GET", "/users", [{"id": 4, "name": "Dan", "status": "active"}])
    backend.on("PATCH", "/users/4/status", {"id": 4})
    screen = MasterScreen(agent, admin_session, USERS)
    await screen.load()
    assert await screen.toggle_status(4)
    assert backend.sent("PATCH")[0][2] == {"status": "inactive"}

async def test_viewer_cannot_write_masters(viewer_agent, backend, viewer_session):
    screen = MasterScreen(viewer_agent, viewer_session, CUSTOMERS)
    assert not screen.form_visible
    assert not await screen.save({"name": "Acme Hotel"})
    assert screen.notice.text == "You do not have permission to create customers."
    assert not await screen.delete(1)
    assert backend.calls == []

async def test_malformed_field_is_reported_inline(agent, backend, admin_session):
    screen = MasterScreen(agent, admin_session, VEHICLES)
    assert not await screen.save({"code": "V1", "registration": "KA01", "type_id": 1.5})
    assert screen.field_errors
    assert screen.notice.kind == "error"
    assert backend.sent("POST") == []
