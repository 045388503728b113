import httpx
import pytest

from raza.agents.backend import BackendAgent
from raza.schemas.ledger import DraftKey, PersistedKey
from raza.screens.ledger import OrderScreen, PurchaseScreen, SalesScreen

def stateful_sales(backend):
    sales, sale_items = [], []

    def create_sale(request, payload):
        sales.append({**payload, "id": 501})
        return {"data": {"id": 501}}

    def create_item(request, payload):
        sale_items.append({**payload, "id": 900 + len(sale_items)})
        return {"data": sale_items[-1]}

    backend.on("GET", "/customers", [{"id": 1, "customer_name": "Acme Hotel", "customer_typeid": "1"}])
    backend.on("GET", "/items", [{"id": 10, "itemname": "Item A"}, {"id": 11, "itemname": "Item B"}])
    backend.on("GET", "/sales", lambda request, payload: {"data": sales})
    backend.on("GET", "/saleitems", lambda request, payload: {"data": sale_items})
    backend.on("POST", "/sales", create_sale)
    backend.on("POST", "/saleitems", create_item)
    return sales, sale_items

async def test_acme_hotel_sale_end_to_end(agent, backend, admin_session):
    stateful_sales(backend)
    screen = SalesScreen(agent, admin_session, clamp=False)
    assert await screen.load()

    screen.set_header(party_id=1, date="2024-01-05")
    item_a = screen.add_draft({"item_id": 10, "weight": 20, "rate": 150, "discount_type": "flat", "discount": 0})
    item_b = screen.add_draft(
        {"item_id": 11, "weight": 0, "quantity": 10, "rate": 50, "discount_type": "percent", "discount": 10}
    )
    assert screen.composer.line_total(item_a) == 3000
    assert screen.composer.line_total(item_b) == pytest.approx(450)

    assert await screen.save() == 501
    assert len(backend.sent("POST", "/sales")) == 1
    assert len(backend.sent("POST", "/saleitems")) == 2
    assert screen.notice.text == "Sale created"
    assert len(screen.composer) == 0

    screen.selected_date = "2024-01-05"
    totals = screen.day_totals()
    assert totals["total_weight"] == 20
    assert totals["total_value"] == pytest.approx(3450)
    assert totals["total_item_count"] == 2
    assert screen.party_name(1) == "Acme Hotel"
    assert screen.item_name(11) == "Item B"

async def test_view_denied_issues_no_fetch(backend, guest_session):
    agent = BackendAgent(guest_session, transport=httpx.MockTransport(backend.handler))
    screen = SalesScreen(agent, guest_session)
    assert not await screen.load()
    assert screen.denied
    assert screen.notice.text == "You do not have permission to view Sales."
    assert backend.calls == []

async def test_viewer_sees_no_form_and_cannot_create(viewer_agent, backend, viewer_session):
    stateful_sales(backend)
    screen = SalesScreen(viewer_agent, viewer_session)
    assert await screen.load()
    assert not screen.form_visible

    screen.set_header(party_id=1, date="2024-01-05")
    screen.add_draft({"item_id": 10, "weight": 1, "rate": 10})
    assert await screen.save() is None
    assert screen.notice.kind == "error"
    assert screen.notice.text == "You do not have permission to create sales"
    assert backend.sent("POST") == []
    assert len(screen.composer) == 1

async def test_failed_save_keeps_the_draft(agent, backend, admin_session):
    stateful_sales(backend)
    backend.on("POST", "/sales", {"message": "down"}, status=500)
    screen = SalesScreen(agent, admin_session)
    await screen.load()
    screen.set_header(party_id=1, date="2024-01-05")
    line = screen.add_draft({"item_id": 10, "weight": 2, "rate": 10})

    assert await screen.save() is None
    assert screen.notice.text == "Failed to save sale (0 line(s) saved, 1 not saved)"
    assert screen.composer.lines == [line]
    assert screen.header_form.party_id == 1

async def test_invalid_draft_sets_field_errors(agent, backend, admin_session):
    screen = SalesScreen(agent, admin_session)
    assert screen.add_draft({"item_id": None, "weight": 2}) is None
    assert screen.field_errors == {"item_id": "Select item"}
    assert screen.notice.text == "Select item"
    assert len(screen.composer) == 0

async def test_editing_updates_saved_lines_and_creates_new_ones(agent, backend, admin_session):
    backend.on("GET", "/sales", [{"id": 5, "customerid": 1, "saledate": "2024-01-05"}])
    backend.on("GET", "/saleitems", [{"id": 31, "saleid": 5, "itemid": 10, "itemweight": 2, "salerate": 10}])
    backend.on("PUT", "/sales/5", {"id": 5})
    backend.on("PUT", "/saleitems/31", {"id": 31})
    backend.on("POST", "/saleitems", {"id": 32})
    screen = SalesScreen(agent, admin_session)
    await screen.load()

    assert await screen.start_edit("5")
    assert [line.key for line in screen.composer] == [PersistedKey(server_id=31)]
    screen.add_draft({"item_id": 11, "quantity": 4, "rate": 10})

    assert await screen.save() == 5
    assert [(method, path) for method, path, _ in backend.sent() if method != "GET"] == [
        ("PUT", "/sales/5"),
        ("PUT", "/saleitems/31"),
        ("POST", "/saleitems"),
    ]
    assert screen.notice.text == "Sale updated"
    assert screen.editing_id is None

async def test_closed_screen_drops_late_results(agent, backend, admin_session):
    screen = SalesScreen(agent, admin_session)

    def close_then_answer(request, payload):
        screen.close()
        return [{"id": 1, "customerid": 1, "saledate": "2024-01-05"}]

    backend.on("GET", "/sales", close_then_answer)
    assert not await screen.load()
    assert screen.headers == []
    assert not screen.loaded

async def test_delete_line_of_a_draft_makes_no_request(agent, backend, admin_session):
    screen = SalesScreen(agent, admin_session)
    line = screen.add_draft({"item_id": 10, "weight": 1})
    assert isinstance(line.key, DraftKey)
    assert await screen.delete_line(line.key)
    assert backend.calls == []

async def test_delete_needs_permission(viewer_agent, backend, viewer_session):
    screen = SalesScreen(viewer_agent, viewer_session)
    assert not await screen.delete(5)
    assert screen.notice.text == "You do not have permission to delete sales"
    assert backend.calls == []

async def test_order_screen_defaults_and_embedded_lines(agent, backend, admin_session):
    backend.on("GET", "/orders", [
        {"id": 1, "customerid": 1, "orderdate": "2024-01-05", "items": [{"id": 4, "itemid": 10, "itemweight": 3}]},
    ])
    screen = OrderScreen(agent, admin_session)
    assert screen.header_form.status == "intransit"
    await screen.load()
    assert [line.weight for line in screen.header_lines(1)] == [3]

async def test_purchase_screen_resolves_companies(agent, backend, admin_session):
    backend.on("GET", "/company-master", [{"id": 2, "company_name": "Feed Co"}])
    backend.on("GET", "/purchases", [{"id": 1, "companyid": 2, "purchasedate": "2024-01-05"}])
    screen = PurchaseScreen(agent, admin_session)
    await screen.load()
    assert screen.party_name(2) == "Feed Co"
    assert screen.party_name(3) == "Company 3"

async def test_retry_after_partial_save_updates_instead_of_duplicating(agent, backend, admin_session):
    backend.on("POST", "/sales", {"data": {"id": 77}})
    responses = iter([{"id": 40}, httpx.Response(500, json={"message": "boom"}), {"id": 41}])
    backend.on("POST", "/saleitems", lambda request, payload: next(responses))
    backend.on("PUT", "/sales/77", {"id": 77})
    backend.on("PUT", "/saleitems/40", {"id": 40})
    screen = SalesScreen(agent, admin_session)
    await screen.load()
    screen.set_header(party_id=1, date="2024-01-05")
    screen.add_draft({"item_id": 10, "weight": 1, "rate": 10})
    screen.add_draft({"item_id": 11, "weight": 2, "rate": 10})

    assert await screen.save() is None
    assert screen.notice.text == "Failed to save sale (1 line(s) saved, 1 not saved)"
    assert screen.editing_id == 77
    assert screen.composer.lines[0].key == PersistedKey(server_id=40)
    assert isinstance(screen.composer.lines[1].key, DraftKey)

    assert await screen.save() == 77
    writes = [(method, path) for method, path, _ in backend.sent() if method != "GET"]
    assert writes == [
        ("POST", "/sales"),
        ("POST", "/saleitems"),
        ("POST", "/saleitems"),
        ("PUT", "/sales/77"),
        ("PUT", "/saleitems/40"),
        ("POST", "/saleitems"),
    ]
    assert screen.notice.text == "Sale updated"
