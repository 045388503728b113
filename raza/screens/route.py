import logging
from pydantic import ValidationError

from raza.agents.backend import created_id, unwrap_list
from raza.core.composer import validate_line
from raza.core.errors import ApiError, ValidationFailed
from raza.core.resolver import find_by_id
from raza.core.rollup import date_part, search_stops, stop_totals
from raza.ledgers import ROUTES
from raza.schemas.customer import CustomerKind
from raza.schemas.fields import same_id, wire_id
from raza.schemas.ledger import Header, LineItem, PersistedKey
from raza.schemas.route import RouteRecord, RouteType
from raza.screens.ledger import LedgerScreen, today
from raza.sync.ledger import fetch_lines

logger = logging.getLogger(__name__)

class RouteScreen(LedgerScreen):
    """Route headers (vehicle, driver, delivery date) and their stops."""

    ledger = ROUTES
    parties = "users"
    party_label = "Driver"
    references = ("vehicles", "users", "customers", "items")
    default_status = "intransit"

    def __init__(self, agent, session, clamp: bool | None = None):
        super().__init__(agent, session, clamp)
        self.title = "Route Builder"
        self.customer_tab = CustomerKind.HOTEL
        self.active_route_id = None
        self.fixed_route: Header | None = None
        self.stops: list[LineItem] = []
        self.editing_stop: PersistedKey | None = None
        self.route_date_filter = ""
        self.stop_search = ""

    def blank_header(self) -> Header:
        return Header(date=today(), status=self.default_status, route_type=RouteType.FIXED.value)

    @property
    def vehicles(self) -> list:
        return self.collections.get("vehicles", [])

    @property
    def drivers(self) -> list:
        return self.collections.get("users", [])

    async def fetch(self):
        await super().fetch()
        if self.active_route_id is None and self.headers:
            await self.select_route(self.headers[0].id)
        self.apply_route_defaults()

    def select_tab(self, kind: CustomerKind):
        route_type = RouteType.FIXED if kind == CustomerKind.HOTEL else RouteType.VARIABLE
        self.customer_tab = kind
        self.set_header(route_type=route_type.value)
        self.apply_route_defaults()

    def apply_route_defaults(self):
        # fixed routes fall back to the first vehicle and driver on file
        if self.header_form.route_type != RouteType.FIXED.value:
            return
        updates = {}
        if self.header_form.vehicle_id is None and self.vehicles:
            updates["vehicle_id"] = self.vehicles[0].id
        if self.header_form.driver_id is None and self.drivers:
            updates["driver_id"] = self.drivers[0].id
            updates["party_id"] = self.drivers[0].id
        if updates:
            self.set_header(**updates)

    def tab_customers(self) -> list:
        return [customer for customer in self.collections.get("customers", []) if customer.kind == self.customer_tab]

    async def select_route(self, route_id):
        self.commit(active_route_id=route_id, editing_stop=None)
        if route_id is None:
            self.commit(stops=[])
            return []
        try:
            stops = await fetch_lines(self.agent, self.ledger, route_id)
        except ApiError as e:
            logger.error("Loading stops of route %s failed: %s", route_id, e)
            return self.stops
        self.commit(stops=stops)
        return stops

    async def find_fixed_route(self) -> Header | None:
        """The existing fixed route for the selected vehicle, driver and date."""
        form = self.header_form
        if form.route_type != RouteType.FIXED.value or form.vehicle_id is None or form.driver_id is None:
            self.commit(fixed_route=None)
            return None

        params = {"vehicleid": str(form.vehicle_id), "driverid": str(form.driver_id), "type": RouteType.FIXED.value}
        if form.date:
            params["deliverydate"] = date_part(form.date)
        try:
            data = await self.agent.request("GET", f"{self.ledger.header_resource}/filter", params=params)
        except ApiError:
            body = {
                "vehicleid": wire_id(form.vehicle_id),
                "driverid": wire_id(form.driver_id),
                "type": RouteType.FIXED.value,
                "deliverydate": date_part(form.date) or None,
            }
            try:
                data = await self.agent.request("POST", f"{self.ledger.header_resource}/filter", payload=body)
            except ApiError as e:
                logger.warning("Fixed route lookup failed: %s", e)
                self.commit(fixed_route=None)
                return None

        rows = unwrap_list(data)
        route = None
        if rows:
            try:
                route = RouteRecord.model_validate(rows[0]).to_header()
            except ValidationError as e:
                logger.warning("Ignoring malformed fixed route: %s", e)
        if route is not None and route.id is None:
            route = None

        self.commit(fixed_route=route)
        if route is not None:
            stops = await self.select_route(route.id)
            if stops:
                self.commit(editing_stop=stops[0].key)
        else:
            await self.select_route(None)
        return route

    async def create_route(self):
        """Create a bare route header; stops are added with ``save_stop``."""
        form = self.header_form
        if not form.date:
            self.fail(ValidationFailed({"date": "Please select delivery date."}), "Please select delivery date.")
            return None
        if form.route_type == RouteType.VARIABLE.value and (form.vehicle_id is None or form.driver_id is None):
            message = "Please select vehicle and driver for variable routes."
            self.fail(ValidationFailed({"vehicle_id": message}), message)
            return None
        self.apply_route_defaults()
        form = self.header_form
        if form.vehicle_id is None or form.driver_id is None:
            message = "Vehicle/Driver not available for this route."
            self.fail(ValidationFailed({"vehicle_id": message}), message)
            return None
        if not self.capabilities.can_create:
            self.notify("You do not have permission to create routes", "error")
            return None

        payload = self.ledger.header_record.payload(form)
        if self.session.user_id is not None:
            payload["created_by"] = self.session.user_id
        try:
            data = await self.agent.create(self.ledger.header_resource, payload)
        except ApiError as e:
            self.fail(e, "Failed to create route.")
            return None

        route_id = created_id(data, self.ledger.id_keys)
        await self.reload()
        if route_id is not None:
            await self.select_route(route_id)
        return route_id

    def start_stop_edit(self, key) -> LineItem | None:
        stop = next((stop for stop in self.stops if stop.key == key), None)
        if stop is not None:
            self.editing_stop = stop.key
        return stop

    async def save_stop(self, candidate: dict) -> bool:
        if self.active_route_id is None:
            self.notify("Please create a route header first.", "error")
            return False
        if self.header_form.route_type == RouteType.FIXED.value and self.fixed_route is not None and self.editing_stop is None:
            self.notify("Fixed route already exists. Please edit an existing stop.", "error")
            return False
        action = "edit" if self.editing_stop is not None else "create"
        if not self.capabilities.allows(action):
            self.notify("You do not have permission to save stops", "error")
            return False

        values, errors = validate_line(candidate, self.ledger.required_line)
        if errors:
            party = "hotel" if self.customer_tab == CustomerKind.HOTEL else "shop"
            self.commit(field_errors=errors)
            self.notify(f"Please select {party}, item and quantity.", "error")
            return False

        stop = LineItem(
            header_id=self.active_route_id,
            customer_id=values["customer_id"],
            item_id=values["item_id"],
            quantity=values["quantity"],
            weight=values["weight"],
            rate=values["rate"],
        )
        payload = self.ledger.line_record.payload(stop, self.active_route_id, 0.0)
        if self.session.user_id is not None:
            payload["created_by"] = self.session.user_id
        try:
            if self.editing_stop is not None:
                await self.agent.update(self.ledger.line_resource, self.editing_stop.server_id, payload)
            else:
                await self.agent.create(self.ledger.line_resource, payload)
        except ApiError as e:
            self.fail(e, "Failed to save shop stop.")
            return False

        self.commit(editing_stop=None, field_errors={})
        await self.select_route(self.active_route_id)
        return True

    async def delete_stop(self, key) -> bool:
        if not self.capabilities.can_delete:
            self.notify("You do not have permission to delete stops", "error")
            return False
        try:
            await self.agent.delete(self.ledger.line_resource, key.server_id)
        except ApiError as e:
            self.fail(e, "Failed to delete stop.")
            return False
        if self.active_route_id is not None:
            await self.select_route(self.active_route_id)
        return True

    def filtered_routes(self) -> list[Header]:
        if not self.route_date_filter:
            return list(self.headers)
        return [route for route in self.headers if date_part(route.date) == self.route_date_filter]

    def filtered_stops(self) -> list[LineItem]:
        return search_stops(
            self.stops, self.stop_search, self.collections.get("customers", []), self.collections.get("items", [])
        )

    def stop_totals(self, filtered: bool = False) -> dict:
        return stop_totals(self.filtered_stops() if filtered else self.stops)

    def vehicle_label(self, vehicle_id) -> str:
        vehicle = find_by_id(self.vehicles, vehicle_id)
        return vehicle.name if vehicle is not None and vehicle.name else f"Vehicle {vehicle_id}"

    def route_for(self, route_id) -> Header | None:
        return next((route for route in self.headers if same_id(route.id, route_id)), None)
