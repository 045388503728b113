from enum import Enum

from raza.schemas.fields import Amount, DateText, EntityId, Text, aliased, wire_id
from raza.schemas.ledger import Header, LineItem
from raza.schemas.records import HeaderRecord, LineRecord, line_key

class RouteType(str, Enum):
    # fixed routes serve hotels, variable routes serve shops
    FIXED = "fixed"
    VARIABLE = "variable"

class RouteRecord(HeaderRecord):
    id: EntityId = aliased("id", "routeid", "route_id", "_id")
    vehicle_id: EntityId = aliased("vehicleid", "vehicle_id")
    driver_id: EntityId = aliased("driverid", "driver_id")
    date: DateText = aliased("deliverydate", "delivery_date", "date", default="")
    status: Text = aliased("status", default="intransit")
    type: Text = aliased("type", "routetype", "route_type", default=RouteType.FIXED.value)

    def to_header(self) -> Header:
        return Header(
            id=self.id,
            party_id=self.driver_id,
            date=self.date,
            status=self.status or "intransit",
            route_type=self.type or RouteType.FIXED.value,
            vehicle_id=self.vehicle_id,
            driver_id=self.driver_id,
        )

    @staticmethod
    def payload(header: Header) -> dict:
        return {
            "vehicleid": wire_id(header.vehicle_id),
            "driverid": wire_id(header.driver_id),
            "type": header.route_type or RouteType.FIXED.value,
            "deliverydate": header.date,
            "status": header.status or "intransit",
        }

class RouteStopRecord(LineRecord):
    id: EntityId = aliased("id", "routestop_id", "route_stop_id", "_id")
    route_id: EntityId = aliased("routeid", "route_id")
    customer_id: EntityId = aliased("customerid", "customer_id")
    item_id: EntityId = aliased("itemid", "item_id")
    quantity: Amount = aliased("itemqty", "item_qty", default=0.0)
    weight: Amount = aliased("itemweight", "item_weight", default=0.0)
    rate: Amount = aliased("rateofsale", "rate_of_sale", "rate", default=0.0)

    def to_line(self) -> LineItem:
        return LineItem(
            key=line_key(self.id),
            header_id=self.route_id,
            customer_id=self.customer_id,
            item_id=self.item_id,
            quantity=self.quantity,
            weight=self.weight,
            rate=self.rate,
        )

    @staticmethod
    def payload(line: LineItem, header_id, total: float) -> dict:
        return {
            "routeid": wire_id(header_id),
            "customerid": wire_id(line.customer_id),
            "itemid": wire_id(line.item_id),
            "itemqty": line.quantity,
            "itemweight": line.weight,
            "rateofsale": line.rate,
        }
