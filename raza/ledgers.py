from dataclasses import dataclass

from raza.schemas.order import OrderItemRecord, OrderRecord
from raza.schemas.purchase import PurchaseItemRecord, PurchaseRecord
from raza.schemas.records import HeaderRecord, LineRecord
from raza.schemas.route import RouteRecord, RouteStopRecord
from raza.schemas.sale import SaleItemRecord, SaleRecord

@dataclass(frozen=True)
class Ledger:
    """A header resource and its line-item resource on the backend."""

    name: str
    header_resource: str
    line_resource: str
    header_record: type[HeaderRecord]
    line_record: type[LineRecord]
    # keys the backend may use for the new header id in a create response
    id_keys: tuple[str, ...] = ("id",)
    required_header: tuple[str, ...] = ("party_id", "date")
    required_line: tuple[str, ...] = ("item_id",)
    # "all": one listing of the line resource, "embedded": lines ride on the
    # header rows, "per_header": /<line resource>/index/{header id}
    lines_listing: str = "all"
    stamp_creator: bool = False

    @property
    def label(self) -> str:
        return self.name.lower()

SALES = Ledger(
    name="Sale",
    header_resource="sales",
    line_resource="saleitems",
    header_record=SaleRecord,
    line_record=SaleItemRecord,
    id_keys=("id", "saleid"),
)

ORDERS = Ledger(
    name="Order",
    header_resource="orders",
    line_resource="orderitems",
    header_record=OrderRecord,
    line_record=OrderItemRecord,
    id_keys=("id", "orderid", "order_id"),
    lines_listing="embedded",
    stamp_creator=True,
)

PURCHASES = Ledger(
    name="Purchase",
    header_resource="purchases",
    line_resource="purchaseitems",
    header_record=PurchaseRecord,
    line_record=PurchaseItemRecord,
    id_keys=("id", "purchaseid"),
)

ROUTES = Ledger(
    name="Route",
    header_resource="route-builder",
    line_resource="route-stops",
    header_record=RouteRecord,
    line_record=RouteStopRecord,
    id_keys=("id", "routeid"),
    required_header=("date", "vehicle_id", "driver_id"),
    required_line=("customer_id", "item_id", "quantity"),
    lines_listing="per_header",
    stamp_creator=True,
)

LEDGERS = {ledger.header_resource: ledger for ledger in (SALES, ORDERS, PURCHASES, ROUTES)}
