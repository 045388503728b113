from pydantic import Field, model_validator

from raza.schemas.fields import Amount, DateText, EntityId, Text, aliased, wire_id
from raza.schemas.ledger import Header, LineItem
from raza.schemas.records import HeaderRecord, LineRecord, line_key

ORDER_ITEM_KEYS = ("items", "orderitems", "order_items", "orderitem")

class OrderItemRecord(LineRecord):
    id: EntityId = aliased("id", "orderitem_id", "order_item_id", "_id")
    order_id: EntityId = aliased("orderid", "order_id", "order")
    item_id: EntityId = aliased("itemid", "item_id", "item")
    weight: Amount = aliased("itemweight", "item_weight", "weight", default=0.0)
    quantity: Amount = aliased("itemqty", "item_qty", "quantity", default=0.0)
    status: Text = aliased("status", "itemstatus", "state", default="ordered")

    def to_line(self) -> LineItem:
        return LineItem(
            key=line_key(self.id),
            header_id=self.order_id,
            item_id=self.item_id,
            weight=self.weight,
            quantity=self.quantity,
            status=self.status or "ordered",
        )

    @staticmethod
    def payload(line: LineItem, header_id, total: float) -> dict:
        return {
            "orderid": wire_id(header_id),
            "itemid": wire_id(line.item_id),
            "itemweight": line.weight,
            "itemqty": line.quantity,
            "status": line.status or "ordered",
        }

class OrderRecord(HeaderRecord):
    id: EntityId = aliased("id", "order_id", "_id")
    customer_id: EntityId = aliased("customerid", "customer_id", "customer", "customerid_id")
    date: DateText = aliased("orderdate", "order_date", "date", default="")
    status: Text = aliased("orderstatus", "status", default="intransit")
    items: list[OrderItemRecord] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def collect_items(cls, data):
        if not isinstance(data, dict):
            return data
        raw = next((data[key] for key in ORDER_ITEM_KEYS if data.get(key) is not None), [])
        if not isinstance(raw, list):
            raw = [raw]
        if not raw and (data.get("itemid") or data.get("item_id")):
            # older rows carry a single item flattened onto the order itself
            raw = [{
                "itemid": data.get("itemid", data.get("item_id")),
                "itemweight": data.get("itemweight", data.get("item_weight", 0)),
                "status": data.get("itemstatus", data.get("status")),
            }]
        data = {key: value for key, value in data.items() if key not in ORDER_ITEM_KEYS}
        data["items"] = raw
        return data

    def to_header(self) -> Header:
        return Header(id=self.id, party_id=self.customer_id, date=self.date, status=self.status or "intransit")

    def lines(self) -> list[LineItem]:
        lines = []
        for record in self.items:
            line = record.to_line()
            if line.header_id is None:
                line = line.model_copy(update={"header_id": self.id})
            lines.append(line)
        return lines

    @staticmethod
    def payload(header: Header) -> dict:
        return {
            "customerid": wire_id(header.party_id),
            "orderdate": header.date,
            "orderstatus": header.status or "intransit",
        }
