from raza.schemas.fields import Amount, DateText, EntityId, Text, aliased, wire_id
from raza.schemas.ledger import DiscountType, Header, LineItem
from raza.schemas.records import HeaderRecord, LineRecord, line_key

class SaleRecord(HeaderRecord):
    id: EntityId = aliased("id", "saleid", "_id")
    customer_id: EntityId = aliased("customerid", "customer_id", "customer")
    date: DateText = aliased("saledate", "sale_date", "date", default="")
    status: Text = aliased("salestatus", "status", default="open")

    def to_header(self) -> Header:
        return Header(id=self.id, party_id=self.customer_id, date=self.date, status=self.status or "open")

    @staticmethod
    def payload(header: Header) -> dict:
        return {
            "customerid": wire_id(header.party_id),
            "saledate": header.date,
            "salestatus": header.status or "open",
        }

class SaleItemRecord(LineRecord):
    id: EntityId = aliased("id", "saleitem_id", "sale_item_id", "_id")
    sale_id: EntityId = aliased("saleid", "sale_id", "sale")
    item_id: EntityId = aliased("itemid", "item_id")
    weight: Amount = aliased("itemweight", "item_weight", default=0.0)
    quantity: Amount = aliased("itemqty", "item_qty", default=0.0)
    actual_rate: Amount = aliased("actualrate", "actual_rate", default=0.0)
    rate: Amount = aliased("salerate", "sale_rate", default=0.0)
    discount_type: Text = aliased("discounttype", "discount_type", default="flat")
    discount: Amount = aliased("discount", default=0.0)
    total: Amount = aliased("totalsale", "total_sale", default=0.0)

    def to_line(self) -> LineItem:
        return LineItem(
            key=line_key(self.id),
            header_id=self.sale_id,
            item_id=self.item_id,
            weight=self.weight,
            quantity=self.quantity,
            actual_rate=self.actual_rate,
            rate=self.rate,
            discount_type=DiscountType.parse(self.discount_type),
            discount=self.discount,
        )

    @staticmethod
    def payload(line: LineItem, header_id, total: float) -> dict:
        return {
            "saleid": wire_id(header_id),
            "itemid": wire_id(line.item_id),
            "itemweight": line.weight,
            "itemqty": line.quantity,
            "actualrate": line.actual_rate,
            "salerate": line.rate,
            "discounttype": line.discount_type.value,
            "discount": line.discount,
            "totalsale": total,
        }
