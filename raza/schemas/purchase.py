from raza.schemas.fields import Amount, DateText, EntityId, Text, aliased, wire_id
from raza.schemas.ledger import DiscountType, Header, LineItem
from raza.schemas.records import HeaderRecord, LineRecord, line_key

class PurchaseRecord(HeaderRecord):
    id: EntityId = aliased("id", "purchaseid", "purchase_id", "_id")
    company_id: EntityId = aliased("companyid", "company_id", "company")
    date: DateText = aliased("purchasedate", "purchase_date", "date", default="")
    status: Text = aliased("purchasestatus", "status", default="open")

    def to_header(self) -> Header:
        return Header(id=self.id, party_id=self.company_id, date=self.date, status=self.status or "open")

    @staticmethod
    def payload(header: Header) -> dict:
        return {
            "companyid": wire_id(header.party_id),
            "purchasedate": header.date,
            "purchasestatus": header.status or "open",
        }

class PurchaseItemRecord(LineRecord):
    id: EntityId = aliased("id", "purchaseitem_id", "purchase_item_id", "_id")
    purchase_id: EntityId = aliased("purchaseid", "purchase_id", "purchase")
    item_id: EntityId = aliased("itemid", "item_id")
    weight: Amount = aliased("itemweight", "item_weight", default=0.0)
    quantity: Amount = aliased("itemqty", "item_qty", default=0.0)
    rate: Amount = aliased("purchaserate", "purchase_rate", "rate", default=0.0)
    discount_type: Text = aliased("discounttype", "discount_type", default="flat")
    discount: Amount = aliased("discount", default=0.0)
    status: Text = aliased("status", "itemstatus", default="")

    def to_line(self) -> LineItem:
        return LineItem(
            key=line_key(self.id),
            header_id=self.purchase_id,
            item_id=self.item_id,
            weight=self.weight,
            quantity=self.quantity,
            rate=self.rate,
            discount_type=DiscountType.parse(self.discount_type),
            discount=self.discount,
            status=self.status,
        )

    @staticmethod
    def payload(line: LineItem, header_id, total: float) -> dict:
        return {
            "purchaseid": wire_id(header_id),
            "itemid": wire_id(line.item_id),
            "itemweight": line.weight,
            "itemqty": line.quantity,
            "purchaserate": line.rate,
            "discounttype": line.discount_type.value,
            "discount": line.discount,
            "totalpurchase": total,
        }
