from enum import Enum
from pydantic import BaseModel, ConfigDict

from raza.schemas.fields import EntityId, Text, aliased

class CustomerKind(str, Enum):
    HOTEL = "Hotel"
    SHOP = "Shop"

class Customer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: EntityId = aliased("id", "customer_id", "_id")
    name: Text = aliased("customer_name", "customername", "name", default="")
    type_id: EntityId = aliased("customer_typeid", "customer_type_id")
    type_name: Text = aliased("customer_type", "type", default="")
    owner_name: Text = aliased("customer_owner_name", "poc", default="")
    phone: Text = aliased("customer_mobile", "phone", default="")
    email: Text = aliased("customer_email", "email", default="")
    location: Text = aliased("customer_location", "location", default="")

    @property
    def kind(self) -> CustomerKind:
        if str(self.type_id) == "1" or self.type_name == CustomerKind.HOTEL.value:
            return CustomerKind.HOTEL
        return CustomerKind.SHOP

    def to_payload(self) -> dict:
        return {
            "customer_name": self.name,
            "customer_typeid": "1" if self.kind == CustomerKind.HOTEL else "2",
            "customer_mobile": self.phone,
            "customer_email": self.email,
            "customer_owner_name": self.owner_name,
            "customer_alternate_number": "",
            "customer_location": self.location,
            "totalsaleinkg": "0",
            "totalbuisness": "0",
            "totalbalance": "0",
            "status": "active",
        }
