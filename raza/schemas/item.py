import re
from pydantic import BaseModel, ConfigDict

from raza.schemas.fields import EntityId, Text, aliased

class Item(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: EntityId = aliased("id", "item_id", "_id")
    name: Text = aliased("itemname", "name", default="")
    customer_type_id: EntityId = aliased("customertypeid", "customer_type_id")

    @property
    def slug(self) -> str:
        return re.sub(r"[^a-z0-9]+", "-", self.name.lower()).strip("-")

    def to_payload(self) -> dict:
        return {
            "itemname": self.name,
            "itemslug": self.slug,
            "customertypeid": self.customer_type_id if self.customer_type_id is not None else 1,
        }
