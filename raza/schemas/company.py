from pydantic import BaseModel, ConfigDict

from raza.schemas.fields import EntityId, Text, aliased

class Company(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: EntityId = aliased("id", "company_id", "_id")
    name: Text = aliased("company_name", "name", default="")
    gstin: Text = aliased("company_gst_number", "gstin", default="")
    owner_name: Text = aliased("company_owner_name", "pocName", default="")
    phone: Text = aliased("company_mobile", "pocPhone", default="")
    email: Text = aliased("company_email", "email", default="")
    location: Text = aliased("company_location", "location", default="")

    def to_payload(self) -> dict:
        return {
            "company_name": self.name,
            "company_mobile": self.phone,
            "company_email": self.email,
            "company_owner_name": self.owner_name,
            "company_location": self.location,
            "company_gst_number": self.gstin.upper(),
            "totalpurchaseinkg": "0",
            "totalbuisness": "0",
            "totalbalance": "0",
            "status": "active",
        }
