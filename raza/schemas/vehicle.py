from pydantic import BaseModel, ConfigDict

from raza.schemas.fields import DateText, EntityId, Text, aliased

class VehicleType(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: EntityId = aliased("id", "vehicletype_id", "_id")
    name: Text = aliased("vehicletype", "name", default="")

    def to_payload(self) -> dict:
        return {"vehicletype": self.name}

class Vehicle(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: EntityId = aliased("id", "vehicle_id", "_id")
    code: Text = aliased("vehicalid", "vehicleId", default="")
    registration: Text = aliased("rcnumber", "vehicleNumber", "rc_number", default="")
    model: Text = aliased("vehicalmodel", "model", "vehicle_model", default="")
    type_id: EntityId = aliased("vehicletype", "type")
    owner_name: Text = aliased("ownername", "owner_name", default="")
    owner_address: Text = aliased("owneraddress", "owner_address", default="")
    joined_on: DateText = aliased("dateofjoining", "date_of_joining", default="")
    contact_name: Text = aliased("contactpersonname", "contact_person_name", default="")
    contact_number: Text = aliased("contactperson_number", "contact_person_number", default="")

    @property
    def name(self) -> str:
        return " ".join(part for part in (self.code, self.registration) if part)

    def to_payload(self) -> dict:
        return {
            "vehicletype": str(self.type_id) if self.type_id is not None else "",
            "vehicalid": self.code.upper(),
            "rcnumber": self.registration.upper(),
            "vehicalmodel": self.model,
            "ownername": self.owner_name,
            "owneraddress": self.owner_address,
            "dateofjoining": self.joined_on,
            "contactpersonname": self.contact_name,
            "contactperson_number": self.contact_number,
        }
