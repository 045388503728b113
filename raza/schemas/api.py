from pydantic import BaseModel, Field

class LoginRequest(BaseModel):
    email: str
    password: str

class LineForm(BaseModel):
    # server_id is set for line items that already exist on the backend
    server_id: int | str | None = None
    item_id: int | str | None = None
    customer_id: int | str | None = None
    quantity: float | str | None = None
    weight: float | str | None = None
    rate: float | str | None = None
    actual_rate: float | str | None = None
    discount_type: str = "flat"
    discount: float | str | None = None
    status: str = ""

class HeaderForm(BaseModel):
    party_id: int | str | None = None
    date: str = ""
    status: str = ""
    route_type: str = ""
    vehicle_id: int | str | None = None
    driver_id: int | str | None = None

class SaveRequest(BaseModel):
    header: HeaderForm
    lines: list[LineForm] = Field(default_factory=list)
    editing_id: int | str | None = None

class MasterRequest(BaseModel):
    data: dict
    password: str | None = None
