import uuid
from enum import Enum
from typing import Annotated, Literal, Union
from pydantic import BaseModel, ConfigDict, Field

class DiscountType(str, Enum):
    FLAT = "flat"
    PERCENT = "percent"

    @classmethod
    def parse(cls, value) -> "DiscountType":
        if isinstance(value, DiscountType):
            return value
        if str(value or "").strip().lower() == cls.PERCENT.value:
            return cls.PERCENT
        return cls.FLAT

class DraftKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["draft"] = "draft"
    local_id: str = Field(default_factory=lambda: uuid.uuid4().hex)

class PersistedKey(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["persisted"] = "persisted"
    server_id: int | str

LineKey = Annotated[Union[DraftKey, PersistedKey], Field(discriminator="kind")]

class LineItem(BaseModel):
    """One child row of a header: sale item, order item, purchase item or route stop."""

    model_config = ConfigDict(frozen=True)

    key: LineKey = Field(default_factory=DraftKey)
    header_id: int | str | None = None
    item_id: int | str | None = None
    customer_id: int | str | None = None
    quantity: float = 0.0
    weight: float = 0.0
    rate: float = 0.0
    actual_rate: float = 0.0
    discount_type: DiscountType = DiscountType.FLAT
    discount: float = 0.0
    status: str = ""

    @property
    def is_draft(self) -> bool:
        return isinstance(self.key, DraftKey)

class Header(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int | str | None = None
    party_id: int | str | None = None
    date: str = ""
    status: str = ""
    route_type: str = ""
    vehicle_id: int | str | None = None
    driver_id: int | str | None = None

class Notice(BaseModel):
    text: str
    kind: Literal["success", "error"] = "success"
