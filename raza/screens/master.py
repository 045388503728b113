import logging
import re
from dataclasses import dataclass, field
from typing import Callable
from pydantic import ValidationError

from raza.agents.backend import created_id
from raza.core.errors import ApiError, ValidationFailed
from raza.core.resolver import find_by_id
from raza.schemas.company import Company
from raza.schemas.customer import Customer
from raza.schemas.item import Item
from raza.schemas.user import User
from raza.schemas.vehicle import Vehicle, VehicleType
from raza.screens.base import Screen
from raza.sync.reference import normalize_rows

logger = logging.getLogger(__name__)

def _customer_rules(entity: Customer, editing: bool, extra: dict) -> dict:
    errors = {}
    if len(re.sub(r"\D", "", entity.phone)) != 10:
        errors["phone"] = "Phone number must be exactly 10 digits."
    return errors

def _user_rules(entity: User, editing: bool, extra: dict) -> dict:
    errors = {}
    if not entity.email:
        errors["email"] = "Email is required"
    if not entity.mobile:
        errors["mobile"] = "Mobile number is required"
    if not editing and not extra.get("password"):
        errors["password"] = "Password is required for new users"
    return errors

@dataclass(frozen=True)
class Master:
    """How one reference collection is listed, searched and written."""

    title: str
    resource: str
    model: type
    search_fields: tuple[str, ...] = ("name",)
    required: tuple[str, ...] = ("name",)
    create_resource: str | None = None
    sort_by_name: bool = False
    rules: Callable | None = field(default=None, compare=False)

CUSTOMERS = Master(
    title="Customers",
    resource="customers",
    model=Customer,
    search_fields=("name", "owner_name", "location"),
    required=("name", "owner_name", "phone", "location"),
    sort_by_name=True,
    rules=_customer_rules,
)
ITEMS = Master(title="Items", resource="items", model=Item)
COMPANIES = Master(
    title="Companies",
    resource="company-master",
    model=Company,
    search_fields=("name", "gstin", "location"),
)
VEHICLES = Master(
    title="Vehicles",
    resource="vehicles",
    model=Vehicle,
    search_fields=("code", "registration", "model", "owner_name"),
    required=("code", "registration"),
    create_resource="vehicles/add",
)
VEHICLE_TYPES = Master(title="Vehicle Types", resource="vehicle-types", model=VehicleType)
USERS = Master(
    title="Users",
    resource="users",
    model=User,
    search_fields=("name", "email"),
    rules=_user_rules,
)

MASTERS = {
    "customers": CUSTOMERS,
    "items": ITEMS,
    "companies": COMPANIES,
    "vehicles": VEHICLES,
    "vehicle-types": VEHICLE_TYPES,
    "users": USERS,
}

class MasterScreen(Screen):
    """List, search, create, update and delete for one reference master."""

    def __init__(self, agent, session, master: Master):
        super().__init__(agent, session)
        self.master = master
        self.title = master.title
        self.rows: list = []
        self.search = ""
        self.editing_id = None
        self.saved_id = None

    async def fetch(self):
        rows = normalize_rows(await self.agent.list_all(self.master.resource), self.master.model)
        if self.master.sort_by_name:
            rows.sort(key=lambda row: (row.name or "").lower())
        self.commit(rows=rows)

    def filtered(self) -> list:
        query = self.search.strip().lower()
        if not query:
            return list(self.rows)
        return [
            row for row in self.rows
            if any(query in str(getattr(row, name, "") or "").lower() for name in self.master.search_fields)
        ]

    def validate(self, entity, editing: bool, extra: dict):
        errors = {}
        for name in self.master.required:
            if not getattr(entity, name, None):
                errors[name] = f"{name.replace('_', ' ').capitalize()} is required"
        if self.master.rules is not None:
            errors.update(self.master.rules(entity, editing, extra))
        if errors:
            raise ValidationFailed(errors)

    async def save(self, data: dict, editing_id=None, **extra) -> bool:
        """Create (``editing_id`` None) or update a row from form ``data``."""
        editing = editing_id is not None
        action = "update" if editing else "create"
        if not self.capabilities.allows("edit" if editing else "create"):
            self.notify(f"You do not have permission to {action} {self.title.lower()}.", "error")
            return False

        try:
            entity = self.master.model.model_validate(data)
            self.validate(entity, editing, extra)
        except ValidationError as e:
            self.fail(ValidationFailed.from_pydantic(e), "Please fill required fields")
            return False
        except ValidationFailed as e:
            self.fail(e, "Please fill required fields")
            return False

        payload = entity.to_payload(**extra) if extra else entity.to_payload()
        try:
            if editing:
                await self.agent.update(self.master.resource, editing_id, payload)
                entity_id = editing_id
            else:
                data = await self.agent.create(self.master.create_resource or self.master.resource, payload)
                entity_id = created_id(data)
        except ApiError as e:
            self.fail(e, f"Failed to {action} {self.title.lower()}")
            return False

        self.commit(editing_id=None, field_errors={}, saved_id=entity_id)
        self.notify(f"{self.title} {'updated' if editing else 'created'} successfully!")
        await self.load()
        return True

    def start_edit(self, entity_id):
        if not self.capabilities.can_edit:
            self.notify(f"You do not have permission to update {self.title.lower()}.", "error")
            return None
        row = find_by_id(self.rows, entity_id)
        if row is not None:
            self.editing_id = row.id
        return row

    async def delete(self, entity_id) -> bool:
        if not self.capabilities.can_delete:
            self.notify(f"You do not have permission to delete {self.title.lower()}.", "error")
            return False
        try:
            await self.agent.delete(self.master.resource, entity_id)
        except ApiError as e:
            self.fail(e, f"Could not delete {self.title.lower()}")
            return False
        self.notify(f"{self.title} deleted successfully!")
        await self.load()
        return True

    async def toggle_status(self, entity_id) -> bool:
        """Flip a user between active and inactive."""
        if not self.capabilities.can_edit:
            self.notify(f"You do not have permission to update {self.title.lower()}.", "error")
            return False
        row = find_by_id(self.rows, entity_id)
        current = getattr(row, "status", "active")
        status = "inactive" if current == "active" else "active"
        try:
            await self.agent.request("PATCH", f"{self.master.resource}/{entity_id}/status", payload={"status": status})
        except ApiError as e:
            self.fail(e, "Could not update status")
            return False
        self.notify(f"User status changed to {status}!")
        await self.load()
        return True
