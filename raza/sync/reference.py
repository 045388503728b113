import asyncio
import logging
from pydantic import ValidationError

from raza.schemas.company import Company
from raza.schemas.customer import Customer
from raza.schemas.item import Item
from raza.schemas.user import User
from raza.schemas.vehicle import Vehicle, VehicleType

logger = logging.getLogger(__name__)

REFERENCES = {
    "customers": ("customers", Customer),
    "items": ("items", Item),
    "companies": ("company-master", Company),
    "vehicles": ("vehicles", Vehicle),
    "vehicle_types": ("vehicle-types", VehicleType),
    "users": ("users", User),
}

def normalize_rows(rows: list[dict], model) -> list:
    entities = []
    for row in rows:
        try:
            entities.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning("Skipping malformed %s row %s: %s", model.__name__, row.get("id"), e)
            continue
    return entities

async def fetch_reference(agent, name: str) -> list:
    resource, model = REFERENCES[name]
    rows = await agent.list_all(resource)
    return normalize_rows(rows, model)

async def load_references(agent, *names: str) -> dict[str, list]:
    """Fetch the named reference collections concurrently."""
    results = await asyncio.gather(*(fetch_reference(agent, name) for name in names))
    return dict(zip(names, results))
