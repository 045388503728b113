import logging
import httpx

from raza.config import settings
from raza.core.errors import ApiError

logger = logging.getLogger(__name__)

def unwrap_list(data) -> list[dict]:
    # list endpoints answer either {"data": [...]} or a bare list
    if isinstance(data, dict):
        data = data.get("data")
    if isinstance(data, list):
        return [row for row in data if isinstance(row, dict)]
    if isinstance(data, dict):
        return [data]
    return []

def unwrap_entity(data) -> dict:
    if isinstance(data, dict) and isinstance(data.get("data"), dict):
        return data["data"]
    if isinstance(data, dict):
        return data
    if isinstance(data, list) and data and isinstance(data[0], dict):
        return data[0]
    return {}

def created_id(data, keys: tuple[str, ...] = ("id",)):
    nested = data.get("data") if isinstance(data, dict) else None
    for key in keys:
        if isinstance(nested, dict) and nested.get(key) is not None:
            return nested[key]
        if isinstance(data, dict) and data.get(key) is not None:
            return data[key]
    return None

class BackendAgent:
    """JSON client for the dashboard REST backend.

    ``session`` is read on every request so a login or logout made after
    the agent was built is picked up without rebuilding it.
    """

    def __init__(self, session=None, base_url: str | None = None, transport: httpx.AsyncBaseTransport | None = None):
        self.session = session
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.transport = transport

    def get_headers(self, json: bool = True) -> dict:
        headers = {}
        token = getattr(self.session, "token", None)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if json:
            headers["Content-Type"] = "application/json"
        return headers

    async def request(self, method: str, path: str, payload=None, params=None):
        path = "/" + path.lstrip("/")
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=self.get_headers(json=payload is not None),
            timeout=settings.REQUEST_TIMEOUT,
            transport=self.transport,
        ) as client:
            try:
                response = await client.request(method, path, json=payload, params=params)
            except httpx.HTTPError as e:
                logger.error("%s %s failed: %s", method, path, e)
                raise ApiError(method, path) from e

        if not response.is_success:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            logger.error("%s %s returned %s: %s", method, path, response.status_code, body)
            raise ApiError(method, path, response.status_code, body)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    async def list_all(self, resource: str, params: dict | None = None) -> list[dict]:
        data = await self.request("GET", resource, params=params)
        return unwrap_list(data)

    async def get(self, resource: str, entity_id) -> dict:
        data = await self.request("GET", f"{resource}/{entity_id}")
        return unwrap_entity(data)

    async def list_children(self, resource: str, parent_id) -> list[dict]:
        data = await self.request("GET", f"{resource}/index/{parent_id}")
        return unwrap_list(data)

    async def create(self, resource: str, payload: dict):
        return await self.request("POST", resource, payload=payload)

    async def update(self, resource: str, entity_id, payload: dict):
        return await self.request("PUT", f"{resource}/{entity_id}", payload=payload)

    async def patch(self, resource: str, entity_id, payload: dict):
        return await self.request("PATCH", f"{resource}/{entity_id}", payload=payload)

    async def delete(self, resource: str, entity_id):
        return await self.request("DELETE", f"{resource}/{entity_id}")

    async def login(self, email: str, password: str) -> dict:
        data = await self.request("POST", "auth/login", payload={"email": email, "password": password})
        return data if isinstance(data, dict) else {}
