import json
import httpx
import pytest

from raza.agents.backend import BackendAgent
from raza.core.session import AppSession
from raza.schemas.user import AuthUser

BASE_URL = "http://backend.test/api"

class FakeBackend:
    """Answers agent requests from canned routes and records every call."""

    def __init__(self):
        self.routes = {}
        self.calls = []

    def on(self, method: str, path: str, body=None, status: int = 200):
        self.routes[(method, path)] = (status, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/api")
        payload = json.loads(request.content) if request.content else None
        self.calls.append((request.method, path, payload))
        if (request.method, path) not in self.routes:
            if request.method == "GET":
                return httpx.Response(200, json={"data": []})
            return httpx.Response(404, json={"message": "Not found"})
        status, body = self.routes[(request.method, path)]
        if callable(body):
            body = body(request, payload)
            if isinstance(body, httpx.Response):
                return body
        return httpx.Response(status, json=body)

    def sent(self, method: str | None = None, prefix: str = "") -> list:
        return [
            call for call in self.calls
            if (method is None or call[0] == method) and call[1].startswith(prefix)
        ]

def make_session(roles=(), permissions=(), user_id=7) -> AppSession:
    session = AppSession()
    session.user = AuthUser(id=user_id, name="Tester", roles=list(roles), permissions=list(permissions))
    session.token = "secret-token"
    return session

@pytest.fixture
def backend():
    return FakeBackend()

@pytest.fixture
def admin_session():
    return make_session(roles=["admin"])

@pytest.fixture
def viewer_session():
    return make_session(permissions=["view"])

@pytest.fixture
def agent(backend, admin_session):
    return BackendAgent(admin_session, base_url=BASE_URL, transport=httpx.MockTransport(backend.handler))

@pytest.fixture
def viewer_agent(backend, viewer_session):
    return BackendAgent(viewer_session, base_url=BASE_URL, transport=httpx.MockTransport(backend.handler))

@pytest.fixture
def guest_session():
    return make_session()
