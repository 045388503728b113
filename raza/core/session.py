import json
import logging

from raza.config import settings
from raza.core.errors import ApiError
from raza.core.permissions import Capabilities
from raza.schemas.user import AuthUser, normalize_auth_user

logger = logging.getLogger(__name__)

class AppSession:
    """Logged-in user and bearer token, handed explicitly to every screen.

    Lifecycle: ``load()`` when the application starts, ``login()`` replaces
    the user and token, ``logout()`` clears both from memory and the store.
    """

    def __init__(self, store=None, storage_key: str | None = None):
        self.store = store
        self.storage_key = storage_key or settings.SESSION_STORAGE_KEY
        self.user: AuthUser | None = None
        self.token: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def capabilities(self) -> Capabilities:
        return Capabilities.for_user(self.user)

    @property
    def user_id(self):
        return self.user.id if self.user is not None else None

    async def load(self):
        if self.store is None:
            return self.user
        stored = await self.store.get(self.storage_key)
        if stored is None:
            self.user, self.token = None, None
            return None
        try:
            raw = json.loads(stored.user_json)
        except ValueError:
            logger.warning("Discarding unreadable session under %s", self.storage_key)
            raw = None
        self.user = normalize_auth_user(raw)
        self.token = stored.token if self.user is not None else None
        return self.user

    async def set_user(self, user: AuthUser | None, token: str | None = None):
        if user is None:
            return
        self.user = user
        self.token = token
        if self.store is not None:
            await self.store.save(self.storage_key, token, user.model_dump_json())

    async def login(self, agent, email: str, password: str) -> AuthUser:
        if not email or not password:
            raise ValueError("Email and Password are required")
        data = await agent.login(email, password)
        user = normalize_auth_user(data)
        if user is None:
            raise ApiError("POST", "/auth/login", body=data)
        token = data.get("token") or data.get("access_token")
        # the token belongs to the response, not to the user record
        user = AuthUser(**user.model_dump(exclude={"token", "access_token"}))
        await self.set_user(user, token)
        logger.info("Logged in as %s", user.display_name)
        return user

    async def logout(self):
        self.user = None
        self.token = None
        if self.store is not None:
            await self.store.clear(self.storage_key)
