from pydantic import BaseModel, ConfigDict, Field, field_validator

from raza.schemas.fields import EntityId, Text, aliased

def name_list(value) -> list[str]:
    # roles/permissions arrive as plain strings or as {"name"|"role"|"permission": ...}
    if not isinstance(value, list):
        return []
    names = []
    for entry in value:
        if not entry:
            continue
        if isinstance(entry, str):
            names.append(entry)
        elif isinstance(entry, dict):
            name = entry.get("name") or entry.get("role") or entry.get("permission") or ""
            if name:
                names.append(str(name))
    return names

class User(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: EntityId = aliased("id", "user_id", "_id")
    name: Text = aliased("name", "username", default="")
    email: Text = aliased("email", default="")
    mobile: Text = aliased("mobileno", "mobile", "phone", default="")
    status: Text = aliased("status", default="active")

    def to_payload(self, password: str | None = None) -> dict:
        payload = {
            "name": self.name,
            "email": self.email,
            "mobileno": self.mobile,
            "status": self.status,
        }
        if password:
            payload["password"] = password
        return payload

class AuthUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | str | None = None
    name: str | None = None
    username: str | None = None
    email: str | None = None
    roles: list[str] = Field(default_factory=list)
    permissions: list[str] = Field(default_factory=list)

    @field_validator("roles", "permissions", mode="before")
    @classmethod
    def flatten_names(cls, value):
        return name_list(value)

    @property
    def display_name(self) -> str:
        return self.name or self.username or self.email or ""

def normalize_auth_user(raw) -> AuthUser | None:
    """Build an AuthUser from a login response or a stored user blob.

    The backend either returns the user at the top level or nests it under
    ``user``; roles and permissions may sit beside the nested user.
    """
    if not raw or not isinstance(raw, dict):
        return None

    user = raw["user"] if isinstance(raw.get("user"), dict) else raw
    roles = raw.get("roles") if raw.get("roles") is not None else user.get("roles")
    permissions = raw.get("permissions") if raw.get("permissions") is not None else user.get("permissions")

    data = {key: value for key, value in user.items() if key not in ("roles", "permissions")}
    auth_user = AuthUser(**data, roles=roles, permissions=permissions)
    if auth_user.id is None and not auth_user.display_name:
        return None
    return auth_user
