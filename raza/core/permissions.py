from dataclasses import dataclass

from raza.core.errors import PermissionDenied
from raza.schemas.user import AuthUser

ADMIN_ROLE = "admin"

def has_role(user: AuthUser | None, role: str) -> bool:
    if user is None or not role:
        return False
    return role in user.roles

def has_permission(user: AuthUser | None, permission: str) -> bool:
    if user is None or not permission:
        return False
    return permission in user.permissions

@dataclass(frozen=True)
class Capabilities:
    is_admin: bool = False
    can_view: bool = False
    can_create: bool = False
    can_edit: bool = False
    can_delete: bool = False

    @classmethod
    def for_user(cls, user: AuthUser | None) -> "Capabilities":
        is_admin = has_role(user, ADMIN_ROLE)
        return cls(
            is_admin=is_admin,
            can_view=is_admin or has_permission(user, "view"),
            can_create=is_admin or has_permission(user, "create"),
            can_edit=is_admin or has_permission(user, "edit"),
            can_delete=is_admin or has_permission(user, "delete"),
        )

    @property
    def can_mutate(self) -> bool:
        # the create/edit form is only rendered when this holds
        return self.can_create or self.can_edit

    def allows(self, action: str) -> bool:
        return getattr(self, f"can_{action}", False)

    def require(self, action: str, subject: str):
        if not self.allows(action):
            verb = "update" if action == "edit" else action
            raise PermissionDenied(verb, subject)

    def as_dict(self) -> dict:
        return {
            "is_admin": self.is_admin,
            "can_view": self.can_view,
            "can_create": self.can_create,
            "can_edit": self.can_edit,
            "can_delete": self.can_delete,
            "can_mutate": self.can_mutate,
        }
