class DashboardError(Exception):
    """Base class for errors surfaced to a screen as a notice."""


class ValidationFailed(DashboardError):
    def __init__(self, errors: dict[str, str]):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{field}: {message}" for field, message in self.errors.items()))

    @classmethod
    def from_pydantic(cls, error) -> "ValidationFailed":
        """Field errors of a pydantic ``ValidationError``, first message per field."""
        errors = {}
        for detail in error.errors():
            field = str(detail["loc"][0]) if detail["loc"] else "data"
            errors.setdefault(field, detail["msg"])
        return cls(errors)


class PermissionDenied(DashboardError):
    def __init__(self, action: str, subject: str):
        self.action = action
        self.subject = subject
        super().__init__(f"You do not have permission to {action} {subject}")


class ApiError(DashboardError):
    def __init__(self, method: str, path: str, status_code: int | None = None, body=None):
        self.method = method
        self.path = path
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"{method} {path} failed"
        else:
            message = f"{method} {path} returned {status_code}"
        super().__init__(message)


class SaveFailed(DashboardError):
    def __init__(self, subject: str, saved: int, remaining: int, cause: Exception | None = None):
        self.subject = subject
        self.saved = saved
        self.remaining = remaining
        self.cause = cause
        super().__init__(
            f"Failed to save {subject} ({saved} line(s) saved, {remaining} not saved)"
        )
