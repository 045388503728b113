import logging

from raza.core.errors import ApiError, DashboardError, PermissionDenied, SaveFailed, ValidationFailed
from raza.schemas.ledger import Notice

logger = logging.getLogger(__name__)

class Screen:
    """State holder for one dashboard page.

    A screen only fetches after the view capability check passes, turns
    errors into a ``notice`` instead of raising, and drops results that
    arrive after ``close()``.
    """

    title = "Screen"

    def __init__(self, agent, session):
        self.agent = agent
        self.session = session
        self.loading = False
        self.loaded = False
        self.closed = False
        self.denied = False
        self.notice: Notice | None = None
        self.field_errors: dict[str, str] = {}

    @property
    def capabilities(self):
        return self.session.capabilities

    @property
    def form_visible(self) -> bool:
        return self.capabilities.can_mutate

    def close(self):
        self.closed = True

    def commit(self, **state) -> bool:
        if self.closed:
            logger.debug("%s closed, dropping %s", self.title, ", ".join(state))
            return False
        for name, value in state.items():
            setattr(self, name, value)
        return True

    def notify(self, text: str, kind: str = "success"):
        if not self.closed:
            self.notice = Notice(text=text, kind=kind)

    def fail(self, error: Exception, fallback: str):
        if isinstance(error, ValidationFailed):
            self.commit(field_errors=error.errors)
            self.notify(next(iter(error.errors.values()), fallback), "error")
        elif isinstance(error, (PermissionDenied, SaveFailed)):
            self.notify(str(error), "error")
        elif isinstance(error, ApiError):
            self.notify(fallback, "error")
        else:
            self.notify(str(error) or fallback, "error")

    async def fetch(self):
        raise NotImplementedError

    async def load(self) -> bool:
        if not self.capabilities.can_view:
            self.commit(denied=True, loaded=False)
            self.notify(f"You do not have permission to view {self.title}.", "error")
            return False

        self.commit(loading=True, denied=False)
        try:
            await self.fetch()
        except DashboardError as e:
            logger.error("Loading %s failed: %s", self.title, e)
            self.fail(e, f"Failed to load {self.title} data")
            return False
        finally:
            self.commit(loading=False)
        return self.commit(loaded=True)
