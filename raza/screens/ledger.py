import asyncio
import logging
from datetime import date as Date

from raza.core.composer import DraftComposer
from raza.core.errors import ApiError, DashboardError, SaveFailed, ValidationFailed
from raza.core.resolver import find_by_id, resolve
from raza.core.rollup import filter_headers, lines_for, rollup
from raza.core.totals import line_total
from raza.ledgers import ORDERS, PURCHASES, SALES
from raza.schemas.fields import same_id
from raza.schemas.ledger import DraftKey, Header, LineItem, PersistedKey
from raza.screens.base import Screen
from raza.sync.ledger import SaveOrchestrator, fetch_ledger, fetch_lines
from raza.sync.reference import load_references

logger = logging.getLogger(__name__)

def today() -> str:
    return Date.today().isoformat()

class LedgerScreen(Screen):
    """Header list, draft line items and day totals for one ledger."""

    ledger = SALES
    parties = "customers"
    party_label = "Customer"
    references = ("customers", "items")
    default_status = "open"

    def __init__(self, agent, session, clamp: bool | None = None):
        super().__init__(agent, session)
        self.title = f"{self.ledger.name}s"
        self.clamp = clamp
        self.collections: dict[str, list] = {name: [] for name in self.references}
        self.headers: list[Header] = []
        self.lines: list[LineItem] = []
        self.composer = DraftComposer(required=self.ledger.required_line, clamp=clamp)
        self.editing_id = None
        self.header_form = self.blank_header()
        self.selected_date = today()
        self.status_filter = ""
        self.party_filter = None
        self.search = ""

    def blank_header(self) -> Header:
        return Header(date=today(), status=self.default_status)

    async def fetch(self):
        references, (headers, lines) = await asyncio.gather(
            load_references(self.agent, *self.references),
            fetch_ledger(self.agent, self.ledger),
        )
        self.commit(collections=references, headers=headers, lines=lines)

    async def reload(self) -> bool:
        return await self.load()

    def party_name(self, party_id) -> str:
        return resolve(self.collections.get(self.parties, []), party_id, self.party_label)

    def item_name(self, item_id) -> str:
        return resolve(self.collections.get("items", []), item_id, "Item")

    def set_header(self, **fields):
        self.header_form = self.header_form.model_copy(update=fields)

    def add_draft(self, candidate: dict) -> LineItem | None:
        try:
            line = self.composer.add(candidate)
        except ValidationFailed as e:
            self.fail(e, "Select item")
            return None
        self.field_errors = {}
        return line

    def remove_draft(self, key) -> bool:
        return self.composer.remove(key)

    def edit_draft(self, key, **changes) -> LineItem | None:
        try:
            return self.composer.edit(key, **changes)
        except ValidationFailed as e:
            self.fail(e, "Invalid line item")
            return None

    def reset_form(self):
        self.editing_id = None
        self.composer.clear()
        self.header_form = self.blank_header()
        self.field_errors = {}

    async def start_edit(self, header_id) -> bool:
        if not self.capabilities.can_edit:
            self.notify(f"You do not have permission to edit {self.title.lower()}", "error")
            return False
        header = find_by_id(self.headers, header_id)
        if header is None:
            self.notify(f"{self.ledger.name} {header_id} not found", "error")
            return False

        lines = lines_for(header, self.lines)
        if not lines and self.ledger.lines_listing != "all":
            try:
                lines = await fetch_lines(self.agent, self.ledger, header.id)
            except ApiError as e:
                logger.error("Loading lines of %s %s failed: %s", self.ledger.label, header.id, e)
        if not self.commit(editing_id=header.id, header_form=header):
            return False
        self.composer.load(lines, header.id)
        return True

    async def save(self):
        orchestrator = SaveOrchestrator(
            self.agent, self.ledger, self.capabilities, created_by=self.session.user_id, clamp=self.clamp
        )
        editing = self.editing_id is not None
        try:
            header_id = await orchestrator.save(self.header_form, self.composer.lines, self.editing_id)
        except SaveFailed as e:
            if orchestrator.header_id is not None and self.commit(editing_id=orchestrator.header_id):
                self.composer.load(orchestrator.settled(self.composer.lines), orchestrator.header_id)
            self.fail(e, f"Failed to save {self.ledger.label}")
            return None
        except DashboardError as e:
            # the draft stays as it is so the user can retry
            self.fail(e, f"Failed to save {self.ledger.label}")
            return None

        if self.closed:
            return header_id
        self.reset_form()
        self.notify(f"{self.ledger.name} {'updated' if editing else 'created'}")
        await self.reload()
        return header_id

    async def delete(self, header_id) -> bool:
        if not self.capabilities.can_delete:
            self.notify(f"You do not have permission to delete {self.title.lower()}", "error")
            return False
        try:
            await self.agent.delete(self.ledger.header_resource, header_id)
        except ApiError as e:
            self.fail(e, "Delete failed")
            return False
        self.notify(f"{self.ledger.name} deleted")
        await self.reload()
        return True

    async def update_line(self, line: LineItem) -> bool:
        """Save one persisted line straight away, outside of a header save."""
        if not self.capabilities.can_edit:
            self.notify(f"You do not have permission to edit {self.title.lower()}", "error")
            return False
        if not isinstance(line.key, PersistedKey):
            self.notify("Only saved line items can be updated", "error")
            return False
        payload = self.ledger.line_record.payload(line, line.header_id, line_total(line, self.clamp))
        try:
            await self.agent.update(self.ledger.line_resource, line.key.server_id, payload)
        except ApiError as e:
            self.fail(e, "Failed to update item")
            return False
        self.notify(f"{self.ledger.name} item updated")
        await self.reload()
        return True

    async def delete_line(self, key) -> bool:
        if isinstance(key, DraftKey):
            return self.remove_draft(key)
        if not self.capabilities.can_delete:
            self.notify(f"You do not have permission to delete {self.title.lower()}", "error")
            return False
        try:
            await self.agent.delete(self.ledger.line_resource, key.server_id)
        except ApiError as e:
            self.fail(e, "Failed to delete item")
            return False
        self.composer.remove(key)
        self.notify(f"{self.ledger.name} item deleted")
        await self.reload()
        return True

    def header_lines(self, header_id) -> list[LineItem]:
        return [line for line in self.lines if same_id(line.header_id, header_id)]

    def filtered(self) -> list[Header]:
        return filter_headers(
            self.headers,
            date=self.selected_date,
            status=self.status_filter,
            party_id=self.party_filter,
            search=self.search,
            parties=self.collections.get(self.parties, []),
            party_label=self.party_label,
        )

    def day_totals(self) -> dict:
        return rollup(self.filtered(), self.lines, self.clamp)

class SalesScreen(LedgerScreen):
    ledger = SALES

class OrderScreen(LedgerScreen):
    ledger = ORDERS
    default_status = "intransit"

class PurchaseScreen(LedgerScreen):
    ledger = PURCHASES
    parties = "companies"
    party_label = "Company"
    references = ("companies", "items")
