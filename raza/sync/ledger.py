import asyncio
import logging
from enum import Enum
from pydantic import ValidationError

from raza.agents.backend import created_id
from raza.core.errors import ApiError, SaveFailed, ValidationFailed
from raza.core.totals import line_total
from raza.schemas.fields import same_id
from raza.schemas.ledger import DraftKey, Header, LineItem, PersistedKey

logger = logging.getLogger(__name__)

HEADER_FIELD_LABELS = {
    "party_id": "party",
    "date": "date",
    "vehicle_id": "vehicle",
    "driver_id": "driver",
}

def header_records(ledger, rows: list[dict]) -> list:
    records = []
    for row in rows:
        try:
            records.append(ledger.header_record.model_validate(row))
        except ValidationError as e:
            logger.warning("Skipping malformed %s row %s: %s", ledger.label, row.get("id"), e)
            continue
    return records

def line_items(ledger, rows: list[dict], header_id=None) -> list[LineItem]:
    lines = []
    for row in rows:
        try:
            line = ledger.line_record.model_validate(row).to_line()
        except ValidationError as e:
            logger.warning("Skipping malformed %s line %s: %s", ledger.label, row.get("id"), e)
            continue
        if line.header_id is None and header_id is not None:
            line = line.model_copy(update={"header_id": header_id})
        lines.append(line)
    return lines

async def fetch_lines(agent, ledger, header_id) -> list[LineItem]:
    rows = await agent.list_children(ledger.line_resource, header_id)
    return line_items(ledger, rows, header_id)

async def fetch_ledger(agent, ledger) -> tuple[list[Header], list[LineItem]]:
    """Headers of a ledger and every line item that belongs to them."""
    if ledger.lines_listing == "all":
        header_rows, line_rows = await asyncio.gather(
            agent.list_all(ledger.header_resource),
            agent.list_all(ledger.line_resource),
        )
        records = header_records(ledger, header_rows)
        return [record.to_header() for record in records], line_items(ledger, line_rows)

    records = header_records(ledger, await agent.list_all(ledger.header_resource))
    headers = [record.to_header() for record in records]
    lines = []
    if ledger.lines_listing == "embedded":
        for record in records:
            lines.extend(record.lines())
    elif headers:
        per_header = await asyncio.gather(*(fetch_lines(agent, ledger, header.id) for header in headers))
        for chunk in per_header:
            lines.extend(chunk)
    return headers, lines

class SaveState(str, Enum):
    DRAFT = "draft"
    SAVING = "saving"
    SAVED = "saved"
    FAILED = "failed"

class SaveOrchestrator:
    """Persists a header and then each of its line items, one request at a time.

    Drafts are created against the header id, persisted lines are updated
    in place. The first failing request stops the run; lines already saved
    stay saved.
    """

    def __init__(self, agent, ledger, capabilities, created_by=None, clamp: bool | None = None):
        self.agent = agent
        self.ledger = ledger
        self.capabilities = capabilities
        self.created_by = created_by
        self.clamp = clamp
        self.state = SaveState.DRAFT
        self.saved_count = 0
        self.header_id = None
        # draft key -> key of the line the backend created for it
        self.created: dict = {}

    def validate(self, header: Header, lines: list[LineItem], editing_id=None):
        action = "edit" if editing_id is not None else "create"
        self.capabilities.require(action, f"{self.ledger.label}s")

        errors = {}
        for field in self.ledger.required_header:
            if getattr(header, field) in (None, ""):
                errors[field] = f"Please select a {HEADER_FIELD_LABELS.get(field, field)}"
        if not lines:
            errors["lines"] = f"Please add at least one {self.ledger.label} item"
        for line in lines:
            if isinstance(line.key, DraftKey):
                continue
            if line.header_id is None or editing_id is None or not same_id(line.header_id, editing_id):
                errors["lines"] = "A saved line item cannot move to another header"
                break
        if errors:
            raise ValidationFailed(errors)

    def _stamp(self, payload: dict) -> dict:
        if self.ledger.stamp_creator and self.created_by is not None:
            payload["created_by"] = self.created_by
        return payload

    async def save_header(self, header: Header, editing_id=None):
        payload = self._stamp(self.ledger.header_record.payload(header))
        if editing_id is not None:
            await self.agent.update(self.ledger.header_resource, editing_id, payload)
            return editing_id
        data = await self.agent.create(self.ledger.header_resource, payload)
        header_id = created_id(data, self.ledger.id_keys)
        if header_id is None:
            raise ApiError("POST", f"/{self.ledger.header_resource}", body=data)
        return header_id

    async def save_line(self, line: LineItem, header_id):
        payload = self._stamp(self.ledger.line_record.payload(line, header_id, line_total(line, self.clamp)))
        if isinstance(line.key, DraftKey):
            data = await self.agent.create(self.ledger.line_resource, payload)
            server_id = created_id(data)
            if server_id is not None:
                self.created[line.key] = PersistedKey(server_id=server_id)
            return data
        return await self.agent.update(self.ledger.line_resource, line.key.server_id, payload)

    async def save(self, header: Header, lines: list[LineItem], editing_id=None):
        self.validate(header, lines, editing_id)

        self.state = SaveState.SAVING
        self.saved_count = 0
        self.header_id = None
        self.created = {}
        try:
            header_id = await self.save_header(header, editing_id)
        except ApiError as e:
            self.state = SaveState.FAILED
            raise SaveFailed(self.ledger.label, 0, len(lines), e) from e
        self.header_id = header_id

        for line in lines:
            try:
                await self.save_line(line, header_id)
            except ApiError as e:
                self.state = SaveState.FAILED
                remaining = len(lines) - self.saved_count
                logger.error(
                    "Saving %s %s stopped after %s of %s line(s): %s",
                    self.ledger.label, header_id, self.saved_count, len(lines), e,
                )
                raise SaveFailed(self.ledger.label, self.saved_count, remaining, e) from e
            self.saved_count += 1

        self.state = SaveState.SAVED
        logger.info("Saved %s %s with %s line(s)", self.ledger.label, header_id, len(lines))
        return header_id

    def settled(self, lines: list[LineItem]) -> list[LineItem]:
        """``lines`` re-keyed after a partial run, so a retry updates what was already created."""
        if self.header_id is None:
            return list(lines)
        return [
            line.model_copy(update={"key": self.created.get(line.key, line.key), "header_id": self.header_id})
            for line in lines
        ]
