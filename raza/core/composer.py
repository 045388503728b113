import math

from raza.core.errors import ValidationFailed
from raza.core.totals import line_total
from raza.schemas.ledger import DiscountType, DraftKey, LineItem, PersistedKey

NUMERIC_FIELDS = ("quantity", "weight", "rate", "actual_rate", "discount")

def _parse_number(value):
    if value is None or value == "":
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number

def validate_line(candidate: dict, required: tuple[str, ...] = ("item_id",)) -> tuple[dict, dict]:
    """Check a line form and return ``(values, errors)``.

    ``values`` holds the parsed numbers; ``errors`` maps field names to
    messages and is empty when the line is valid.
    """
    errors = {}
    values = dict(candidate)

    for field in ("item_id", "customer_id"):
        value = values.get(field)
        if value == "":
            value = None
        values[field] = value
        if field in required and value is None:
            errors[field] = "Select customer" if field == "customer_id" else "Select item"

    for field in NUMERIC_FIELDS:
        number = _parse_number(values.get(field))
        if number is None:
            errors[field] = "Must be a number"
            number = 0.0
        elif number < 0:
            errors[field] = "Must not be negative"
        values[field] = number

    if "quantity" in required:
        if values["quantity"] <= 0 and "quantity" not in errors:
            errors["quantity"] = "Enter a quantity greater than zero"
    elif values["quantity"] <= 0 and values["weight"] <= 0:
        errors.setdefault("weight", "Enter a weight or quantity greater than zero")

    values["discount_type"] = DiscountType.parse(values.get("discount_type"))
    if values["discount_type"] == DiscountType.PERCENT and values["discount"] > 100:
        errors["discount"] = "Percent discount must be between 0 and 100"

    return values, errors

class DraftComposer:
    """In-memory list of line items composed before the header is saved."""

    def __init__(self, header_id=None, required: tuple[str, ...] = ("item_id",), clamp: bool | None = None):
        self.header_id = header_id
        self.required = required
        self.clamp = clamp
        self.lines: list[LineItem] = []

    def __len__(self):
        return len(self.lines)

    def __iter__(self):
        return iter(self.lines)

    def _build(self, values: dict, key, header_id) -> LineItem:
        return LineItem(
            key=key,
            header_id=header_id,
            item_id=values.get("item_id"),
            customer_id=values.get("customer_id"),
            quantity=values["quantity"],
            weight=values["weight"],
            rate=values["rate"],
            actual_rate=values["actual_rate"],
            discount_type=values["discount_type"],
            discount=values["discount"],
            status=str(values.get("status") or ""),
        )

    def add(self, candidate: dict) -> LineItem:
        values, errors = validate_line(candidate, self.required)
        if errors:
            raise ValidationFailed(errors)
        line = self._build(values, DraftKey(), self.header_id)
        self.lines.append(line)
        return line

    def remove(self, key) -> bool:
        for index, line in enumerate(self.lines):
            if line.key == key:
                del self.lines[index]
                return True
        return False

    def find(self, key) -> LineItem | None:
        return next((line for line in self.lines if line.key == key), None)

    def edit(self, key, **changes) -> LineItem:
        line = self.find(key)
        if line is None:
            raise KeyError(key)
        if "header_id" in changes and str(changes["header_id"]) != str(line.header_id):
            raise ValidationFailed({"header_id": "The header of a line item cannot be changed"})
        changes.pop("header_id", None)

        current = line.model_dump(exclude={"key", "header_id"})
        current.update(changes)
        values, errors = validate_line(current, self.required)
        if errors:
            raise ValidationFailed(errors)

        updated = self._build(values, line.key, line.header_id)
        self.lines[self.lines.index(line)] = updated
        return updated

    def load(self, lines: list[LineItem], header_id=None):
        self.header_id = header_id
        self.lines = list(lines)

    def replace(self, rows: list[dict]) -> list[LineItem]:
        """Swap the whole draft for ``rows``.

        A row carrying a ``server_id`` must name a line already loaded for
        this header; it stays an update and keeps its header.
        """
        loaded = {
            str(line.key.server_id): line for line in self.lines if isinstance(line.key, PersistedKey)
        }
        lines = []
        errors = {}
        for index, row in enumerate(rows):
            values, row_errors = validate_line(row, self.required)
            server_id = row.get("server_id")
            existing = None
            if server_id not in (None, ""):
                existing = loaded.get(str(server_id))
                if self.header_id is None or existing is None:
                    row_errors["server_id"] = "Line item does not belong to this header"
            for field, message in row_errors.items():
                errors[f"lines.{index}.{field}"] = message
            if row_errors:
                continue
            if existing is None:
                lines.append(self._build(values, DraftKey(), self.header_id))
            else:
                lines.append(self._build(values, existing.key, existing.header_id))
        if errors:
            raise ValidationFailed(errors)
        self.lines = lines
        return lines

    def clear(self):
        self.header_id = None
        self.lines = []

    def line_total(self, line: LineItem) -> float:
        return line_total(line, self.clamp)

    def totals(self) -> dict:
        return {
            "total_weight": sum(line.weight for line in self.lines),
            "total_value": sum(self.line_total(line) for line in self.lines),
            "total_item_count": len(self.lines),
        }
