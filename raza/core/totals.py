from raza.config import settings
from raza.schemas.ledger import DiscountType, LineItem

def line_base(line: LineItem) -> float:
    # priced by weight when a weight is present, otherwise by quantity
    if line.weight > 0:
        return line.weight * line.rate
    return line.quantity * line.rate

def line_total(line: LineItem, clamp: bool | None = None) -> float:
    """Value of one line after its discount, at full precision.

    A discount bigger than the base gives a negative total unless ``clamp``
    (default: the ``CLAMP_NEGATIVE_TOTALS`` setting) is on.
    """
    base = line_base(line)
    if line.discount_type == DiscountType.PERCENT:
        total = base - base * (line.discount / 100)
    else:
        total = base - line.discount
    if clamp is None:
        clamp = settings.CLAMP_NEGATIVE_TOTALS
    if clamp and total < 0:
        return 0.0
    return total

def money(value: float) -> str:
    return f"{value:.2f}"
