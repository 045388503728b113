from raza.core.resolver import find_by_id, resolve
from raza.core.totals import line_total
from raza.schemas.fields import same_id
from raza.schemas.ledger import Header, LineItem

def date_part(value) -> str:
    return str(value or "").split("T")[0].split(" ")[0]

def lines_for(header: Header, lines: list[LineItem]) -> list[LineItem]:
    return [line for line in lines if same_id(line.header_id, header.id)]

def filter_headers(
    headers: list[Header],
    date: str | None = None,
    status: str | None = None,
    party_id=None,
    search: str | None = None,
    parties=(),
    party_label: str = "Customer",
) -> list[Header]:
    """Headers matching every filter given; empty filters match everything."""
    query = (search or "").strip().lower()
    matched = []
    for header in headers:
        if date and date_part(header.date) != date_part(date):
            continue
        if status and header.status != status:
            continue
        if party_id not in (None, "") and not same_id(header.party_id, party_id):
            continue
        if query and query not in resolve(parties, header.party_id, party_label).lower():
            continue
        matched.append(header)
    return matched

def rollup(headers: list[Header], lines: list[LineItem], clamp: bool | None = None) -> dict:
    total_weight = 0.0
    total_value = 0.0
    total_item_count = 0
    for header in headers:
        for line in lines_for(header, lines):
            total_weight += line.weight
            total_value += line_total(line, clamp)
            total_item_count += 1
    return {
        "total_weight": total_weight,
        "total_value": total_value,
        "total_item_count": total_item_count,
    }

def day_rollup(headers: list[Header], lines: list[LineItem], date: str, clamp: bool | None = None) -> dict:
    return rollup(filter_headers(headers, date=date), lines, clamp)

def stop_totals(stops: list[LineItem]) -> dict:
    # route stops are valued at weight times rate of sale, with no discount
    return {
        "total_weight": sum(stop.weight for stop in stops),
        "total_value": sum(stop.weight * stop.rate for stop in stops),
    }

def search_stops(stops: list[LineItem], query: str, customers=(), items=()) -> list[LineItem]:
    query = (query or "").strip().lower()
    if not query:
        return list(stops)
    matched = []
    for stop in stops:
        customer = getattr(find_by_id(customers, stop.customer_id), "name", "").lower()
        item = getattr(find_by_id(items, stop.item_id), "name", "").lower()
        quantity = f"{stop.quantity:g}"
        if query in customer or query in item or query in quantity:
            matched.append(stop)
    return matched
