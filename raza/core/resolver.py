from raza.schemas.fields import same_id

def find_by_id(collection, entity_id):
    return next((entity for entity in collection if same_id(getattr(entity, "id", None), entity_id)), None)

def resolve(collection, entity_id, fallback: str = "Item") -> str:
    """Display label for ``entity_id``; ``"<fallback> <id>"`` when it is unknown."""
    entity = find_by_id(collection, entity_id)
    label = getattr(entity, "name", "") if entity is not None else ""
    if label:
        return str(label)
    return f"{fallback} {entity_id}"
