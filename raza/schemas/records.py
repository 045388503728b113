from pydantic import BaseModel, ConfigDict

from raza.schemas.ledger import DraftKey, Header, LineItem, PersistedKey

class HeaderRecord(BaseModel):
    """Backend shape of a ledger header, normalized through field aliases."""

    model_config = ConfigDict(populate_by_name=True)

    def to_header(self) -> Header:
        raise NotImplementedError

    @staticmethod
    def payload(header: Header) -> dict:
        raise NotImplementedError

class LineRecord(BaseModel):
    """Backend shape of a ledger line item, normalized through field aliases."""

    model_config = ConfigDict(populate_by_name=True)

    def to_line(self) -> LineItem:
        raise NotImplementedError

    @staticmethod
    def payload(line: LineItem, header_id, total: float) -> dict:
        raise NotImplementedError

def line_key(server_id):
    if server_id is None:
        return DraftKey()
    return PersistedKey(server_id=server_id)
