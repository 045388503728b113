import uuid
from datetime import datetime
from sqlmodel import SQLModel, Field

class StoredSessionBase(SQLModel):
    storage_key: str = Field(index=True, unique=True)
    token: str | None = Field(default=None)
    user_json: str
    updated_at: datetime = Field(default_factory=datetime.now)

class StoredSession(StoredSessionBase, table=True):
    __tablename__ = "auth_sessions"
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
