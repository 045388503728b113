from datetime import datetime
from sqlmodel import SQLModel, select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine

from raza.config import settings
from raza.models.session import StoredSession

class SessionStore:
    """Persists the logged-in user and token under a fixed storage key."""

    def __init__(self, database_url: str | None = None):
        self.engine = create_async_engine(database_url or settings.DATABASE_URL)

    async def create_tables(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def dispose(self):
        await self.engine.dispose()

    def get_session(self) -> AsyncSession:
        return AsyncSession(self.engine, expire_on_commit=False)

    async def get(self, storage_key: str):
        async with self.get_session() as db:
            statement = select(StoredSession).where(StoredSession.storage_key == storage_key)
            return (await db.exec(statement)).first()

    async def save(self, storage_key: str, token: str | None, user_json: str):
        async with self.get_session() as db:
            statement = select(StoredSession).where(StoredSession.storage_key == storage_key)
            result = (await db.exec(statement)).first()
            if result is None:
                result = StoredSession(storage_key=storage_key, token=token, user_json=user_json)
                db.add(result)
            else:
                result.token = token
                result.user_json = user_json
                result.updated_at = datetime.now()
            await db.commit()
            await db.refresh(result)
            return result

    async def clear(self, storage_key: str) -> bool:
        async with self.get_session() as db:
            statement = select(StoredSession).where(StoredSession.storage_key == storage_key)
            result = (await db.exec(statement)).first()
            if result is None:
                return False
            await db.delete(result)
            await db.commit()
            return True
