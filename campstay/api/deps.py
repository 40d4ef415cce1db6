from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from campstay.config import get_settings
from campstay.infrastructure.db.engine import build_engine, build_sessionmaker

settings = get_settings()

engine = build_engine(settings)
AsyncSessionLocal = build_sessionmaker(engine)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
