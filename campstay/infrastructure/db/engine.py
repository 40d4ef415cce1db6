from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from campstay.config import Settings

IN_MEMORY_SQLITE_URL = "sqlite+aiosqlite:///:memory:"


def use_immediate_transactions(engine: AsyncEngine) -> AsyncEngine:
    """
    Make every SQLite transaction start with BEGIN IMMEDIATE.

    The driver otherwise defers BEGIN to the first write, so two sessions can
    both read "no overlap" before either inserts. With the write lock taken at
    BEGIN, transactions on the database run one after another; a waiter that
    exceeds the busy timeout fails with "database is locked", which the
    deadlock retry replays.
    """

    @event.listens_for(engine.sync_engine, "connect")
    def _disable_driver_transactions(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin_immediate(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def build_engine(settings: Settings) -> AsyncEngine:
    url = settings.database_url or IN_MEMORY_SQLITE_URL
    if url.startswith("sqlite"):
        return use_immediate_transactions(create_async_engine(url, echo=settings.sql_echo))
    return create_async_engine(
        url,
        echo=settings.sql_echo,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


def build_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def session_scope(session_maker: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_maker() as session:
        yield session
