from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol


class TransactionManager(Protocol):
    """Unit of work; nested `start()` calls join the outer transaction."""

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        yield
