"""
Durable storage for cart snapshots.

Key-value interface (save / load / clear) used by the cart controller to
snapshot the cart across sessions. `load` after a completed `save` returns the
saved value; no cross-client consistency is provided (last write wins).
"""

import logging
from abc import ABC, abstractmethod

from redis.asyncio import Redis
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from db import session_execute, session_commit
from models.cart import CartSnapshotRecord

logger = logging.getLogger(__name__)


class CartStorage(ABC):

    @abstractmethod
    async def save(self, key: str, value: str) -> None:
        ...

    @abstractmethod
    async def load(self, key: str) -> str | None:
        ...

    @abstractmethod
    async def clear(self, key: str) -> None:
        ...


class RedisCartStorage(CartStorage):
    """
    Redis-backed storage.

    Works across multiple engine instances sharing one Redis. An optional TTL
    expires abandoned carts.
    """

    def __init__(self, redis: Redis, prefix: str = "cart:", ttl_seconds: int | None = None):
        self.redis = redis
        self.prefix = prefix
        self.ttl_seconds = ttl_seconds

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    async def save(self, key: str, value: str) -> None:
        await self.redis.set(self._key(key), value, ex=self.ttl_seconds)

    async def load(self, key: str) -> str | None:
        value = await self.redis.get(self._key(key))
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return value

    async def clear(self, key: str) -> None:
        await self.redis.delete(self._key(key))


class SqlCartStorage(CartStorage):
    """SQLAlchemy-backed storage using the cart_snapshots table (one row per key)."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self.session_maker = session_maker

    async def save(self, key: str, value: str) -> None:
        async with self.session_maker() as session:
            stmt = select(CartSnapshotRecord).where(CartSnapshotRecord.key == key)
            result = await session_execute(stmt, session)
            record = result.scalar_one_or_none()
            if record is None:
                session.add(CartSnapshotRecord(key=key, payload=value))
            else:
                record.payload = value
            await session_commit(session)

    async def load(self, key: str) -> str | None:
        async with self.session_maker() as session:
            stmt = select(CartSnapshotRecord.payload).where(CartSnapshotRecord.key == key)
            result = await session_execute(stmt, session)
            return result.scalar_one_or_none()

    async def clear(self, key: str) -> None:
        async with self.session_maker() as session:
            stmt = delete(CartSnapshotRecord).where(CartSnapshotRecord.key == key)
            await session_execute(stmt, session)
            await session_commit(session)
