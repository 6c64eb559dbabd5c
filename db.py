from pathlib import Path
from typing import Any
import logging

from sqlalchemy import Result, CursorResult
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine
from sqlalchemy.orm import Session

from models.base import Base
"""
Imports of these models are needed to correctly create tables in the database.
For more information see https://stackoverflow.com/questions/7478403/sqlalchemy-classes-across-files
"""
from models.cart import CartSnapshotRecord

# HARD DISABLE SQL echo - cart snapshots are written on every mutation
sql_echo = False


def create_engine_and_session_maker(db_url: str) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    if db_url.startswith("sqlite") and ":memory:" not in db_url:
        # sqlite+aiosqlite:///data/carts.db -> make sure data/ exists
        data_folder = Path(db_url.split(":///", 1)[-1]).parent
        data_folder.mkdir(parents=True, exist_ok=True)
    engine = create_async_engine(db_url, echo=sql_echo)
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    return engine, session_maker


async def create_db_and_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logging.info(f"Database tables ready: {', '.join(Base.metadata.tables.keys())}")


async def session_execute(stmt, session: AsyncSession | Session) -> Result[Any] | CursorResult[Any]:
    if isinstance(session, AsyncSession):
        query_result = await session.execute(stmt)
        return query_result
    else:
        query_result = session.execute(stmt)
        return query_result


async def session_commit(session: AsyncSession | Session) -> None:
    if isinstance(session, AsyncSession):
        await session.commit()
    else:
        session.commit()
