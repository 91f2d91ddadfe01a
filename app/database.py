# python
"""Database engine and session utilities.

This module builds the asynchronous database engine and session factory from
the application settings, and provides the request dependency that hands out
an asynchronous database session.
"""
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import Settings
from models import Base


def create_engine(settings: Settings) -> AsyncEngine:
    db_url = (settings.database_url or "").strip()
    if not db_url:
        raise RuntimeError(
            "DATABASE_URL is not configured. Set it in the environment or .env file "
            "(e.g., DATABASE_URL=sqlite+aiosqlite:///./chat_console.db)."
        )
    return create_async_engine(db_url, echo=settings.debug)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False)


async def create_tables(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, Any]:
    session_factory = request.app.state.session_factory
    async with session_factory() as session:
        yield session
