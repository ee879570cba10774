"""
SQLAlchemy async engine, declarative Base and session factory for the SQL inventory store

SQLite (aiosqlite) is the default for local runs; any async SQLAlchemy URL
(e.g. postgresql+asyncpg) works, in which case pool settings apply.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger


# --- engine ---


class AsyncEngineManager:
    """
    Keeps one engine per running event loop.

    FastAPI's TestClient and the production server run on different loops;
    reusing a pool across loops fails with "attached to a different loop".
    """

    def __init__(self, *, url: str | None = None) -> None:
        self._url = url
        self._engine: Optional[AsyncEngine] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._session_maker: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def url(self) -> str:
        return self._url or settings.DATABASE_URL_ASYNC

    def get_engine(self) -> AsyncEngine:
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            if self._engine is None:
                self._engine = self._create_engine()
            return self._engine

        if self._loop is not current_loop:
            if self._engine is not None:
                Logger.base.warning('🔄 [DB] Event loop changed, dropping old engine')
                self._session_maker = None
            Logger.base.info(f'🔗 [DB] Creating engine for event loop {id(current_loop)}')
            self._engine = self._create_engine()
            self._loop = current_loop

        return self._engine  # type: ignore[return-value]

    def get_session_maker(self) -> async_sessionmaker[AsyncSession]:
        engine = self.get_engine()
        if self._session_maker is None:
            self._session_maker = async_sessionmaker(
                engine,
                class_=AsyncSession,
                expire_on_commit=False,
            )
        return self._session_maker

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._engine = None
        self._session_maker = None
        self._loop = None

    def _create_engine(self) -> AsyncEngine:
        return create_async_engine(self.url, echo=False, **self._engine_kwargs())

    def _engine_kwargs(self) -> dict[str, Any]:
        if self.url.startswith('sqlite'):
            # aiosqlite serializes on a single connection thread; pool sizing does not apply
            return {'connect_args': {'timeout': settings.STORE_TIMEOUT_SECONDS}}
        return {
            'pool_size': settings.DB_POOL_SIZE,
            'max_overflow': settings.DB_POOL_MAX_OVERFLOW,
            'pool_timeout': settings.DB_POOL_TIMEOUT,
            'pool_recycle': settings.DB_POOL_RECYCLE,
            'pool_pre_ping': settings.DB_POOL_PRE_PING,
        }


_engine_manager = AsyncEngineManager()


def get_engine() -> AsyncEngine:
    return _engine_manager.get_engine()


async def dispose_engine() -> None:
    await _engine_manager.dispose()


# --- schema ---


class Base(DeclarativeBase):
    pass


async def create_db_and_tables(engine: AsyncEngine | None = None) -> None:
    """Create the inventory and booking tables; existing tables are left untouched."""
    # Register models on Base.metadata
    import src.service.movie_booking.driven_adapter.model  # noqa: F401

    current_engine = engine or get_engine()
    async with current_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    Logger.base.info('🗄️  [DB] Tables ready')


# --- sessions ---


class Database:
    """Session factory handed to repositories / units of work by the DI container."""

    def __init__(self, *, engine_manager: AsyncEngineManager | None = None) -> None:
        self._engine_manager = engine_manager or _engine_manager

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """One session per unit of work; closing it rolls back anything uncommitted."""
        session_maker = self._engine_manager.get_session_maker()
        async with session_maker() as session:
            yield session
