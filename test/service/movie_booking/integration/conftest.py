"""
Integration fixtures: a throwaway SQLite database per test.
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path

import pytest

from src.platform.database.orm_db_setting import AsyncEngineManager, Database, create_db_and_tables
from src.platform.database.unit_of_work import SqlAlchemyUnitOfWork


@pytest.fixture
async def sql_uow_factory(tmp_path: Path) -> AsyncGenerator[Callable[[], SqlAlchemyUnitOfWork], None]:
    engine_manager = AsyncEngineManager(url=f'sqlite+aiosqlite:///{tmp_path / "movie_booking_test.db"}')
    await create_db_and_tables(engine_manager.get_engine())
    database = Database(engine_manager=engine_manager)

    yield lambda: SqlAlchemyUnitOfWork(session_factory=database.session)

    await engine_manager.dispose()
