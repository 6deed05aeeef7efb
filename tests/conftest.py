import pytest_asyncio
import sys
from pathlib import Path


sys.path.append(str(Path(__file__).resolve().parent.parent))

from app.core.database import make_engine, make_session_factory
from app.core.schema import migrate

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def bare_engine():
    """Пустая база без применённой схемы"""
    engine = make_engine(TEST_DATABASE_URL)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def engine(bare_engine):
    await migrate(bare_engine)
    yield bare_engine


@pytest_asyncio.fixture
async def session(engine):
    async_session = make_session_factory(engine)
    async with async_session() as session:
        yield session


@pytest_asyncio.fixture
async def session_factory(bare_engine):
    """Фабрика сессий без обновления схемы, для проверок миграций"""
    return make_session_factory(bare_engine)
