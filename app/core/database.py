from contextlib import asynccontextmanager
from sqlalchemy.ext.asyncio import create_async_engine, AsyncEngine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base

from app.core.config import DATABASE_URL

Base = declarative_base()


def make_engine(url: str = DATABASE_URL) -> AsyncEngine:
    """Асинхронный движок хранилища (sqlite+aiosqlite по умолчанию)"""
    return create_async_engine(url, echo=False, future=True)


def make_session_factory(bind: AsyncEngine) -> sessionmaker:
    # записи читаются после commit, поэтому объекты не истекают
    return sessionmaker(bind, expire_on_commit=False, class_=AsyncSession)


engine = make_engine()
AsyncSessionLocal = make_session_factory(engine)


@asynccontextmanager
async def get_session():
    async with AsyncSessionLocal() as session:
        yield session


async def init_db(target_engine=None) -> int:
    """Приводит схему хранилища к последней версии и возвращает её номер"""
    from app.core.schema import migrate

    return await migrate(target_engine or engine)
