from typing import AsyncGenerator
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from examiner.core.config import get_settings

settings = get_settings()


class Base(DeclarativeBase):
    pass


def create_engine(database_url: str, **kwargs) -> AsyncEngine:
    """Create an async engine; SQLite connections get foreign keys switched on for cascades."""
    engine = create_async_engine(database_url, **kwargs)

    if engine.dialect.name == "sqlite":
        @event.listens_for(engine.sync_engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


def create_session_maker(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, expire_on_commit=False, autoflush=False)


engine = create_engine(settings.database_url, echo=settings.debug, pool_pre_ping=True)
async_session_maker = create_session_maker(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with async_session_maker() as session:
        yield session
