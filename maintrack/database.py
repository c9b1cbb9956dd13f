from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from maintrack.config import settings


def _get_database_url(url: str) -> str:
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url


def _is_sqlite(url: str) -> bool:
    return url.startswith("sqlite")


def build_engine(url: str) -> AsyncEngine:
    engine_kwargs: dict = {"echo": False}
    if not _is_sqlite(url):
        engine_kwargs.update(pool_size=5, max_overflow=10, pool_pre_ping=True)

    new_engine = create_async_engine(_get_database_url(url), **engine_kwargs)

    if _is_sqlite(url):
        @event.listens_for(new_engine.sync_engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return new_engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url)
async_session = build_session_factory(engine)


class Base(DeclarativeBase):
    pass


async def create_tables(bind: AsyncEngine | None = None):
    async with (bind or engine).begin() as conn:
        from maintrack.models import vehicle, maintenance_record, user  # noqa: F401
        await conn.run_sync(Base.metadata.create_all)
