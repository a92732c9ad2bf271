import contextlib
import sys
from collections.abc import AsyncIterator

from alembic import command, config
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from src.config.settings import settings


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(url: str):
    url = str(url)
    use_echo = settings.LOG_DB
    kwargs = {}
    if "sqlite" in url:
        # aiosqlite connections are bound to the loop that opened them
        kwargs = {"connect_args": {"timeout": 15}, "poolclass": NullPool}
    engine = create_async_engine(
        url,
        echo=use_echo,
        future=True,  # use the sqlalchemy 2.0 classes
        **kwargs,
    )
    if "sqlite" in url:
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return engine


engine = create_engine(settings.database_url)
if "pytest" in sys.modules:
    # tests always run against the dedicated test database
    engine = create_engine(settings.test_database_url)


def run_upgrade(connection, cfg):
    cfg.attributes["connection"] = connection
    command.upgrade(cfg, "head")


async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(run_upgrade, config.Config("alembic.ini"))


async_session_maker = async_sessionmaker(engine, expire_on_commit=False)


async def get_async_session() -> AsyncIterator[AsyncSession]:
    async with async_session_maker() as session:
        yield session


@contextlib.asynccontextmanager
async def async_session_manager(
    auto_commit=True, session_overwrite: AsyncSession | None = None
) -> AsyncIterator[AsyncSession]:
    if session_overwrite:
        yield session_overwrite
    else:
        async with async_session_maker() as session:
            try:
                yield session
            except Exception as e:
                await session.rollback()
                raise e
            else:
                if auto_commit:
                    await session.commit()
