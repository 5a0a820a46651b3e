import logging
from typing import Optional, Sequence
from sqlalchemy import Table, text
from sqlalchemy import exc as sa_exc
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

logger = logging.getLogger(__name__)

Base = declarative_base()


def normalize_database_url(db_url: str) -> str:
    # Ensure asyncpg is used
    if db_url.startswith("postgresql://") and "+asyncpg" not in db_url:
        db_url = db_url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif db_url.startswith("postgres://"):
        db_url = db_url.replace("postgres://", "postgresql+asyncpg://", 1)
    return db_url


class Database:
    """
    Process-wide handle on the record store.

    Built once by create_app and handed to the bootstrapper and to the
    attendance service; owns the engine (and its connection pool).
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = normalize_database_url(url)
        self.engine = create_async_engine(self.url, echo=echo)
        self.sessionmaker = async_sessionmaker(bind=self.engine, expire_on_commit=False, class_=AsyncSession)

    def session(self) -> AsyncSession:
        return self.sessionmaker()

    async def ping(self) -> None:
        async with self.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))

    async def create_tables(self, tables: Optional[Sequence[Table]] = None) -> None:
        # create tables (async). ignore duplicate-object errors from a concurrent or partial run.
        async with self.engine.begin() as conn:
            try:
                await conn.run_sync(Base.metadata.create_all, tables=tables)
            except (sa_exc.IntegrityError, sa_exc.ProgrammingError) as e:
                msg = str(getattr(e, "orig", e))
                if "duplicate key value violates unique constraint" in msg or "already exists" in msg:
                    logger.warning("Ignored duplicate DDL error during create_all: %s", msg)
                else:
                    raise

    async def dispose(self) -> None:
        await self.engine.dispose()
