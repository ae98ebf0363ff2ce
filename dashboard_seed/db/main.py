import ssl
from typing import Any, Callable, Mapping, Optional, Sequence

from sqlalchemy import Table, event, text
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.sql.dml import Insert
from sqlmodel import SQLModel

from dashboard_seed.config import SeedConfig
from dashboard_seed.utils.logger import get_logger

logger = get_logger(__name__)

# Query parameters hosted Postgres providers append for libpq that asyncpg
# rejects as unknown connect() kwargs
LIBPQ_ONLY_PARAMS = (
    "sslmode",
    "sslrootcert",
    "sslcert",
    "sslkey",
    "channel_binding",
    "target_session_attrs",
    "connect_timeout",
    "pgbouncer",
    "supa",
)

SYNC_POSTGRES_DRIVERS = ("postgres", "postgresql", "postgresql+psycopg2", "postgresql+psycopg")


def to_async_url(database_url: str) -> URL:
    """Turn a provider connection string into one the asyncpg dialect accepts."""
    url = make_url(database_url)
    if url.drivername in SYNC_POSTGRES_DRIVERS:
        url = url.set(drivername="postgresql+asyncpg")
    return url.difference_update_query(LIBPQ_ONLY_PARAMS)


def build_ssl_context(ca_cert: Optional[str] = None) -> ssl.SSLContext:
    """SSL context for the seed connection.

    With a custom CA (PEM text) the server certificate is verified against
    it. Without one the connection is encrypted but unverified, which is what
    hosted poolers with self-signed chains need.
    """
    if ca_cert:
        return ssl.create_default_context(cadata=ca_cert)

    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def log_notice(connection, message) -> None:
    # e.g. extension "uuid-ossp" already exists, skipping
    logger.info(f"Postgres Notice: {message.message}")


def log_termination(connection) -> None:
    logger.warning("Connection terminated by the server")


def attach_connection_loggers(dbapi_connection, connection_record) -> None:
    driver_connection = dbapi_connection.driver_connection
    driver_connection.add_log_listener(log_notice)
    driver_connection.add_termination_listener(log_termination)


def create_seed_engine(config: SeedConfig) -> AsyncEngine:
    connect_args: dict = {"timeout": config.connect_timeout}
    if config.ssl:
        connect_args["ssl"] = build_ssl_context(config.ca_cert)

    engine = create_async_engine(
        url=to_async_url(config.database_url),
        echo=False,
        pool_size=config.max_connections,
        max_overflow=0,
        pool_recycle=config.pool_recycle,
        connect_args=connect_args,
    )
    event.listen(engine.sync_engine, "connect", attach_connection_loggers)
    return engine


def build_insert_ignore(table: Table, row: Mapping[str, Any], conflict_target: Sequence[str]) -> Insert:
    return pg_insert(table).values(**row).on_conflict_do_nothing(index_elements=list(conflict_target))


class SeedDatabase:
    """The single engine a seeding attempt talks to.

    Every method opens its own connection from the engine's pool, so
    concurrent inserts queue on the pool instead of sharing one connection.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    async def server_version(self) -> str:
        async with self.engine.connect() as conn:
            result = await conn.execute(text("SELECT version()"))
            return result.scalar_one()

    async def ensure_schema(self, tables: Sequence[Table]) -> None:
        async with self.engine.begin() as conn:
            await conn.execute(text('CREATE EXTENSION IF NOT EXISTS "uuid-ossp"'))
            await conn.run_sync(SQLModel.metadata.create_all, tables=list(tables))

    async def truncate(self, tables: Sequence[Table]) -> None:
        names = ", ".join(table.name for table in tables)
        async with self.engine.begin() as conn:
            await conn.execute(text(f"TRUNCATE TABLE {names}"))

    async def insert_ignore(self, table: Table, row: Mapping[str, Any], conflict_target: Sequence[str]) -> None:
        async with self.engine.begin() as conn:
            await conn.execute(build_insert_ignore(table, row, conflict_target))

    async def close(self) -> None:
        await self.engine.dispose()
        logger.info("Connection closed")


DatabaseFactory = Callable[[SeedConfig], SeedDatabase]


def open_database(config: SeedConfig) -> SeedDatabase:
    # Engines connect lazily; nothing touches the network until the first query
    return SeedDatabase(create_seed_engine(config))
