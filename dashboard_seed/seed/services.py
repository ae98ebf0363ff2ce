"""Seeding service layer.

Owns one seeding run end to end: connect with retries, verify the
connection, make sure the schema exists, clear old rows, insert the
placeholder records and always close the connection again.
"""

import asyncio
from typing import Any, Awaitable, Callable, Dict, Optional, Sequence, TypeVar

from pydantic import BaseModel
from sqlalchemy import Table

from dashboard_seed.auth.models import User
from dashboard_seed.customers.models import Customer
from dashboard_seed.invoices.models import Invoice
from dashboard_seed.revenue.models import Revenue
from dashboard_seed.config import SeedConfig
from dashboard_seed.db.main import DatabaseFactory, SeedDatabase, open_database
from dashboard_seed.seed import placeholder_data
from dashboard_seed.seed.errors import SeedConnectionError, SeedError
from dashboard_seed.seed.schemas import SeedResult, UserSeed
from dashboard_seed.utils.auth import generate_password_hash
from dashboard_seed.utils.logger import get_logger

logger = get_logger(__name__)

R = TypeVar("R", bound=BaseModel)
RowTransform = Callable[[R], Awaitable[Dict[str, Any]]]

# Creation and truncation order
SEED_TABLES = (User.__table__, Customer.__table__, Invoice.__table__, Revenue.__table__)


async def as_row(record: BaseModel) -> Dict[str, Any]:
    # Unset ids are dropped so the column default fills them in
    return record.model_dump(exclude_none=True)


class SeedServices:
    """Runs the seeding workflow against whatever `database_factory` opens."""

    def __init__(self, config: SeedConfig, database_factory: DatabaseFactory = open_database):
        self.config = config
        self.database_factory = database_factory

    async def connect(self) -> SeedDatabase:
        try:
            return self.database_factory(self.config)
        except Exception as e:
            raise SeedConnectionError(f"Could not open database connection: {e}") from e

    async def verify(self, db: SeedDatabase) -> str:
        """Round-trip a trivial query so a dead connection fails fast.

        Raises:
            SeedConnectionError: If the query fails for any reason.
        """
        try:
            version = await db.server_version()
        except Exception as e:
            logger.error(f"Connection test failed: {e}")
            raise SeedConnectionError("Connection test failed") from e

        logger.info(f"PostgreSQL version: {version}")
        return version

    async def prepare_schema(self, db: SeedDatabase) -> None:
        await db.ensure_schema(SEED_TABLES)

    async def reset(self, db: SeedDatabase) -> None:
        await db.truncate(SEED_TABLES)
        logger.info("Existing rows cleared")

    async def insert_records(
        self,
        db: SeedDatabase,
        table: Table,
        records: Sequence[R],
        transform: Optional[RowTransform] = None,
        conflict_target: Sequence[str] = ("id",),
    ) -> int:
        """Insert `records` into `table`, skipping rows that already exist.

        Records go out in chunks of `config.chunk_size`; within a chunk every
        insert is dispatched at once and may land in any order. The whole
        chunk is awaited before the first failure (if any) is raised, so no
        insert is still in flight when the caller closes the connection.

        Args:
            db: Open seed database.
            table: Target table.
            records: Validated seed records.
            transform: Optional coroutine turning a record into column values.
                Defaults to the record's own fields.
            conflict_target: Columns for ``ON CONFLICT ... DO NOTHING``.

        Returns:
            The number of records submitted.
        """
        transform = transform or as_row
        chunk_size = self.config.chunk_size

        async def insert_one(record: R) -> None:
            row = await transform(record)
            await db.insert_ignore(table, row, conflict_target)

        for start in range(0, len(records), chunk_size):
            chunk = records[start:start + chunk_size]
            results = await asyncio.gather(*(insert_one(record) for record in chunk), return_exceptions=True)

            for result in results:
                if isinstance(result, BaseException):
                    raise result

        return len(records)

    async def seed_users(self, db: SeedDatabase) -> int:
        rounds = self.config.bcrypt_rounds

        async def hash_password(user: UserSeed) -> Dict[str, Any]:
            # bcrypt is CPU bound, keep it off the event loop
            hashed = await asyncio.to_thread(generate_password_hash, user.password, rounds)
            return {**user.model_dump(), "password": hashed}

        count = await self.insert_records(db, User.__table__, placeholder_data.users, hash_password)
        logger.info(f"{count} users seeded successfully")
        return count

    async def seed_customers(self, db: SeedDatabase) -> int:
        count = await self.insert_records(db, Customer.__table__, placeholder_data.customers)
        logger.info(f"{count} customers seeded successfully")
        return count

    async def seed_invoices(self, db: SeedDatabase) -> int:
        count = await self.insert_records(db, Invoice.__table__, placeholder_data.invoices)
        logger.info(f"{count} invoices seeded successfully")
        return count

    async def seed_revenue(self, db: SeedDatabase) -> int:
        count = await self.insert_records(
            db, Revenue.__table__, placeholder_data.revenue, conflict_target=("month",)
        )
        logger.info(f"{count} revenue seeded successfully")
        return count

    async def seed_all(self, db: SeedDatabase) -> Dict[str, int]:
        """Seed every table, in order.

        In independent mode a failing table is logged and the rest are still
        attempted; a single `SeedError` naming each failed table with its error
        is raised at the end. Otherwise the first failure propagates as is.
        """
        steps = (
            ("users", self.seed_users),
            ("customers", self.seed_customers),
            ("invoices", self.seed_invoices),
            ("revenue", self.seed_revenue),
        )

        counts: Dict[str, int] = {}
        failed = []

        for name, seed in steps:
            try:
                counts[name] = await seed(db)
            except Exception as e:
                if not self.config.independent_tables:
                    raise
                logger.error(f"Error seeding {name}: {e}")
                failed.append(f"{name} ({e})")

        if failed:
            raise SeedError(f"Failed to seed tables: {', '.join(failed)}")

        return counts

    async def close(self, db: SeedDatabase) -> None:
        try:
            await db.close()
        except Exception as e:
            # The response is already decided by now; just record it
            logger.exception(f"Error closing connection: {e}")

    async def run(self) -> SeedResult:
        """Seed the database, retrying connection failures with backoff.

        Only `SeedConnectionError` is retried; attempt ``n`` waits
        ``retry_delay * n`` seconds before the next one. Anything that goes
        wrong after the connection is verified ends the run immediately.
        The database is closed on every path.

        Raises:
            SeedError: When the run fails; carries the message for the caller.
        """
        if not self.config.database_url:
            raise SeedError("No database URL configured (set POSTGRES_URL_NON_POOLING or POSTGRES_URL)")

        max_retries = self.config.max_retries

        for attempt in range(1, max_retries + 1):
            db = None
            try:
                logger.info(f"Connection attempt {attempt}/{max_retries}")
                db = await self.connect()
                await self.verify(db)

                await self.prepare_schema(db)
                if self.config.truncate_before_seed:
                    await self.reset(db)
                counts = await self.seed_all(db)

                return SeedResult(message="Database seeded successfully", counts=counts)

            except SeedConnectionError as e:
                logger.error(f"Attempt {attempt} failed: {e}")
                if attempt >= max_retries:
                    raise

            except SeedError as e:
                logger.error(f"Seeding failed: {e}")
                raise

            except Exception as e:
                logger.exception(f"Seeding failed: {e}")
                raise SeedError(str(e) or "Database seeding failed") from e

            finally:
                if db is not None:
                    await self.close(db)

            await asyncio.sleep(self.config.retry_delay * attempt)

        raise SeedError("Database seeding failed after retries")
