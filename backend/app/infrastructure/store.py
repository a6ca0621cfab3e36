"""Todo Store: async persistence for todo items with explicit Result returns.

Invariants:
    - One engine per store; created by init(), released by teardown()
    - Every CRUD method returns Ok(value) or Err(StoreFailure); SQLAlchemy errors never escape
    - Every session auto-rolls-back on exception (no partial commits leak)
    - init() either leaves a reachable store with the schema in place or raises StoreUnavailableError
    - teardown() never raises

Design Decisions:
    - Store instance owned by the app (app.state.store), not a module global
    - expire_on_commit=False: records stay readable after commit in async context
    - init() waits up to wait_timeout for the server to accept connections
      (compose starts the database and the backend together)
"""

import asyncio
import functools
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy import select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import DBAPIError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import StoreUnavailableError
from app.core.result import (
    Err, FailureKind, Ok, Result, StoreFailure, not_found,
)
from app.db.base import Base
from app.models.item import Item

logger = logging.getLogger(__name__)

_MUTABLE_FIELDS = ("description", "completed")
_WAIT_INTERVAL_SECONDS = 0.5


def _as_result(operation: str):
    """Map SQLAlchemy failures raised by a store method to Err values."""

    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(self: "TodoStore", *args, **kwargs) -> Result:
            if self._session_factory is None:
                return Err(StoreFailure(
                    FailureKind.UNAVAILABLE, operation, "store not initialized",
                ))
            try:
                return await fn(self, *args, **kwargs)
            except (OperationalError, DBAPIError) as e:
                if isinstance(e, OperationalError) or e.connection_invalidated:
                    logger.error(
                        f"Store unreachable during {operation}: {e}",
                        extra={"operation": operation},
                    )
                    return Err(StoreFailure(
                        FailureKind.UNAVAILABLE, operation, "connection error",
                    ))
                logger.error(
                    f"DB driver error during {operation}: {e}",
                    extra={"operation": operation},
                )
                return Err(StoreFailure(FailureKind.QUERY, operation, "driver error"))
            except SQLAlchemyError as e:
                logger.error(
                    f"SQLAlchemy error during {operation}: {e}",
                    extra={"operation": operation},
                )
                return Err(StoreFailure(FailureKind.QUERY, operation, "query failed"))

        return wrapper

    return decorator


class TodoStore:
    """Owns the database engine and the CRUD operations on todo items."""

    def __init__(
        self,
        database_url: str,
        pool_size: int = 5,
        max_overflow: int = 10,
        wait_timeout: float = 10.0,
    ):
        self.database_url = database_url
        self.pool_size = pool_size
        self.max_overflow = max_overflow
        self.wait_timeout = wait_timeout
        self.engine: AsyncEngine | None = None
        self._session_factory: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.database_url).get_backend_name() == "sqlite"

    # ─── Lifecycle ───────────────────────────────────────────────

    async def init(self) -> None:
        """Connect, wait for the server, and ensure the schema exists."""
        try:
            self._prepare_sqlite_path()
            self.engine = create_async_engine(
                self.database_url, **self._engine_options(),
            )
            await self._wait_until_reachable()
            async with self.engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError) as e:
            await self.teardown()
            raise StoreUnavailableError(str(e)) from e

        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )
        logger.info(f"Store ready ({make_url(self.database_url).get_backend_name()})")

    async def teardown(self) -> None:
        """Release the engine. Best-effort: failures are logged, never raised."""
        engine, self.engine = self.engine, None
        self._session_factory = None
        if engine is None:
            return
        try:
            await engine.dispose()
            logger.info("Store connection closed")
        except Exception as e:
            logger.warning(f"Store teardown failed: {e}")

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        if self._session_factory is None:
            return False
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    def _engine_options(self) -> dict:
        options: dict = {"pool_pre_ping": True}
        if not self.is_sqlite:
            options.update(
                pool_size=self.pool_size,
                max_overflow=self.max_overflow,
                pool_recycle=3600,
            )
        return options

    def _prepare_sqlite_path(self) -> None:
        if not self.is_sqlite:
            return
        database = make_url(self.database_url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

    async def _wait_until_reachable(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.wait_timeout
        attempt = 0
        while True:
            attempt += 1
            try:
                async with self.engine.connect() as conn:
                    await conn.execute(text("SELECT 1"))
                return
            except (OperationalError, OSError) as e:
                remaining = deadline - loop.time()
                if remaining <= 0:
                    raise
                logger.warning(
                    f"Store not reachable yet (attempt {attempt}): {e}",
                )
                await asyncio.sleep(min(_WAIT_INTERVAL_SECONDS, remaining))

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError:
            await session.rollback()
            raise
        finally:
            await session.close()

    # ─── Items ───────────────────────────────────────────────────

    @_as_result("list")
    async def list_items(self) -> Result[list[dict]]:
        async with self.session() as db:
            result = await db.execute(
                select(Item).order_by(Item.created_at, Item.id),
            )
            return Ok([item.to_dict() for item in result.scalars().all()])

    @_as_result("get")
    async def get_item(self, item_id: str) -> Result[dict]:
        async with self.session() as db:
            item = await db.get(Item, item_id)
            if item is None:
                return not_found("get", item_id)
            return Ok(item.to_dict())

    @_as_result("add")
    async def add_item(
        self, description: str, completed: bool = False,
    ) -> Result[dict]:
        async with self.session() as db:
            item = Item(description=description, completed=completed)
            db.add(item)
            await db.commit()
            logger.info("Item added", extra={"item_id": item.id})
            return Ok(item.to_dict())

    @_as_result("update")
    async def update_item(self, item_id: str, fields: dict) -> Result[dict]:
        """Merge the mutable fields present in `fields` into the item."""
        unknown = set(fields) - set(_MUTABLE_FIELDS)
        if unknown:
            raise ValueError(f"Unknown item fields: {sorted(unknown)}")
        async with self.session() as db:
            item = await db.get(Item, item_id)
            if item is None:
                return not_found("update", item_id)
            for name, value in fields.items():
                setattr(item, name, value)
            try:
                await db.commit()
            except StaleDataError:
                # row deleted between read and write
                await db.rollback()
                return not_found("update", item_id)
            return Ok(item.to_dict())

    @_as_result("delete")
    async def delete_item(self, item_id: str) -> Result[dict]:
        async with self.session() as db:
            item = await db.get(Item, item_id)
            if item is None:
                return not_found("delete", item_id)
            snapshot = item.to_dict()
            await db.delete(item)
            try:
                await db.commit()
            except StaleDataError:
                await db.rollback()
                return not_found("delete", item_id)
            logger.info("Item deleted", extra={"item_id": item_id})
            return Ok(snapshot)
