import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from sqlalchemy import MetaData, Table, delete, func, insert, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from core.exceptions import StoreError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]

UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


@dataclass
class StoreResponse:
    """Outcome of one store call. Failures come back in `error`, they are not raised."""
    data: Any = None
    count: Optional[int] = None
    error: Optional[StoreError] = None


def to_store_error(exc: SQLAlchemyError) -> StoreError:
    """Flatten a SQLAlchemy failure into the transport's error shape."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        code = getattr(exc.orig, "pgcode", None) or getattr(exc.orig, "sqlstate", None)
        return StoreError(str(exc.orig).strip(), code=code, details=type(exc).__name__)
    return StoreError(str(exc), details=type(exc).__name__)


class SqlStore:
    """Generic row CRUD over SQLAlchemy Core tables.

    Every call runs the blocking driver work in a worker thread so the event
    loop is never held. The table definitions come from the declarative
    metadata; a table that was never created in the database surfaces as a
    store error on first use.
    """

    def __init__(self, engine: Engine, metadata: MetaData):
        self.engine = engine
        self.metadata = metadata

    def _table(self, name: str) -> Table:
        return self.metadata.tables[name]

    async def _run(self, operation: str, table: str, work: Callable[[], StoreResponse]) -> StoreResponse:
        try:
            return await asyncio.to_thread(work)
        except SQLAlchemyError as exc:
            error = to_store_error(exc)
            logger.debug(f"Store {operation} on '{table}' failed: {error!r}")
            return StoreResponse(error=error)

    async def select(
        self,
        table: str,
        filters: Optional[Row] = None,
        order_by: Optional[str] = None
    ) -> StoreResponse:
        tbl = self._table(table)

        def work():
            query = select(tbl)
            for column, value in (filters or {}).items():
                query = query.where(tbl.c[column] == value)
            if order_by:
                query = query.order_by(tbl.c[order_by])
            with self.engine.connect() as conn:
                rows = [dict(row) for row in conn.execute(query).mappings()]
            return StoreResponse(data=rows)

        return await self._run("select", table, work)

    async def select_one(self, table: str, column: str, value: Any) -> StoreResponse:
        """Single row by equality, or `data=None` when nothing matches."""
        tbl = self._table(table)

        def work():
            query = select(tbl).where(tbl.c[column] == value).limit(1)
            with self.engine.connect() as conn:
                row = conn.execute(query).mappings().first()
            return StoreResponse(data=dict(row) if row is not None else None)

        return await self._run("select_one", table, work)

    async def count(self, table: str) -> StoreResponse:
        tbl = self._table(table)

        def work():
            query = select(func.count()).select_from(tbl)
            with self.engine.connect() as conn:
                total = conn.execute(query).scalar_one()
            return StoreResponse(count=total)

        return await self._run("count", table, work)

    async def insert(self, table: str, values: Row) -> StoreResponse:
        """Insert one row and return it as stored."""
        tbl = self._table(table)

        def work():
            stmt = insert(tbl).values(values).returning(*tbl.c)
            with self.engine.begin() as conn:
                row = conn.execute(stmt).mappings().one()
            return StoreResponse(data=dict(row))

        return await self._run("insert", table, work)

    async def upsert(self, table: str, values: Row, on_conflict: str) -> StoreResponse:
        tbl = self._table(table)
        dialect_insert = UPSERT_DIALECTS.get(self.engine.dialect.name)

        def work():
            with self.engine.begin() as conn:
                if dialect_insert is not None:
                    stmt = dialect_insert(tbl).values(values)
                    stmt = stmt.on_conflict_do_update(
                        index_elements=[on_conflict],
                        set_={key: stmt.excluded[key] for key in values if key != on_conflict}
                    )
                    conn.execute(stmt)
                else:
                    result = conn.execute(
                        update(tbl).where(tbl.c[on_conflict] == values[on_conflict]).values(values)
                    )
                    if result.rowcount == 0:
                        conn.execute(insert(tbl).values(values))
            return StoreResponse()

        return await self._run("upsert", table, work)

    async def update(self, table: str, values: Row, column: str, value: Any) -> StoreResponse:
        tbl = self._table(table)

        def work():
            stmt = update(tbl).where(tbl.c[column] == value).values(values)
            with self.engine.begin() as conn:
                result = conn.execute(stmt)
            return StoreResponse(count=result.rowcount)

        return await self._run("update", table, work)

    async def delete(self, table: str, column: str, value: Any) -> StoreResponse:
        tbl = self._table(table)

        def work():
            stmt = delete(tbl).where(tbl.c[column] == value)
            with self.engine.begin() as conn:
                result = conn.execute(stmt)
            return StoreResponse(count=result.rowcount)

        return await self._run("delete", table, work)
