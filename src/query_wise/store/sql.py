"""
SQL Store
=========

Live relational backing built on SQLAlchemy's async engine.

Identifiers are taken only from the inspected catalog; every condition value
travels as a bound parameter.
"""

import asyncio
import math
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Sequence

import sqlalchemy as sa
import structlog
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from query_wise.errors import ExecutionFailed, UnknownColumn, UnknownTable
from query_wise.models import (
    BoundCondition,
    ColumnDescriptor,
    Operator,
    SortDirection,
    StructuredQuery,
    TableDescriptor,
    ValueKind,
)
from query_wise.store.base import TabularStore

logger = structlog.get_logger(__name__)


class ConnectionGate:
    """
    Bounds in-flight executions to the pool size.

    Callers beyond the limit wait; once ``queue_limit`` callers are already
    waiting, further callers are rejected. A ``queue_limit`` of 0 means the
    queue is unbounded.
    """

    def __init__(self, limit: int, queue_limit: int = 0) -> None:
        self.limit = max(1, limit)
        self.queue_limit = max(0, queue_limit)
        self._semaphore = asyncio.Semaphore(self.limit)
        self._waiting = 0

    @property
    def waiting(self) -> int:
        return self._waiting

    @asynccontextmanager
    async def slot(self) -> AsyncIterator[None]:
        if self._semaphore.locked() and self.queue_limit and self._waiting >= self.queue_limit:
            raise ExecutionFailed("connection queue limit reached")
        self._waiting += 1
        try:
            await self._semaphore.acquire()
        finally:
            self._waiting -= 1
        try:
            yield
        finally:
            self._semaphore.release()


# Text that parses as a decimal or scientific-notation number
NUMERIC_TEXT_PATTERN = r"^\s*[-+]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][-+]?[0-9]+)?\s*$"


def _looks_numeric(column: sa.ColumnElement) -> sa.ColumnElement:
    return sa.cast(column, sa.String).regexp_match(NUMERIC_TEXT_PATTERN)


def _as_number(column: sa.ColumnClause, col_kind: ValueKind) -> sa.ColumnElement:
    """Numeric view of a column; non-numeric text becomes NULL instead of 0 or an error."""
    if col_kind is ValueKind.NUMERIC:
        return column
    return sa.case(
        (_looks_numeric(column), sa.cast(sa.cast(column, sa.String), sa.Float)),
        else_=sa.null(),
    )


def _criterion(column: sa.ColumnClause, col_kind: ValueKind, condition: BoundCondition):
    value = condition.value
    operator = condition.operator

    if operator is Operator.LIKE:
        target = column if col_kind is ValueKind.TEXT else sa.cast(column, sa.String)
        return target.icontains(value.text, autoescape=True)

    number = value.number
    if operator.is_inequality:
        if math.isnan(number):
            return sa.false()
        target = _as_number(column, col_kind)
        return {
            Operator.GT: target > number,
            Operator.LT: target < number,
            Operator.GE: target >= number,
            Operator.LE: target <= number,
        }[operator]

    if value.kind is ValueKind.NUMERIC and not math.isnan(number):
        if col_kind is ValueKind.NUMERIC:
            comparison = column == number
        else:
            # numeric comparison where the cell parses, text equality otherwise
            comparison = sa.case(
                (_looks_numeric(column), _as_number(column, col_kind) == number),
                else_=sa.cast(column, sa.String) == value.text,
            )
    elif col_kind is ValueKind.NUMERIC:
        comparison = sa.cast(column, sa.String) == value.text
    else:
        comparison = column == value.text
    return comparison if operator is Operator.EQ else sa.not_(comparison)


def build_select(query: StructuredQuery, columns: Sequence[ColumnDescriptor]) -> sa.Select:
    """
    Compile a bound query into a parameterized SELECT.

    Args:
        query: Query to compile
        columns: Live column list of ``query.table_name``, used as the
            identifier allow-list

    Raises:
        UnknownTable: ``columns`` is empty
        UnknownColumn: a condition names a column outside ``columns``
    """
    if not columns:
        raise UnknownTable(query.table_name)

    kinds = {col.name: col.kind for col in columns}
    table = sa.table(query.table_name, *(sa.column(col.name) for col in columns))
    stmt = sa.select(table)

    criteria = []
    for condition in query.conditions:
        if condition.column not in kinds:
            raise UnknownColumn(query.table_name, condition.column)
        criteria.append(
            _criterion(table.c[condition.column], kinds[condition.column], condition)
        )
    if criteria:
        stmt = stmt.where(sa.and_(*criteria))

    if query.order_by and query.order_by in kinds:
        order_col = table.c[query.order_by]
        ordered = order_col.desc() if query.direction is SortDirection.DESC else order_col.asc()
        # NULLs last in either direction; ties fall back to the first catalog column
        stmt = stmt.order_by(order_col.is_(None), ordered)
        if columns[0].name != query.order_by:
            stmt = stmt.order_by(table.c[columns[0].name].asc())

    return stmt.limit(query.limit)


def _inspect_tables(sync_conn) -> list[TableDescriptor]:
    inspector = sa.inspect(sync_conn)
    tables = []
    for name in sorted(inspector.get_table_names()):
        try:
            comment = inspector.get_table_comment(name).get("text") or ""
        except NotImplementedError:
            comment = ""
        tables.append(TableDescriptor(name=name, description=comment))
    return tables


def _inspect_columns(sync_conn, table_name: str) -> list[ColumnDescriptor]:
    inspector = sa.inspect(sync_conn)
    if table_name not in inspector.get_table_names():
        return []
    return [
        ColumnDescriptor(
            name=col["name"],
            type=str(col["type"]),
            description=col.get("comment") or "",
            nullable=col.get("nullable"),
            default_value=None if col.get("default") is None else str(col["default"]),
        )
        for col in inspector.get_columns(table_name)
    ]


class SqlStore(TabularStore):
    """
    Store backed by a relational database.

    Each operation holds one pooled connection for its duration and always
    returns it, whether the query succeeds or fails.
    """

    def __init__(self, engine: AsyncEngine, max_connections: int = 10, queue_limit: int = 0) -> None:
        self.engine = engine
        self.gate = ConnectionGate(max_connections, queue_limit)

    @classmethod
    def from_settings(cls, settings) -> "SqlStore":
        """Create a store and its pooled engine from application settings."""
        engine = create_async_engine(
            settings.resolved_database_url(),
            pool_size=settings.pool_size,
            max_overflow=0,
            pool_timeout=settings.pool_timeout,
            pool_pre_ping=True,
        )
        logger.info(
            "sql_store_created",
            dialect=engine.dialect.name,
            pool_size=settings.pool_size,
            queue_limit=settings.queue_limit,
        )
        return cls(engine, max_connections=settings.pool_size, queue_limit=settings.queue_limit)

    @asynccontextmanager
    async def _connection(self) -> AsyncIterator[AsyncConnection]:
        async with self.gate.slot():
            async with self.engine.connect() as conn:
                yield conn

    async def list_tables(self) -> list[TableDescriptor]:
        try:
            async with self._connection() as conn:
                return await conn.run_sync(_inspect_tables)
        except SQLAlchemyError as e:
            logger.error("list_tables_failed", error=str(e))
            raise ExecutionFailed(f"Failed to list tables: {e}") from e

    async def list_columns(self, table_name: str) -> list[ColumnDescriptor]:
        try:
            async with self._connection() as conn:
                return await conn.run_sync(_inspect_columns, table_name)
        except SQLAlchemyError as e:
            logger.error("list_columns_failed", table=table_name, error=str(e))
            raise ExecutionFailed(f"Failed to list columns of {table_name}: {e}") from e

    async def execute(self, query: StructuredQuery) -> list[dict[str, Any]]:
        columns = await self.list_columns(query.table_name)
        stmt = build_select(query, columns)
        try:
            async with self._connection() as conn:
                result = await conn.execute(stmt)
                rows = [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            logger.error("sql_query_failed", table=query.table_name, error=str(e))
            raise ExecutionFailed(f"Database query failed: {e}") from e
        logger.debug("sql_query_executed", table=query.table_name, rows=len(rows))
        return rows

    async def ping(self) -> bool:
        try:
            async with self._connection() as conn:
                await conn.execute(sa.text("SELECT 1"))
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.warning("database_ping_failed", error=str(e))
            return False

    async def close(self) -> None:
        await self.engine.dispose()
