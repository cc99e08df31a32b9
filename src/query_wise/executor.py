"""
Query Executor
==============

Runs structured queries against a tabular store.
"""

import time
from typing import Any, Iterable, Optional

import structlog

from query_wise.binding import bind_query
from query_wise.errors import ExecutionFailed, UnknownColumn, UnknownTable
from query_wise.models import DEFAULT_ROW_LIMIT, SortDirection, StructuredQuery, WhereCondition
from query_wise.store.base import SchemaSnapshot, TabularStore

logger = structlog.get_logger(__name__)


class QueryExecutor:
    """
    Executes StructuredQuery instances.

    The executor is read-only and holds no per-request state; the same
    instance serves concurrent requests. It never inspects which store
    backing is active.
    """

    def __init__(self, store: TabularStore) -> None:
        self.store = store

    async def execute(self, query: StructuredQuery) -> list[dict[str, Any]]:
        """
        Run an already bound query.

        Returns:
            Rows as column-name mappings, at most ``query.limit`` of them

        Raises:
            UnknownTable, UnknownColumn: catalog entries missing at execution time
            ExecutionFailed: the store failed
        """
        start_time = time.perf_counter()
        try:
            rows = await self.store.execute(query)
        except (UnknownTable, UnknownColumn) as e:
            logger.warning("query_rejected", table=query.table_name, reason=str(e))
            raise
        except ExecutionFailed:
            logger.exception("query_failed", table=query.table_name)
            raise

        logger.info(
            "query_executed",
            table=query.table_name,
            conditions=len(query.conditions),
            order_by=query.order_by,
            limit=query.limit,
            rows=len(rows),
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return rows

    async def run(
        self,
        table_name: str,
        where: Iterable[WhereCondition] = (),
        limit: Optional[int] = DEFAULT_ROW_LIMIT,
        order_by: Optional[str] = None,
        direction: SortDirection | str = SortDirection.ASC,
        schema: Optional[SchemaSnapshot] = None,
    ) -> list[dict[str, Any]]:
        """
        Bind raw query input against the catalog and execute it.

        Args:
            table_name: Table to query
            where: Conditions, combined with AND
            limit: Maximum number of rows (default 100, at least 1)
            order_by: Optional ordering column; cleared when not in the table
            direction: ``asc`` or ``desc``
            schema: Snapshot to bind against; the table's live columns otherwise
        """
        if schema is None:
            schema = await SchemaSnapshot.for_table(self.store, table_name)
        query = bind_query(schema, table_name, where, limit, order_by, direction)
        return await self.execute(query)
