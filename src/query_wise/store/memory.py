"""
In-Memory Store
===============

Table registry held in process memory.
"""

import copy
from typing import Any

import structlog

from query_wise.errors import UnknownTable
from query_wise.evaluation import apply_query
from query_wise.models import ColumnDescriptor, StructuredQuery, TableDescriptor
from query_wise.store.base import TabularStore

logger = structlog.get_logger(__name__)


class InMemoryStore(TabularStore):
    """
    Store backed by plain Python rows.

    Rows are never mutated; results are copies.
    """

    def __init__(
        self,
        tables: list[TableDescriptor],
        columns: dict[str, list[ColumnDescriptor]],
        rows: dict[str, list[dict[str, Any]]],
    ) -> None:
        self._tables = list(tables)
        self._columns = {name: list(cols) for name, cols in columns.items()}
        self._rows = copy.deepcopy(rows)

    async def list_tables(self) -> list[TableDescriptor]:
        return list(self._tables)

    async def list_columns(self, table_name: str) -> list[ColumnDescriptor]:
        return list(self._columns.get(table_name, []))

    async def execute(self, query: StructuredQuery) -> list[dict[str, Any]]:
        if query.table_name not in self._rows:
            raise UnknownTable(query.table_name)
        result = apply_query(self._rows[query.table_name], query)
        logger.debug("memory_query_executed", table=query.table_name, rows=len(result))
        return result
