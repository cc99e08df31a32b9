"""
Tabular Store Interface
=======================

Abstract store shared by the in-memory registry and the live database,
plus a per-request schema snapshot.
"""

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from query_wise.models import ColumnDescriptor, StructuredQuery, TableDescriptor


class TabularStore(ABC):
    """Catalog access and read-only query execution."""

    @abstractmethod
    async def list_tables(self) -> list[TableDescriptor]:
        """Return every table available for querying."""
        pass

    @abstractmethod
    async def list_columns(self, table_name: str) -> list[ColumnDescriptor]:
        """
        Return the columns of ``table_name`` in declaration order.

        Returns an empty list for an unknown table.
        """
        pass

    @abstractmethod
    async def execute(self, query: StructuredQuery) -> list[dict[str, Any]]:
        """
        Run a bound query.

        Raises:
            UnknownTable: the table is not in the store
            ExecutionFailed: the underlying store failed
        """
        pass

    async def ping(self) -> bool:
        """Return True when the store can serve requests."""
        return True

    async def close(self) -> None:
        """Release any held resources."""
        return None


@dataclass(frozen=True)
class SchemaSnapshot:
    """Tables and columns read once, used for the rest of a request."""

    tables: tuple[TableDescriptor, ...]
    columns: dict[str, tuple[ColumnDescriptor, ...]] = field(default_factory=dict)

    @classmethod
    async def load(cls, store: TabularStore) -> "SchemaSnapshot":
        tables = tuple(await store.list_tables())
        column_lists = await asyncio.gather(
            *(store.list_columns(table.name) for table in tables)
        )
        return cls(
            tables=tables,
            columns={
                table.name: tuple(cols) for table, cols in zip(tables, column_lists)
            },
        )

    @classmethod
    async def for_table(cls, store: TabularStore, table_name: str) -> "SchemaSnapshot":
        """Snapshot holding only ``table_name``; empty when the table is unknown."""
        columns = await store.list_columns(table_name)
        if not columns:
            return cls(tables=())
        return cls(
            tables=(TableDescriptor(name=table_name),),
            columns={table_name: tuple(columns)},
        )

    @property
    def table_names(self) -> list[str]:
        return [table.name for table in self.tables]

    def has_table(self, table_name: str) -> bool:
        return table_name in self.columns

    def columns_for(self, table_name: str) -> tuple[ColumnDescriptor, ...]:
        return self.columns.get(table_name, ())

    def column(self, table_name: str, column_name: str) -> Optional[ColumnDescriptor]:
        for col in self.columns_for(table_name):
            if col.name == column_name:
                return col
        return None

    def column_descriptions(self) -> dict[str, str]:
        """Map ``table.column`` to a human-readable description for the model."""
        descriptions = {}
        for table in self.tables:
            for col in self.columns_for(table.name):
                text = f"{col.description} ({col.type})" if col.description else col.type
                descriptions[f"{table.name}.{col.name}"] = text
        return descriptions
