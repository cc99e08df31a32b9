"""
Query Binding
=============

Turns raw query input from either path into an executable StructuredQuery,
checked against a schema snapshot.
"""

from typing import Iterable, Optional

import structlog

from query_wise.errors import UnknownColumn, UnknownTable
from query_wise.models import (
    DEFAULT_ROW_LIMIT,
    BoundCondition,
    ConditionValue,
    SortDirection,
    StructuredQuery,
    WhereCondition,
)
from query_wise.store.base import SchemaSnapshot

logger = structlog.get_logger(__name__)


def coerce_limit(limit: Optional[int]) -> int:
    """Apply the default row limit and the lower bound of 1."""
    if limit is None:
        return DEFAULT_ROW_LIMIT
    return max(1, int(limit))


def complete_clauses(clauses: Iterable[WhereCondition]) -> list[WhereCondition]:
    """Drop clauses left half-filled in the manual builder."""
    return [c for c in clauses if c.column.strip() and c.value != ""]


def bind_query(
    schema: SchemaSnapshot,
    table_name: str,
    where: Iterable[WhereCondition] = (),
    limit: Optional[int] = DEFAULT_ROW_LIMIT,
    order_by: Optional[str] = None,
    direction: SortDirection | str = SortDirection.ASC,
) -> StructuredQuery:
    """
    Build a StructuredQuery whose identifiers all exist in ``schema``.

    Each condition value takes its comparison kind from the declared type of
    its column. An ``order_by`` column that is not part of the table is
    cleared rather than executed.

    Raises:
        UnknownTable: ``table_name`` is not in the snapshot
        UnknownColumn: a condition names a column the table does not have
    """
    if not schema.has_table(table_name):
        raise UnknownTable(table_name)

    conditions = []
    for clause in where:
        column = schema.column(table_name, clause.column)
        if column is None:
            raise UnknownColumn(table_name, clause.column)
        conditions.append(
            BoundCondition(
                column=column.name,
                operator=clause.operator,
                value=ConditionValue(text=clause.value, kind=column.kind),
            )
        )

    if order_by and schema.column(table_name, order_by) is None:
        logger.warning("stale_order_column_cleared", table=table_name, order_by=order_by)
        order_by = None

    return StructuredQuery(
        table_name=table_name,
        conditions=conditions,
        limit=coerce_limit(limit),
        order_by=order_by or None,
        direction=SortDirection(direction),
    )
