"""
Row Evaluation
==============

Filter, order and limit semantics applied to rows held in memory.

A row that lacks a condition's column, or holds NULL for it, never satisfies
that condition. The SQL backing reproduces the same rules.
"""

import math
from typing import Any, Iterable

from query_wise.models import (
    BoundCondition,
    Operator,
    SortDirection,
    StructuredQuery,
    ValueKind,
    format_number,
    parse_number,
)

Row = dict[str, Any]

_MISSING = object()


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def _compare_numbers(operator: Operator, left: float, right: float) -> bool:
    if math.isnan(left) or math.isnan(right):
        return False
    if operator is Operator.GT:
        return left > right
    if operator is Operator.LT:
        return left < right
    if operator is Operator.GE:
        return left >= right
    return left <= right


def _equals(cell: Any, condition: BoundCondition) -> bool:
    if condition.value.kind is ValueKind.NUMERIC:
        left, right = parse_number(cell), condition.value.number
        if not (math.isnan(left) or math.isnan(right)):
            return left == right
    return _text(cell) == condition.value.text


def evaluate_condition(row: Row, condition: BoundCondition) -> bool:
    """Return True when ``row`` satisfies ``condition``."""
    cell = row.get(condition.column, _MISSING)
    if cell is _MISSING or cell is None:
        return False

    operator = condition.operator
    if operator is Operator.LIKE:
        return condition.value.text.lower() in _text(cell).lower()
    if operator is Operator.EQ:
        return _equals(cell, condition)
    if operator is Operator.NE:
        return not _equals(cell, condition)
    return _compare_numbers(operator, parse_number(cell), condition.value.number)


def filter_rows(rows: Iterable[Row], conditions: list[BoundCondition]) -> list[Row]:
    """Keep rows that satisfy every condition (logical AND)."""
    return [row for row in rows if all(evaluate_condition(row, c) for c in conditions)]


def _sort_key(value: Any) -> tuple:
    # numbers, then strings, then NULLs
    if value is None:
        return (2, "")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    return (1, _text(value))


def sort_rows(rows: list[Row], column: str | None, direction: SortDirection) -> list[Row]:
    """Stable sort by ``column`` when the first row carries it."""
    if not column or not rows or column not in rows[0]:
        return rows
    descending = direction is SortDirection.DESC
    if not descending:
        return sorted(rows, key=lambda row: _sort_key(row.get(column)))
    # NULLs stay last in both directions; reverse=True keeps ties in input order
    present = [row for row in rows if row.get(column) is not None]
    missing = [row for row in rows if row.get(column) is None]
    return sorted(present, key=lambda row: _sort_key(row[column]), reverse=True) + missing


def apply_query(rows: Iterable[Row], query: StructuredQuery) -> list[Row]:
    """Filter, then order, then truncate to the query limit."""
    matched = filter_rows(rows, query.conditions)
    ordered = sort_rows(matched, query.order_by, query.direction)
    return [dict(row) for row in ordered[: query.limit]]
