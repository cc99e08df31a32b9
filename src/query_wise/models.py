"""
Data Models
===========

Core data structures shared by the manual builder and the AI pipeline.

Boundary shapes exchanged with the reasoning capability are pydantic models
so that non-conforming output is rejected on arrival. Everything built after
binding is a plain dataclass.
"""

import math
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_ROW_LIMIT = 100

NUMERIC_TYPES = {
    "bit",
    "tinyint",
    "smallint",
    "mediumint",
    "int",
    "integer",
    "bigint",
    "decimal",
    "dec",
    "numeric",
    "float",
    "double",
    "double precision",
    "real",
    "year",
}


class Operator(str, Enum):
    """Comparison operators available to both query paths."""

    EQ = "="
    NE = "!="
    GT = ">"
    LT = "<"
    GE = ">="
    LE = "<="
    LIKE = "LIKE"

    @property
    def is_inequality(self) -> bool:
        return self in (Operator.GT, Operator.LT, Operator.GE, Operator.LE)


class SortDirection(str, Enum):
    """Ordering direction."""

    ASC = "asc"
    DESC = "desc"


class ValueKind(Enum):
    """How a condition value is compared."""

    TEXT = "text"
    NUMERIC = "numeric"


def format_number(value: int | float) -> str:
    """Render a number the way it would be typed by a user."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_number(value: Any) -> float:
    """Coerce a value to float, returning NaN when it is not numeric."""
    if value is None or isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip())
    except ValueError:
        return math.nan


def value_kind_for(column_type: str) -> ValueKind:
    """Derive the comparison kind from a declared column type."""
    match = re.match(r"\s*([a-z ]+)", (column_type or "").lower())
    base = match.group(1).strip() if match else ""
    base = base.replace(" unsigned", "").strip()
    if base in NUMERIC_TYPES:
        return ValueKind.NUMERIC
    return ValueKind.TEXT


# =============================================================================
# Catalog descriptors
# =============================================================================


@dataclass(frozen=True)
class TableDescriptor:
    """A table known to the schema provider."""

    name: str
    description: str = ""


@dataclass(frozen=True)
class ColumnDescriptor:
    """A column of a table, in catalog declaration order."""

    name: str
    type: str
    description: str = ""
    nullable: Optional[bool] = None
    default_value: Optional[str] = None

    @property
    def kind(self) -> ValueKind:
        return value_kind_for(self.type)


# =============================================================================
# Reasoning capability boundary
# =============================================================================


class WhereCondition(BaseModel):
    """A single filter condition as entered by a user or produced by the model."""

    model_config = ConfigDict(frozen=True)

    column: str = Field(..., description="The column to filter on.")
    operator: Operator = Field(..., description="The comparison operator.")
    value: str = Field(..., description="The value to compare against.")

    @field_validator("value", mode="before")
    @classmethod
    def _number_to_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return format_number(value)
        return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


class ValidationResult(BaseModel):
    """Whether a request carries enough information to be translated."""

    model_config = ConfigDict(populate_by_name=True)

    is_valid: bool = Field(
        ...,
        alias="isValid",
        description="Whether the information provided is sufficient to generate the query.",
    )
    clarification_needed: Optional[str] = Field(
        None,
        alias="clarificationNeeded",
        description="If the information is insufficient, the question to ask the user.",
    )

    @field_validator("clarification_needed", mode="before")
    @classmethod
    def _strip_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @model_validator(mode="after")
    def _clarification_iff_invalid(self) -> "ValidationResult":
        if self.is_valid and self.clarification_needed is not None:
            raise ValueError("clarificationNeeded must be empty when isValid is true")
        if not self.is_valid and self.clarification_needed is None:
            raise ValueError("clarificationNeeded is required when isValid is false")
        return self


class TranslationResult(BaseModel):
    """Structured query chosen by the model, or why none could be chosen."""

    model_config = ConfigDict(populate_by_name=True)

    table_name: Optional[str] = Field(
        None, alias="tableName", description="The name of the table to query."
    )
    where_clauses: Optional[list[WhereCondition]] = Field(
        None, alias="whereClauses", description="An array of WHERE clause conditions."
    )
    sql_query: str = Field(
        ...,
        alias="sqlQuery",
        description="The generated SQL query, for display purposes only.",
    )
    missing_data_explanation: Optional[str] = Field(
        None,
        alias="missingDataExplanation",
        description="An explanation of any missing or insufficient data.",
    )

    @field_validator("table_name", "missing_data_explanation", mode="before")
    @classmethod
    def _strip_blank(cls, value: Any) -> Any:
        return _blank_to_none(value)

    @model_validator(mode="after")
    def _table_xor_explanation(self) -> "TranslationResult":
        has_table = self.table_name is not None
        has_explanation = self.missing_data_explanation is not None
        if has_table == has_explanation:
            raise ValueError(
                "exactly one of tableName or missingDataExplanation must be set"
            )
        if has_explanation and self.where_clauses:
            raise ValueError("whereClauses must be empty when missingDataExplanation is set")
        return self

    @property
    def is_resolved(self) -> bool:
        return self.table_name is not None


# =============================================================================
# Bound (executable) query
# =============================================================================


@dataclass(frozen=True)
class ConditionValue:
    """A condition value with its comparison kind resolved from the column type."""

    text: str
    kind: ValueKind

    @property
    def number(self) -> float:
        return parse_number(self.text)


@dataclass(frozen=True)
class BoundCondition:
    """A WHERE condition validated against the target table."""

    column: str
    operator: Operator
    value: ConditionValue


@dataclass
class StructuredQuery:
    """Executable single-table query: conjunctive filters, ordering and limit."""

    table_name: str
    conditions: list[BoundCondition] = field(default_factory=list)
    limit: int = DEFAULT_ROW_LIMIT
    order_by: Optional[str] = None
    direction: SortDirection = SortDirection.ASC

    def to_display_sql(self) -> str:
        """Render the query as SQL text. For display only, never executed."""
        sql = f"SELECT * FROM `{self.table_name}`"
        if self.conditions:
            sql += " WHERE " + " AND ".join(
                _display_condition(c) for c in self.conditions
            )
        if self.order_by:
            sql += f" ORDER BY `{self.order_by}` {self.direction.value.upper()}"
        sql += f" LIMIT {self.limit}"
        return sql


def _display_literal(value: ConditionValue) -> str:
    if value.kind is ValueKind.NUMERIC and math.isfinite(value.number):
        return value.text.strip()
    return "'" + value.text.replace("'", "''") + "'"


def _display_condition(condition: BoundCondition) -> str:
    if condition.operator is Operator.LIKE:
        pattern = "'%" + condition.value.text.replace("'", "''") + "%'"
        return f"`{condition.column}` LIKE {pattern}"
    return f"`{condition.column}` {condition.operator.value} {_display_literal(condition.value)}"
