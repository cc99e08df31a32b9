"""
QueryWise
=========

Natural-language and manual single-table querying over a relational catalog.
"""

from query_wise.models import (
    BoundCondition,
    ColumnDescriptor,
    ConditionValue,
    Operator,
    SortDirection,
    StructuredQuery,
    TableDescriptor,
    TranslationResult,
    ValidationResult,
    ValueKind,
    WhereCondition,
)
from query_wise.errors import (
    ExecutionFailed,
    InsufficientInformation,
    InvalidInput,
    QueryWiseError,
    TranslationUnavailable,
    UnknownColumn,
    UnknownTable,
    UnresolvableQuery,
)
from query_wise.agent import AgentResult, PipelineStatus, QueryWiseAgent
from query_wise.binding import bind_query
from query_wise.executor import QueryExecutor
from query_wise.translator import QueryTranslator
from query_wise.validator import QueryValidator
from query_wise.llm import MockReasoner, ReasoningCapability
from query_wise.store import InMemoryStore, SchemaSnapshot, SqlStore, TabularStore, sample_store

__version__ = "0.1.0"

__all__ = [
    # Models
    "Operator",
    "SortDirection",
    "ValueKind",
    "TableDescriptor",
    "ColumnDescriptor",
    "WhereCondition",
    "ConditionValue",
    "BoundCondition",
    "StructuredQuery",
    "ValidationResult",
    "TranslationResult",
    # Errors
    "QueryWiseError",
    "InvalidInput",
    "TranslationUnavailable",
    "InsufficientInformation",
    "UnresolvableQuery",
    "UnknownTable",
    "UnknownColumn",
    "ExecutionFailed",
    # Pipeline
    "QueryWiseAgent",
    "AgentResult",
    "PipelineStatus",
    "QueryValidator",
    "QueryTranslator",
    "QueryExecutor",
    "bind_query",
    # LLM
    "ReasoningCapability",
    "MockReasoner",
    # Stores
    "TabularStore",
    "SchemaSnapshot",
    "InMemoryStore",
    "SqlStore",
    "sample_store",
]
