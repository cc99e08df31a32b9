"""
API Schemas
===========

Pydantic models for API request/response validation.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field

from query_wise.models import SortDirection, WhereCondition


class ExecuteRequest(BaseModel):
    """Manual builder request."""

    table_name: str = Field(..., min_length=1, description="Table to query")
    where_clauses: list[WhereCondition] = Field(
        default_factory=list,
        description="Conditions combined with AND; clauses without a column or value are ignored",
    )
    limit: Optional[int] = Field(None, description="Row limit (default 100, minimum 1)")
    order_by: Optional[str] = Field(None, description="Column to order by")
    direction: SortDirection = Field(SortDirection.ASC, description="Ordering direction")


class ExecuteResponse(BaseModel):
    """Rows returned by a structured query."""

    table_name: str
    sql: str = Field(..., description="Display rendering of the executed query")
    rows: list[dict[str, Any]]
    row_count: int
    request_id: str
    processing_time_ms: float


class ValidateRequest(BaseModel):
    """Request body for query validation."""

    query: str = Field(
        ...,
        max_length=1000,
        description="Natural language request",
        examples=["Show me all users who signed up this year"],
    )
    expected_output: str = Field(
        "",
        max_length=1000,
        description="What the user expects back",
        examples=["A list of user names and their emails"],
    )


class ValidateResponse(BaseModel):
    is_valid: bool
    clarification_needed: Optional[str] = None
    request_id: str


class TranslateRequest(BaseModel):
    """Request body for query translation."""

    query: str = Field(
        ...,
        max_length=1000,
        description="Natural language request",
        examples=["Find products that are low in stock"],
    )


class TranslateResponse(BaseModel):
    table_name: Optional[str] = None
    where_clauses: Optional[list[WhereCondition]] = None
    sql_query: str
    missing_data_explanation: Optional[str] = None
    request_id: str


class AskRequest(BaseModel):
    """Request body for the full natural-language pipeline."""

    query: str = Field(..., max_length=1000, description="Natural language request")
    expected_output: str = Field("", max_length=1000)
    limit: Optional[int] = Field(None, description="Row limit (default 100, minimum 1)")
    order_by: Optional[str] = Field(None, description="Column to order by, if the chosen table has it")
    direction: SortDirection = SortDirection.ASC
    include_audit: bool = Field(False, description="Include the pipeline audit trail")


class PipelineStatusEnum(str, Enum):
    COMPLETED = "completed"
    NEEDS_CLARIFICATION = "needs_clarification"
    UNRESOLVABLE = "unresolvable"


class AuditEntryResponse(BaseModel):
    """Single audit trail entry."""

    timestamp: str = Field(..., description="ISO 8601 timestamp")
    step: str = Field(..., description="Step identifier")
    input_data: dict[str, Any] = Field(default_factory=dict)
    output_data: dict[str, Any] = Field(default_factory=dict)


class AskResponse(BaseModel):
    status: PipelineStatusEnum
    message: str
    original_query: str
    sql_query: Optional[str] = None
    table_name: Optional[str] = None
    rows: list[dict[str, Any]] = Field(default_factory=list)
    row_count: int = 0
    audit_trail: Optional[list[AuditEntryResponse]] = None
    request_id: str
    processing_time_ms: float


class TableResponse(BaseModel):
    name: str
    description: str = ""


class ColumnResponse(BaseModel):
    name: str
    type: str
    description: str = ""
    nullable: Optional[bool] = None
    default_value: Optional[str] = None


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Health check response."""

    status: HealthStatus = Field(..., description="Overall health status")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    checks: dict[str, bool] = Field(default_factory=dict)


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool = Field(..., description="Whether the service is ready to handle requests")
    checks: dict[str, bool] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    request_id: str | None = Field(None, description="Request ID if available")
    details: dict[str, Any] | None = Field(None, description="Additional error details")
