"""
Query Routes
============

Manual execution and the natural-language pipeline.
"""

import time
from typing import Annotated

from fastapi import APIRouter, Depends

from api.routes.dependencies import get_agent, get_app_settings, get_executor, get_request_id
from api.schemas import (
    AskRequest,
    AskResponse,
    AuditEntryResponse,
    ErrorResponse,
    ExecuteRequest,
    ExecuteResponse,
    PipelineStatusEnum,
    TranslateRequest,
    TranslateResponse,
    ValidateRequest,
    ValidateResponse,
)
from observability.logging_config import get_logger
from observability.metrics import (
    track_execution,
    track_pipeline,
    track_reasoning_failure,
)
from observability.tracing import get_tracer
from query_wise.agent import QueryWiseAgent
from query_wise.binding import bind_query, complete_clauses
from query_wise.config import Settings
from query_wise.errors import ExecutionFailed, TranslationUnavailable
from query_wise.executor import QueryExecutor
from query_wise.store.base import SchemaSnapshot

logger = get_logger(__name__)
tracer = get_tracer(__name__)

router = APIRouter(prefix="/api/v1/query", tags=["Query"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid request"},
    404: {"model": ErrorResponse, "description": "Unknown table"},
    422: {"model": ErrorResponse, "description": "Unknown column"},
    500: {"model": ErrorResponse, "description": "Database query failed"},
    502: {"model": ErrorResponse, "description": "Query assistant unavailable"},
}


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000


@router.post(
    "/execute",
    response_model=ExecuteResponse,
    responses=ERROR_RESPONSES,
    summary="Run a manually built query",
)
async def execute_query(
    request: ExecuteRequest,
    executor: QueryExecutor = Depends(get_executor),
    settings: Settings = Depends(get_app_settings),
    request_id: Annotated[str, Depends(get_request_id)] = None,
) -> ExecuteResponse:
    """
    Run a query built in the manual builder.

    Clauses missing a column or a value are dropped before binding, so a
    half-filled builder row never filters anything.
    """
    start_time = time.perf_counter()
    schema = await SchemaSnapshot.for_table(executor.store, request.table_name)
    query = bind_query(
        schema,
        request.table_name,
        complete_clauses(request.where_clauses),
        request.limit if request.limit is not None else settings.default_row_limit,
        request.order_by,
        request.direction,
    )

    with tracer.start_as_current_span("querywise.execute") as span:
        span.set_attribute("querywise.table", query.table_name)
        span.set_attribute("querywise.conditions", len(query.conditions))
        try:
            rows = await executor.execute(query)
        except ExecutionFailed:
            track_execution("manual", success=False)
            raise
    track_execution("manual", success=True, rows=len(rows))

    return ExecuteResponse(
        table_name=query.table_name,
        sql=query.to_display_sql(),
        rows=rows,
        row_count=len(rows),
        request_id=request_id,
        processing_time_ms=_elapsed_ms(start_time),
    )


@router.post(
    "/validate",
    response_model=ValidateResponse,
    responses=ERROR_RESPONSES,
    summary="Check whether a request is specific enough",
)
async def validate_query(
    request: ValidateRequest,
    agent: QueryWiseAgent = Depends(get_agent),
    request_id: Annotated[str, Depends(get_request_id)] = None,
) -> ValidateResponse:
    tables = await agent.store.list_tables()
    try:
        result = await agent.validator.validate(
            request.query, [t.name for t in tables], request.expected_output
        )
    except TranslationUnavailable:
        track_reasoning_failure("validate")
        raise
    return ValidateResponse(
        is_valid=result.is_valid,
        clarification_needed=result.clarification_needed,
        request_id=request_id,
    )


@router.post(
    "/translate",
    response_model=TranslateResponse,
    responses=ERROR_RESPONSES,
    summary="Translate a request into a structured query",
    description="The returned sql_query is for display only and is never executed",
)
async def translate_query(
    request: TranslateRequest,
    agent: QueryWiseAgent = Depends(get_agent),
    request_id: Annotated[str, Depends(get_request_id)] = None,
) -> TranslateResponse:
    schema = await SchemaSnapshot.load(agent.store)
    try:
        result = await agent.translator.translate(
            request.query, schema.table_names, schema.column_descriptions()
        )
    except TranslationUnavailable:
        track_reasoning_failure("translate")
        raise
    return TranslateResponse(
        table_name=result.table_name,
        where_clauses=result.where_clauses,
        sql_query=result.sql_query,
        missing_data_explanation=result.missing_data_explanation,
        request_id=request_id,
    )


@router.post(
    "/ask",
    response_model=AskResponse,
    responses=ERROR_RESPONSES,
    summary="Answer a natural-language request with rows",
)
async def ask(
    request: AskRequest,
    agent: QueryWiseAgent = Depends(get_agent),
    settings: Settings = Depends(get_app_settings),
    request_id: Annotated[str, Depends(get_request_id)] = None,
) -> AskResponse:
    """
    Run the full pipeline: validate, translate, execute.

    Clarification questions and unresolvable requests come back with status
    ``needs_clarification`` / ``unresolvable`` and the guidance text in
    ``message``.
    """
    start_time = time.perf_counter()
    try:
        with tracer.start_as_current_span("querywise.ask") as span:
            result = await agent.ask(
                request.query,
                expected_output=request.expected_output,
                limit=request.limit if request.limit is not None else settings.default_row_limit,
                order_by=request.order_by,
                direction=request.direction,
            )
            span.set_attribute("querywise.status", result.status.value)
    except TranslationUnavailable:
        track_reasoning_failure("ask")
        track_pipeline("error", time.perf_counter() - start_time)
        raise
    except ExecutionFailed:
        track_execution("ai", success=False)
        track_pipeline("error", time.perf_counter() - start_time)
        raise

    track_pipeline(result.status.value, time.perf_counter() - start_time)
    if result.success:
        track_execution("ai", success=True, rows=len(result.rows))

    audit_trail = None
    if request.include_audit:
        audit_trail = [
            AuditEntryResponse(
                timestamp=entry.timestamp,
                step=entry.step,
                input_data=entry.input_data,
                output_data=entry.output_data,
            )
            for entry in result.audit_trail
        ]

    return AskResponse(
        status=PipelineStatusEnum(result.status.value),
        message=result.message,
        original_query=result.original_query,
        sql_query=result.sql_query,
        table_name=result.query.table_name if result.query else None,
        rows=result.rows,
        row_count=len(result.rows),
        audit_trail=audit_trail,
        request_id=request_id,
        processing_time_ms=_elapsed_ms(start_time),
    )
