"""
FastAPI Application
===================

Main FastAPI application for the QueryWise service.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import __version__
from api.middleware.telemetry import TelemetryMiddleware
from api.routes.health import router as health_router
from api.routes.query import router as query_router
from api.routes.schema import router as schema_router
from api.schemas import ErrorResponse
from observability.logging_config import get_logger, setup_logging
from observability.metrics import metrics_endpoint, setup_metrics
from observability.tracing import setup_tracing
from query_wise.agent import QueryWiseAgent
from query_wise.config import Settings, get_settings
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
from query_wise.executor import QueryExecutor
from query_wise.llm.base import ReasoningCapability
from query_wise.llm.mock import MockReasoner
from query_wise.store import SqlStore, sample_store
from query_wise.store.base import TabularStore
from query_wise.translator import QueryTranslator
from query_wise.validator import QueryValidator

logger = get_logger(__name__)

ERROR_STATUS = {
    InvalidInput: 400,
    UnknownTable: 404,
    UnknownColumn: 422,
    InsufficientInformation: 422,
    UnresolvableQuery: 422,
    ExecutionFailed: 500,
    TranslationUnavailable: 502,
}

# Canned translations served when no Gemini key is configured
DEMO_TRANSLATIONS = {
    "low in stock": [{
        "tableName": "products",
        "whereClauses": [{"column": "stock_quantity", "operator": "<", "value": "100"}],
        "sqlQuery": "SELECT * FROM products WHERE stock_quantity < 100",
    }],
    "signed up in march": [{
        "tableName": "users",
        "whereClauses": [{"column": "signup_date", "operator": "LIKE", "value": "2023-03"}],
        "sqlQuery": "SELECT * FROM users WHERE signup_date LIKE '%2023-03%'",
    }],
    "their orders": [{
        "sqlQuery": "SELECT * FROM users JOIN orders ON users.id = orders.user_id",
        "missingDataExplanation": "Combining users with their orders requires a JOIN across two tables.",
    }],
}

DEMO_FALLBACK = {
    "sqlQuery": "",
    "missingDataExplanation": (
        "The demo assistant only answers the sample requests. "
        "Configure QUERYWISE_GEMINI_API_KEY for full translation."
    ),
}


def create_store(settings: Settings) -> TabularStore:
    """Live database when one is configured, the sample catalog otherwise."""
    if settings.uses_database:
        return SqlStore.from_settings(settings)
    return sample_store()


def create_agent(
    settings: Settings,
    store: TabularStore,
    reasoner: Optional[ReasoningCapability] = None,
) -> QueryWiseAgent:
    """Create and configure the query pipeline agent."""
    if reasoner is not None:
        return QueryWiseAgent(store, reasoner=reasoner)

    if settings.gemini_api_key:
        from query_wise.llm.gemini import GeminiReasoner

        return QueryWiseAgent(
            store,
            reasoner=GeminiReasoner(settings.gemini_api_key, settings.gemini_model),
        )

    # For demo purposes, use MockReasoner
    return QueryWiseAgent(
        store,
        validator=QueryValidator(MockReasoner(default={"isValid": True})),
        translator=QueryTranslator(MockReasoner(DEMO_TRANSLATIONS, default=DEMO_FALLBACK)),
    )


def _status_for(exc: QueryWiseError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 400


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[TabularStore] = None,
    reasoner: Optional[ReasoningCapability] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """Application lifespan handler."""
        setup_logging(settings.log_level, settings.json_logs)
        setup_tracing(app, __version__, settings.environment, settings.otlp_endpoint)
        logger.info(
            "querywise_api_starting",
            version=__version__,
            store=type(app.state.store).__name__,
        )

        yield

        logger.info("querywise_api_stopping")
        await app.state.store.close()

    app = FastAPI(
        title="QueryWise API",
        description=(
            "Query a relational catalog with a manual filter builder or in "
            "natural language translated into a structured single-table query."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store or create_store(settings)
    app.state.executor = QueryExecutor(app.state.store)
    app.state.agent = create_agent(settings, app.state.store, reasoner)

    # Add middleware
    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add routes
    app.include_router(health_router)
    app.include_router(schema_router)
    app.include_router(query_router)

    setup_metrics(app, __version__, settings.environment)
    app.add_route("/metrics", metrics_endpoint)

    @app.exception_handler(QueryWiseError)
    async def query_wise_exception_handler(request: Request, exc: QueryWiseError) -> JSONResponse:
        """Map pipeline errors to user-safe responses."""
        request_id = getattr(request.state, "request_id", None)
        status_code = _status_for(exc)
        if status_code >= 500:
            logger.error(
                "request_failed",
                error=type(exc).__name__,
                detail=str(exc),
                request_id=request_id,
            )
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(
                error=type(exc).__name__,
                message=exc.user_message,
                request_id=request_id,
            ).model_dump(),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        request_id = getattr(request.state, "request_id", None)
        logger.exception("unhandled_error", request_id=request_id)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="InternalServerError",
                message="An unexpected error occurred",
                request_id=request_id,
            ).model_dump(),
        )

    return app


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
