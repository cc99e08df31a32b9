"""Shared route dependencies."""

import uuid

from fastapi import Request

from query_wise.agent import QueryWiseAgent
from query_wise.config import Settings
from query_wise.executor import QueryExecutor
from query_wise.store.base import TabularStore


def get_store(request: Request) -> TabularStore:
    return request.app.state.store


def get_executor(request: Request) -> QueryExecutor:
    return request.app.state.executor


def get_agent(request: Request) -> QueryWiseAgent:
    """Dependency to get the configured agent from app state."""
    return request.app.state.agent


def get_request_id(request: Request) -> str:
    """Request ID set by the telemetry middleware, or a fresh one."""
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings
