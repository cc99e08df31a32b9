"""
Query Pipeline Agent
====================

Orchestrates the AI path: validate, translate, bind, execute.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

import structlog

from query_wise.binding import bind_query
from query_wise.errors import InsufficientInformation, UnresolvableQuery
from query_wise.executor import QueryExecutor
from query_wise.llm.base import ReasoningCapability
from query_wise.models import SortDirection, StructuredQuery, TranslationResult
from query_wise.store.base import SchemaSnapshot, TabularStore
from query_wise.translator import QueryTranslator
from query_wise.validator import QueryValidator, require_request

logger = structlog.get_logger(__name__)


class PipelineStatus(Enum):
    """Outcome of one pass through the pipeline."""

    COMPLETED = "completed"
    NEEDS_CLARIFICATION = "needs_clarification"
    UNRESOLVABLE = "unresolvable"


@dataclass
class AuditEntry:
    """Single entry in the audit trail."""

    timestamp: str
    step: str
    input_data: dict
    output_data: dict


@dataclass
class AgentResult:
    """Final result from the agent."""

    status: PipelineStatus
    original_query: str
    message: str
    sql_query: Optional[str] = None
    query: Optional[StructuredQuery] = None
    rows: list[dict[str, Any]] = field(default_factory=list)
    audit_trail: list[AuditEntry] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.status is PipelineStatus.COMPLETED


@dataclass
class ResolvedQuery:
    """A translated request bound to the catalog, ready to execute."""

    query: StructuredQuery
    translation: TranslationResult


class QueryWiseAgent:
    """
    Runs a natural-language request through the whole pipeline.

    The agent:
    1. Reads one schema snapshot for the request
    2. Validates that the request is specific enough
    3. Translates it into a structured query
    4. Binds the structured query to the snapshot
    5. Executes it and returns the rows

    Clarification requests and unresolvable requests are expected outcomes
    and come back as result statuses. Capability and store failures
    propagate as exceptions. Each call is a single attempt.
    """

    def __init__(
        self,
        store: TabularStore,
        reasoner: Optional[ReasoningCapability] = None,
        validator: Optional[QueryValidator] = None,
        translator: Optional[QueryTranslator] = None,
    ) -> None:
        """
        Initialize the agent.

        Args:
            store: Tabular store used for the catalog and execution
            reasoner: Reasoning capability shared by validator and translator
            validator: Overrides the validator built from ``reasoner``
            translator: Overrides the translator built from ``reasoner``
        """
        if reasoner is None and (validator is None or translator is None):
            raise ValueError("a reasoner is required unless validator and translator are given")
        self.store = store
        self.executor = QueryExecutor(store)
        self.validator = validator or QueryValidator(reasoner)
        self.translator = translator or QueryTranslator(reasoner)

    @staticmethod
    def _audit(trail: list[AuditEntry], step: str, input_data: dict, output_data: dict) -> None:
        trail.append(
            AuditEntry(
                timestamp=datetime.now(timezone.utc).isoformat(),
                step=step,
                input_data=input_data,
                output_data=output_data,
            )
        )

    async def resolve(
        self,
        natural_language_query: str,
        expected_output: str = "",
        limit: Optional[int] = None,
        order_by: Optional[str] = None,
        direction: SortDirection | str = SortDirection.ASC,
        audit_trail: Optional[list[AuditEntry]] = None,
    ) -> ResolvedQuery:
        """
        Turn a request into a bound StructuredQuery without executing it.

        Raises:
            InvalidInput: blank request
            InsufficientInformation: the validator asked for clarification
            UnresolvableQuery: no single-table query satisfies the request
            TranslationUnavailable: the reasoning capability failed
            UnknownTable, UnknownColumn: the translation names missing catalog entries
        """
        trail = audit_trail if audit_trail is not None else []
        request = require_request(natural_language_query)

        schema = await SchemaSnapshot.load(self.store)
        descriptions = schema.column_descriptions()
        self._audit(trail, "schema", {}, {"tables": schema.table_names})

        validation = await self.validator.validate(
            request, schema.table_names, expected_output, descriptions
        )
        self._audit(
            trail,
            "validation",
            {"query": request, "expected_output": expected_output},
            validation.model_dump(),
        )
        if not validation.is_valid:
            raise InsufficientInformation(validation.clarification_needed)

        translation = await self.translator.translate(request, schema.table_names, descriptions)
        self._audit(trail, "translation", {"query": request}, translation.model_dump(mode="json"))
        if not translation.is_resolved:
            raise UnresolvableQuery(translation.missing_data_explanation)

        query = bind_query(
            schema,
            translation.table_name,
            translation.where_clauses or [],
            limit,
            order_by,
            direction,
        )
        self._audit(
            trail,
            "binding",
            {"table": translation.table_name},
            {"sql": query.to_display_sql(), "order_by": query.order_by, "limit": query.limit},
        )
        return ResolvedQuery(query=query, translation=translation)

    async def ask(
        self,
        natural_language_query: str,
        expected_output: str = "",
        limit: Optional[int] = None,
        order_by: Optional[str] = None,
        direction: SortDirection | str = SortDirection.ASC,
    ) -> AgentResult:
        """
        Main entry point: answer a natural-language request with rows.

        Args:
            natural_language_query: The user's request
            expected_output: Optional description of the expected result
            limit: Row limit (default 100)
            order_by: Ordering column; dropped when the chosen table lacks it
            direction: ``asc`` or ``desc``

        Returns:
            AgentResult with status, message, display SQL, rows and audit trail
        """
        trail: list[AuditEntry] = []
        log = logger.bind(query=natural_language_query)

        try:
            resolved = await self.resolve(
                natural_language_query,
                expected_output,
                limit,
                order_by,
                direction,
                audit_trail=trail,
            )
        except InsufficientInformation as e:
            log.info("clarification_needed", clarification=e.clarification)
            return AgentResult(
                status=PipelineStatus.NEEDS_CLARIFICATION,
                original_query=natural_language_query,
                message=e.clarification,
                audit_trail=trail,
            )
        except UnresolvableQuery as e:
            log.info("query_unresolvable", explanation=e.explanation)
            translation = next((a for a in trail if a.step == "translation"), None)
            return AgentResult(
                status=PipelineStatus.UNRESOLVABLE,
                original_query=natural_language_query,
                message=e.explanation,
                sql_query=translation.output_data.get("sql_query") if translation else None,
                audit_trail=trail,
            )

        rows = await self.executor.execute(resolved.query)
        self._audit(trail, "execution", {"table": resolved.query.table_name}, {"rows": len(rows)})

        return AgentResult(
            status=PipelineStatus.COMPLETED,
            original_query=natural_language_query,
            message=f"Returned {len(rows)} row(s) from {resolved.query.table_name}",
            sql_query=resolved.translation.sql_query,
            query=resolved.query,
            rows=rows,
            audit_trail=trail,
        )
