"""
Query Validator
===============

Checks whether a natural-language request is specific enough to translate.
"""

from typing import Iterable, Mapping, Optional

import structlog

from query_wise.errors import InvalidInput
from query_wise.llm.base import ReasoningCapability
from query_wise.models import ValidationResult

logger = structlog.get_logger(__name__)


def join_table_names(table_names: str | Iterable[str]) -> str:
    if isinstance(table_names, str):
        return table_names
    return ", ".join(table_names)


def require_request(natural_language_query: str) -> str:
    """Return the stripped request, rejecting blank input."""
    if not natural_language_query or not natural_language_query.strip():
        raise InvalidInput("Please enter a natural language query.")
    return natural_language_query.strip()


class QueryValidator:
    """Asks the reasoning capability whether a request can be resolved."""

    PROMPT_TEMPLATE = """You decide whether a user's request has enough detail to be turned into a
database query over a single table with simple filters.

Tables available in the database: {table_names}
{column_section}
User request: {query}

Expected output described by the user: {expected_output}

The request is valid only if it clearly points at exactly one of the tables
and any filter it asks for names a real column and a concrete value.
If the table is ambiguous, a filter value is missing, a referenced column
does not exist, or the request spans several entities, it is not valid:
set isValid to false and write, in clarificationNeeded, the question you
would ask the user to resolve it. Otherwise set isValid to true and leave
clarificationNeeded empty."""

    def __init__(self, reasoner: ReasoningCapability) -> None:
        self.reasoner = reasoner

    async def validate(
        self,
        natural_language_query: str,
        table_names: str | Iterable[str],
        expected_output: str = "",
        column_descriptions: Optional[Mapping[str, str]] = None,
    ) -> ValidationResult:
        """
        Validate a request.

        Args:
            natural_language_query: The user's request, required
            table_names: Available tables, comma-joined or as a sequence
            expected_output: What the user expects back, may be empty
            column_descriptions: Optional ``table.column`` descriptions

        Raises:
            InvalidInput: the request is blank
            TranslationUnavailable: the capability failed or misbehaved
        """
        query = require_request(natural_language_query)
        column_section = ""
        if column_descriptions:
            lines = "\n".join(f"  {key}: {text}" for key, text in column_descriptions.items())
            column_section = f"\nColumns:\n{lines}\n"

        prompt = self.PROMPT_TEMPLATE.format(
            table_names=join_table_names(table_names),
            column_section=column_section,
            query=query,
            expected_output=expected_output.strip() or "(not specified)",
        )
        result = await self.reasoner.generate(prompt, ValidationResult)
        logger.info(
            "query_validated",
            is_valid=result.is_valid,
            clarification=result.clarification_needed,
        )
        return result
