"""
Query Translator
================

Translates a natural-language request into a single-table structured query.
"""

from typing import Iterable, Mapping

import structlog

from query_wise.errors import TranslationUnavailable
from query_wise.llm.base import ReasoningCapability
from query_wise.models import Operator, TranslationResult
from query_wise.validator import require_request

logger = structlog.get_logger(__name__)


class QueryTranslator:
    """
    Produces a TranslationResult from a request and the catalog.

    The ``sql_query`` of a result is display text only. Execution always
    goes through the structured fields.
    """

    PROMPT_TEMPLATE = """You translate a user's request into a structured database query and a SQL
string that shows the same query to the user.

Tables in the database: {table_names}

Columns:
{columns}

Rules:
- Choose the one table that best answers the request as tableName; it must be
  one of the tables listed above.
- Put each filter in whereClauses as an object with column, operator and value,
  using only columns of the chosen table.
- operator must be one of: {operators}.
- Use LIKE when the request asks for a partial text match; use =, !=, >, <,
  >= or <= for exact or numeric comparisons.
- sqlQuery is a SELECT statement that mirrors the structured query. It is
  shown to the user and never run.

If answering needs data from more than one table (a JOIN), or no table fits,
do not set tableName or whereClauses. Set missingDataExplanation to a concrete
reason instead.

User request: {query}"""

    def __init__(self, reasoner: ReasoningCapability) -> None:
        self.reasoner = reasoner

    async def translate(
        self,
        natural_language_query: str,
        table_names: Iterable[str],
        column_descriptions: Mapping[str, str],
    ) -> TranslationResult:
        """
        Translate a request.

        Args:
            natural_language_query: The user's request
            table_names: Every table the query may target
            column_descriptions: ``table.column`` (or table) to description

        Raises:
            InvalidInput: the request is blank
            TranslationUnavailable: the capability failed, or picked a table
                outside ``table_names``
        """
        query = require_request(natural_language_query)
        names = list(table_names)
        prompt = self.PROMPT_TEMPLATE.format(
            table_names=", ".join(names),
            columns="\n".join(f"  {key}: {text}" for key, text in column_descriptions.items()),
            operators=", ".join(f"'{op.value}'" for op in Operator),
            query=query,
        )

        result = await self.reasoner.generate(prompt, TranslationResult)

        if result.table_name is not None and result.table_name not in names:
            logger.error("translation_unknown_table", table=result.table_name)
            raise TranslationUnavailable(
                f"translation chose table '{result.table_name}' outside the catalog"
            )

        logger.info(
            "query_translated",
            table=result.table_name,
            conditions=len(result.where_clauses or []),
            unresolved=result.missing_data_explanation is not None,
        )
        return result
