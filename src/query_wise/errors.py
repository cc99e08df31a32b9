"""
Errors
======

Exception taxonomy for the query pipeline.

Every error carries a ``user_message`` that is safe to show to end users.
Diagnostic detail stays in ``str(exc)`` and in the logs.
"""


class QueryWiseError(Exception):
    """Base class for all pipeline errors."""

    user_message = "The request could not be completed"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.user_message)


class InvalidInput(QueryWiseError):
    """The natural-language request is missing or blank."""

    user_message = "Please enter a natural language query."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message)
        if message:
            self.user_message = message


class TranslationUnavailable(QueryWiseError):
    """The reasoning capability failed or returned non-conforming output."""

    user_message = "The query assistant is currently unavailable. Please try again later."


class InsufficientInformation(QueryWiseError):
    """The validator needs more detail before a query can be produced."""

    def __init__(self, clarification: str) -> None:
        super().__init__(clarification)
        self.clarification = clarification
        self.user_message = clarification


class UnresolvableQuery(QueryWiseError):
    """No single-table query can satisfy the request."""

    def __init__(self, explanation: str) -> None:
        super().__init__(explanation)
        self.explanation = explanation
        self.user_message = explanation


class UnknownTable(QueryWiseError):
    """The referenced table is not in the catalog."""

    def __init__(self, table_name: str) -> None:
        super().__init__(f"Unknown table: '{table_name}'")
        self.table_name = table_name
        self.user_message = f"Table '{table_name}' does not exist."


class UnknownColumn(QueryWiseError):
    """The referenced column is not part of the target table."""

    def __init__(self, table_name: str, column_name: str) -> None:
        super().__init__(f"Unknown column: '{column_name}' in table '{table_name}'")
        self.table_name = table_name
        self.column_name = column_name
        self.user_message = f"Column '{column_name}' does not exist in table '{table_name}'."


class ExecutionFailed(QueryWiseError):
    """The underlying store raised an error while running a query."""

    user_message = "Database query failed."
