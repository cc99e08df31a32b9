"""
Pytest Fixtures
===============

Shared fixtures for QueryWise tests.
"""

import sys
from pathlib import Path

import pytest

# Add src and the repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent.parent))

from query_wise.agent import QueryWiseAgent
from query_wise.executor import QueryExecutor
from query_wise.llm.mock import MockReasoner
from query_wise.store.base import SchemaSnapshot
from query_wise.store.memory import InMemoryStore
from query_wise.store.sample import sample_store
from query_wise.translator import QueryTranslator
from query_wise.validator import QueryValidator


@pytest.fixture
def store() -> InMemoryStore:
    """Return an in-memory store loaded with the sample catalog."""
    return sample_store()


@pytest.fixture
async def schema(store: InMemoryStore) -> SchemaSnapshot:
    """Return a schema snapshot of the sample catalog."""
    return await SchemaSnapshot.load(store)


@pytest.fixture
def executor(store: InMemoryStore) -> QueryExecutor:
    return QueryExecutor(store)


@pytest.fixture
def validation_reasoner() -> MockReasoner:
    """Validator stub: vague or cross-entity requests need clarification."""
    return MockReasoner(
        responses={
            "show me stuff": [
                {"isValid": False, "clarificationNeeded": "Which table are you interested in?"}
            ],
            "favorite_color": [
                {
                    "isValid": False,
                    "clarificationNeeded": "No table has a favorite_color column. Which column did you mean?",
                }
            ],
        },
        default={"isValid": True},
    )


@pytest.fixture
def translation_reasoner() -> MockReasoner:
    """Translator stub covering the sample catalog."""
    return MockReasoner(
        responses={
            "low in stock": [
                {
                    "tableName": "products",
                    "whereClauses": [
                        {"column": "stock_quantity", "operator": "<", "value": 100}
                    ],
                    "sqlQuery": "SELECT * FROM products WHERE stock_quantity < 100",
                }
            ],
            "named ali": [
                {
                    "tableName": "users",
                    "whereClauses": [{"column": "name", "operator": "LIKE", "value": "ali"}],
                    "sqlQuery": "SELECT * FROM users WHERE name LIKE '%ali%'",
                }
            ],
            "and their orders": [
                {
                    "sqlQuery": "SELECT * FROM users JOIN orders ON users.id = orders.user_id",
                    "missingDataExplanation": "This request needs a JOIN between users and orders.",
                }
            ],
        }
    )


@pytest.fixture
def agent(
    store: InMemoryStore,
    validation_reasoner: MockReasoner,
    translation_reasoner: MockReasoner,
) -> QueryWiseAgent:
    """Create an agent with deterministic validator and translator stubs."""
    return QueryWiseAgent(
        store,
        validator=QueryValidator(validation_reasoner),
        translator=QueryTranslator(translation_reasoner),
    )

