"""
Unit Tests for the HTTP API
===========================

Routes exercised in-process over the sample catalog.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from api.main import DEMO_TRANSLATIONS, create_app
from api.routes.dependencies import get_agent
from query_wise.agent import QueryWiseAgent
from query_wise.config import Settings
from query_wise.llm.mock import MockReasoner
from query_wise.store.memory import InMemoryStore


@pytest.fixture
def app(store: InMemoryStore, agent: QueryWiseAgent):
    app = create_app(settings=Settings(_env_file=None), store=store)
    app.dependency_overrides[get_agent] = lambda: agent
    return app


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


class TestHealth:
    """Health and readiness endpoints."""

    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["checks"] == {"api": True, "store": True}

    async def test_ready(self, client: AsyncClient) -> None:
        response = await client.get("/ready")
        assert response.json()["ready"] is True

    async def test_live(self, client: AsyncClient) -> None:
        assert (await client.get("/live")).json() == {"status": "ok"}

    async def test_request_id_echoed(self, client: AsyncClient) -> None:
        response = await client.get("/live", headers={"X-Request-ID": "req-123"})
        assert response.headers["X-Request-ID"] == "req-123"


class TestSchemaRoutes:
    """Catalog browsing."""

    async def test_list_tables(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/tables")
        assert [t["name"] for t in response.json()] == ["users", "products", "orders"]

    async def test_list_columns(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/tables/products/columns")
        columns = response.json()
        assert [c["name"] for c in columns] == ["product_id", "product_name", "price", "stock_quantity"]
        assert columns[2]["type"] == "DECIMAL"

    async def test_unknown_table_has_no_columns(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/tables/customers/columns")
        assert response.status_code == 200
        assert response.json() == []


class TestExecuteRoute:
    """Manual builder execution."""

    async def test_filtered_ordered_query(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/query/execute",
            json={
                "table_name": "products",
                "where_clauses": [{"column": "stock_quantity", "operator": "<", "value": "100"}],
                "limit": 2,
                "order_by": "price",
                "direction": "desc",
            },
        )
        assert response.status_code == 200
        body = response.json()
        assert [r["product_name"] for r in body["rows"]] == ["Laptop Pro", "4K Monitor"]
        assert body["row_count"] == 2
        assert body["sql"] == (
            "SELECT * FROM `products` WHERE `stock_quantity` < 100 ORDER BY `price` DESC LIMIT 2"
        )

    async def test_incomplete_clauses_ignored(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/query/execute",
            json={
                "table_name": "users",
                "where_clauses": [
                    {"column": "", "operator": "=", "value": "1"},
                    {"column": "name", "operator": "LIKE", "value": ""},
                ],
            },
        )
        assert response.json()["row_count"] == 4

    async def test_unknown_table(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/query/execute", json={"table_name": "customers"})
        assert response.status_code == 404
        assert response.json()["error"] == "UnknownTable"
        assert response.json()["message"] == "Table 'customers' does not exist."

    async def test_unknown_column(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/query/execute",
            json={
                "table_name": "users",
                "where_clauses": [{"column": "favorite_color", "operator": "=", "value": "blue"}],
            },
        )
        assert response.status_code == 422
        assert response.json()["error"] == "UnknownColumn"

    async def test_invalid_operator(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/query/execute",
            json={
                "table_name": "users",
                "where_clauses": [{"column": "id", "operator": "IN", "value": "1"}],
            },
        )
        assert response.status_code == 422


class TestPipelineRoutes:
    """Validation, translation and the full pipeline."""

    async def test_validate(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/query/validate", json={"query": "show me stuff"})
        body = response.json()
        assert body["is_valid"] is False
        assert body["clarification_needed"] == "Which table are you interested in?"

    async def test_translate(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/query/translate", json={"query": "Find products that are low in stock"}
        )
        body = response.json()
        assert body["table_name"] == "products"
        assert body["where_clauses"] == [
            {"column": "stock_quantity", "operator": "<", "value": "100"}
        ]

    async def test_ask_completed(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/query/ask",
            json={"query": "Find products that are low in stock", "include_audit": True},
        )
        body = response.json()
        assert body["status"] == "completed"
        assert body["table_name"] == "products"
        assert body["row_count"] == 2
        assert [a["step"] for a in body["audit_trail"]][-1] == "execution"

    async def test_ask_needs_clarification(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/query/ask", json={"query": "show me stuff"})
        body = response.json()
        assert response.status_code == 200
        assert body["status"] == "needs_clarification"
        assert body["rows"] == []
        assert body["audit_trail"] is None

    async def test_ask_unresolvable(self, client: AsyncClient) -> None:
        response = await client.post(
            "/api/v1/query/ask", json={"query": "Show me users and their orders"}
        )
        body = response.json()
        assert body["status"] == "unresolvable"
        assert "JOIN" in body["message"]

    async def test_blank_request(self, client: AsyncClient) -> None:
        response = await client.post("/api/v1/query/ask", json={"query": "  "})
        assert response.status_code == 400
        assert response.json()["message"] == "Please enter a natural language query."

    async def test_reasoning_unavailable(self, store: InMemoryStore) -> None:
        app = create_app(settings=Settings(_env_file=None), store=store, reasoner=MockReasoner())
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.post("/api/v1/query/ask", json={"query": "List all users"})
        assert response.status_code == 502
        assert response.json()["error"] == "TranslationUnavailable"


class TestDemoAssistant:
    """Canned assistant used when no model key is configured."""

    async def test_demo_translation(self, store: InMemoryStore) -> None:
        app = create_app(settings=Settings(_env_file=None), store=store)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.post(
                "/api/v1/query/ask", json={"query": "Which products are low in stock?"}
            )
        assert response.json()["status"] == "completed"
        assert response.json()["row_count"] == 2

    @pytest.mark.parametrize("canned_key", sorted(DEMO_TRANSLATIONS))
    async def test_every_resolved_demo_request_returns_rows(
        self, store: InMemoryStore, canned_key: str
    ) -> None:
        app = create_app(settings=Settings(_env_file=None), store=store)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.post(
                "/api/v1/query/ask", json={"query": f"Show users {canned_key}"}
            )
        body = response.json()
        if body["status"] == "completed":
            assert body["row_count"] > 0
        else:
            assert body["status"] == "unresolvable"

    async def test_signup_month_demo(self, store: InMemoryStore) -> None:
        app = create_app(settings=Settings(_env_file=None), store=store)
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.post(
                "/api/v1/query/ask", json={"query": "Users who signed up in March"}
            )
        assert [r["name"] for r in response.json()["rows"]] == ["Charlie Brown"]


async def test_configured_default_limit(store: InMemoryStore) -> None:
    app = create_app(settings=Settings(_env_file=None, default_row_limit=2), store=store)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        response = await ac.post("/api/v1/query/execute", json={"table_name": "users"})
    assert response.json()["row_count"] == 2


async def test_metrics_endpoint(client: AsyncClient) -> None:
    await client.post("/api/v1/query/execute", json={"table_name": "orders"})
    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "querywise_query_executions_total" in response.text
