"""
Unit Tests for Models
=====================

Boundary-model invariants, value kinds and display rendering.
"""

import math

import pytest
from pydantic import ValidationError

from query_wise.models import (
    BoundCondition,
    ColumnDescriptor,
    ConditionValue,
    Operator,
    SortDirection,
    StructuredQuery,
    TranslationResult,
    ValidationResult,
    ValueKind,
    WhereCondition,
    value_kind_for,
)


class TestWhereCondition:
    """Tests for the WHERE condition boundary model."""

    @pytest.mark.parametrize("operator", ["=", "!=", ">", "<", ">=", "<=", "LIKE"])
    def test_allowed_operators(self, operator: str) -> None:
        cond = WhereCondition(column="price", operator=operator, value="10")
        assert cond.operator.value == operator

    @pytest.mark.parametrize("operator", ["<>", "IN", "like", "BETWEEN", "=="])
    def test_rejected_operators(self, operator: str) -> None:
        with pytest.raises(ValidationError):
            WhereCondition(column="price", operator=operator, value="10")

    def test_numeric_value_becomes_text(self) -> None:
        assert WhereCondition(column="a", operator="=", value=100).value == "100"
        assert WhereCondition(column="a", operator="=", value=25.5).value == "25.5"
        assert WhereCondition(column="a", operator="=", value=1200.0).value == "1200"


class TestValidationResult:
    """Tests for the validation result invariant."""

    def test_valid(self) -> None:
        result = ValidationResult.model_validate({"isValid": True})
        assert result.is_valid is True
        assert result.clarification_needed is None

    def test_invalid_with_clarification(self) -> None:
        result = ValidationResult.model_validate(
            {"isValid": False, "clarificationNeeded": "Which table?"}
        )
        assert result.clarification_needed == "Which table?"

    def test_invalid_without_clarification_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ValidationResult.model_validate({"isValid": False})

    def test_blank_clarification_rejected_when_invalid(self) -> None:
        with pytest.raises(ValidationError):
            ValidationResult.model_validate({"isValid": False, "clarificationNeeded": "  "})

    def test_clarification_rejected_when_valid(self) -> None:
        with pytest.raises(ValidationError):
            ValidationResult.model_validate({"isValid": True, "clarificationNeeded": "Why?"})


class TestTranslationResult:
    """Tests for the translation result invariant."""

    def test_resolved(self) -> None:
        result = TranslationResult.model_validate(
            {
                "tableName": "products",
                "whereClauses": [{"column": "price", "operator": ">", "value": 100}],
                "sqlQuery": "SELECT * FROM products WHERE price > 100",
            }
        )
        assert result.is_resolved
        assert result.where_clauses[0].value == "100"

    def test_explanation_only(self) -> None:
        result = TranslationResult.model_validate(
            {"sqlQuery": "", "missingDataExplanation": "Needs a JOIN."}
        )
        assert not result.is_resolved
        assert result.table_name is None

    def test_both_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TranslationResult.model_validate(
                {"tableName": "users", "sqlQuery": "", "missingDataExplanation": "Needs a JOIN."}
            )

    def test_neither_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TranslationResult.model_validate({"sqlQuery": "SELECT 1"})

    def test_clauses_with_explanation_rejected(self) -> None:
        with pytest.raises(ValidationError):
            TranslationResult.model_validate(
                {
                    "whereClauses": [{"column": "id", "operator": "=", "value": "1"}],
                    "sqlQuery": "",
                    "missingDataExplanation": "Needs a JOIN.",
                }
            )

    def test_sql_query_required(self) -> None:
        with pytest.raises(ValidationError):
            TranslationResult.model_validate({"tableName": "users"})


class TestValueKind:
    """Tests for deriving comparison kinds from column types."""

    @pytest.mark.parametrize(
        "column_type",
        ["INT", "integer", "DECIMAL(10, 2)", "NUMERIC(10,2)", "double precision", "BIGINT UNSIGNED", "FLOAT"],
    )
    def test_numeric_types(self, column_type: str) -> None:
        assert value_kind_for(column_type) is ValueKind.NUMERIC

    @pytest.mark.parametrize(
        "column_type",
        ["VARCHAR", "VARCHAR(255)", "TEXT", "DATE", "character varying", "", "JSON"],
    )
    def test_text_types(self, column_type: str) -> None:
        assert value_kind_for(column_type) is ValueKind.TEXT

    def test_column_descriptor_kind(self) -> None:
        assert ColumnDescriptor("price", "DECIMAL").kind is ValueKind.NUMERIC

    def test_condition_value_number(self) -> None:
        assert ConditionValue(" 42 ", ValueKind.NUMERIC).number == 42.0
        assert math.isnan(ConditionValue("abc", ValueKind.NUMERIC).number)


class TestDisplaySQL:
    """Tests for the display rendering of bound queries."""

    def test_plain_select(self) -> None:
        assert StructuredQuery(table_name="users").to_display_sql() == (
            "SELECT * FROM `users` LIMIT 100"
        )

    def test_full_query(self) -> None:
        query = StructuredQuery(
            table_name="products",
            conditions=[
                BoundCondition("stock_quantity", Operator.LT, ConditionValue("100", ValueKind.NUMERIC)),
                BoundCondition("product_name", Operator.LIKE, ConditionValue("o'b", ValueKind.TEXT)),
            ],
            limit=2,
            order_by="price",
            direction=SortDirection.DESC,
        )
        assert query.to_display_sql() == (
            "SELECT * FROM `products` WHERE `stock_quantity` < 100 "
            "AND `product_name` LIKE '%o''b%' ORDER BY `price` DESC LIMIT 2"
        )

    def test_text_literal_quoted(self) -> None:
        query = StructuredQuery(
            table_name="users",
            conditions=[BoundCondition("name", Operator.EQ, ConditionValue("Bob", ValueKind.TEXT))],
        )
        assert "`name` = 'Bob'" in query.to_display_sql()
