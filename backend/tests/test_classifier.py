"""
Tests for the keyword classifier, mock data and table transforms.
"""

from __future__ import annotations

import random

import pytest

from backend.app.engine.classifier import KeywordClassifier, match_table
from backend.app.engine.errors import TransformError
from backend.app.engine.mock_data import (
    MONTHS,
    NARRATIVES,
    SQL_TEMPLATES,
    build_sql,
    get_table,
)
from backend.app.engine.transforms import fallback_selection, to_monthly_series
from backend.app.schema.inquiry_schema import ChartType, SubjectTable

SALES_SQL = (
    "SELECT month, revenue, expenses, profit, region FROM sales "
    "WHERE region IN ('North', 'South') ORDER BY month ASC"
)
CUSTOMERS_SQL = (
    "SELECT name, segment, annualSpend, loyaltyYears FROM customers ORDER BY annualSpend DESC"
)
PRODUCTS_SQL = "SELECT id, name, category, unitPrice FROM products ORDER BY unitPrice ASC"


class TestKeywordMatching:
    @pytest.mark.parametrize(
        "question, expected",
        [
            ("What are our sales trends?", SubjectTable.SALES),
            ("Show REVENUE by month", SubjectTable.SALES),
            ("profit margins please", SubjectTable.SALES),
            ("Who is our biggest customer?", SubjectTable.CUSTOMERS),
            ("List every Client", SubjectTable.CUSTOMERS),
            ("Which product sells best?", SubjectTable.PRODUCTS),
            ("subscription performance", SubjectTable.PRODUCTS),
        ],
    )
    def test_keyword_table(self, question: str, expected: SubjectTable):
        assert match_table(question) == expected

    def test_sales_keywords_win_over_later_tables(self):
        assert match_table("revenue per customer and product") == SubjectTable.SALES

    def test_customer_keywords_win_over_products(self):
        assert match_table("client product usage") == SubjectTable.CUSTOMERS

    def test_no_match(self):
        assert match_table("How is the weather?") is None

    def test_revenue_always_yields_sales_sql(self):
        for seed in range(20):
            classifier = KeywordClassifier(random.Random(seed))
            assert build_sql(classifier.select_table("quarterly revenue")) == SALES_SQL

    def test_client_always_yields_customers_sql(self):
        for seed in range(20):
            classifier = KeywordClassifier(random.Random(seed))
            assert build_sql(classifier.select_table("top client accounts")) == CUSTOMERS_SQL

    def test_unmatched_question_picks_some_table(self):
        seen = set()
        for seed in range(50):
            seen.add(KeywordClassifier(random.Random(seed)).select_table("Tell me something"))
        assert seen == set(SubjectTable)


class TestChartSelection:
    def test_sales_chart(self):
        types = set()
        for seed in range(30):
            selection = KeywordClassifier(random.Random(seed)).select_chart(SubjectTable.SALES)
            types.add(selection.chart_type)
            assert selection.chart_config.x_axis.key == "month"
            assert [y.key for y in selection.chart_config.y_axes] == ["revenue", "expenses", "profit"]
        assert types <= {ChartType.MULTI_LINE, ChartType.MULTI_BAR}

    def test_customers_chart(self):
        for seed in range(30):
            selection = KeywordClassifier(random.Random(seed)).select_chart(SubjectTable.CUSTOMERS)
            assert selection.chart_type in (ChartType.BAR, ChartType.PIE)
            assert selection.chart_config.x_axis.key == "name"
            assert selection.chart_config.y_axes[0].key == "annualSpend"

    def test_products_chart_variants(self):
        for seed in range(50):
            selection = KeywordClassifier(random.Random(seed)).select_chart(SubjectTable.PRODUCTS)
            if selection.chart_type == ChartType.MULTI_LINE:
                assert selection.chart_config.x_axis.key == "month"
                assert selection.chart_config.y_axes[0].key == "sales"
            else:
                assert selection.chart_type in (ChartType.BAR, ChartType.LINE)
                assert selection.chart_config.x_axis.key == "name"
                assert selection.chart_config.y_axes[0].key == "unitPrice"


class TestMockData:
    def test_sql_templates(self):
        assert SQL_TEMPLATES[SubjectTable.SALES] == SALES_SQL
        assert SQL_TEMPLATES[SubjectTable.CUSTOMERS] == CUSTOMERS_SQL
        assert SQL_TEMPLATES[SubjectTable.PRODUCTS] == PRODUCTS_SQL

    def test_table_sizes(self):
        assert len(get_table(SubjectTable.SALES)) == 12
        assert len(get_table(SubjectTable.CUSTOMERS)) == 8
        assert len(get_table(SubjectTable.PRODUCTS)) == 6

    def test_get_table_returns_copy(self):
        rows = get_table(SubjectTable.SALES)
        rows[0]["revenue"] = -1
        assert get_table(SubjectTable.SALES)[0]["revenue"] == 45000

    def test_every_table_has_a_narrative(self):
        assert set(NARRATIVES) == set(SubjectTable)


class TestMonthlySeries:
    def test_six_products_give_six_rows(self):
        rows = to_monthly_series(get_table(SubjectTable.PRODUCTS))
        assert len(rows) == len(MONTHS) == 6
        assert [r["month"] for r in rows] == MONTHS
        assert rows[0]["Basic Plan"] == 120
        assert rows[5]["Consulting Hours"] == 60
        assert len(rows[0]) == 7

    def test_one_product_gives_six_rows(self):
        rows = to_monthly_series(get_table(SubjectTable.PRODUCTS)[:1])
        assert len(rows) == 6
        assert rows[2] == {"month": "Mar", "Basic Plan": 118}

    def test_short_series_leaves_gaps(self):
        rows = to_monthly_series([{"name": "Short", "monthlySales": [1, 2]}])
        assert len(rows) == 6
        assert rows[1] == {"month": "Feb", "Short": 2}
        assert rows[4] == {"month": "May"}

    def test_without_monthly_data_raises(self):
        with pytest.raises(TransformError):
            to_monthly_series(get_table(SubjectTable.CUSTOMERS))

    def test_non_mapping_row_raises(self):
        with pytest.raises(TransformError):
            to_monthly_series([["not", "a", "row"]])

    def test_fallback_selection_uses_first_two_keys(self):
        selection = fallback_selection(get_table(SubjectTable.PRODUCTS))
        assert selection.chart_type == ChartType.BAR
        assert selection.chart_config.x_axis.key == "id"
        assert selection.chart_config.y_axes[0].key == "name"
        assert selection.chart_config.y_axes[0].color == "#8884d8"
