"""
Mock Business Data

Fixed tables, query strings and narratives the simulated assistant
answers from.  Nothing here is computed; the values are canned so the
dashboard always has something stable to render.
"""

from __future__ import annotations

import copy
from typing import Any

from backend.app.schema.inquiry_schema import SubjectTable

TIME_FRAME_LABEL = "Last 6 months"

MONTHS: list[str] = ["Jan", "Feb", "Mar", "Apr", "May", "Jun"]

_SALES: list[dict[str, Any]] = [
    {"month": "Jan", "revenue": 45000, "expenses": 32000, "profit": 13000, "region": "North"},
    {"month": "Feb", "revenue": 52000, "expenses": 34000, "profit": 18000, "region": "North"},
    {"month": "Mar", "revenue": 61000, "expenses": 36000, "profit": 25000, "region": "North"},
    {"month": "Apr", "revenue": 58000, "expenses": 35000, "profit": 23000, "region": "North"},
    {"month": "May", "revenue": 63000, "expenses": 37000, "profit": 26000, "region": "North"},
    {"month": "Jun", "revenue": 72000, "expenses": 39000, "profit": 33000, "region": "North"},
    {"month": "Jan", "revenue": 38000, "expenses": 28000, "profit": 10000, "region": "South"},
    {"month": "Feb", "revenue": 41000, "expenses": 29000, "profit": 12000, "region": "South"},
    {"month": "Mar", "revenue": 45000, "expenses": 31000, "profit": 14000, "region": "South"},
    {"month": "Apr", "revenue": 49000, "expenses": 32000, "profit": 17000, "region": "South"},
    {"month": "May", "revenue": 51000, "expenses": 33000, "profit": 18000, "region": "South"},
    {"month": "Jun", "revenue": 56000, "expenses": 35000, "profit": 21000, "region": "South"},
]

_CUSTOMERS: list[dict[str, Any]] = [
    {"id": 1, "name": "Acme Corp", "segment": "Enterprise", "annualSpend": 120000, "loyaltyYears": 5, "lastPurchase": "2025-03-15"},
    {"id": 2, "name": "TechStart Inc", "segment": "SMB", "annualSpend": 45000, "loyaltyYears": 2, "lastPurchase": "2025-04-01"},
    {"id": 3, "name": "BigRetail", "segment": "Enterprise", "annualSpend": 210000, "loyaltyYears": 7, "lastPurchase": "2025-03-28"},
    {"id": 4, "name": "Local Shop", "segment": "Small", "annualSpend": 15000, "loyaltyYears": 1, "lastPurchase": "2025-02-10"},
    {"id": 5, "name": "MidMarket Solutions", "segment": "SMB", "annualSpend": 78000, "loyaltyYears": 3, "lastPurchase": "2025-03-22"},
    {"id": 6, "name": "Global Industries", "segment": "Enterprise", "annualSpend": 350000, "loyaltyYears": 10, "lastPurchase": "2025-04-05"},
    {"id": 7, "name": "Corner Cafe", "segment": "Small", "annualSpend": 9000, "loyaltyYears": 2, "lastPurchase": "2025-03-30"},
    {"id": 8, "name": "Tech Giants", "segment": "Enterprise", "annualSpend": 500000, "loyaltyYears": 4, "lastPurchase": "2025-04-10"},
]

_PRODUCTS: list[dict[str, Any]] = [
    {"id": "P001", "name": "Basic Plan", "category": "Subscription", "unitPrice": 29.99, "monthlySales": [120, 125, 118, 130, 142, 155]},
    {"id": "P002", "name": "Premium Plan", "category": "Subscription", "unitPrice": 99.99, "monthlySales": [45, 48, 52, 55, 60, 62]},
    {"id": "P003", "name": "Enterprise Solution", "category": "Service", "unitPrice": 599.99, "monthlySales": [12, 15, 14, 18, 20, 22]},
    {"id": "P004", "name": "Data Package", "category": "Add-on", "unitPrice": 49.99, "monthlySales": [67, 70, 65, 72, 80, 85]},
    {"id": "P005", "name": "API Access", "category": "Add-on", "unitPrice": 199.99, "monthlySales": [28, 30, 32, 35, 40, 42]},
    {"id": "P006", "name": "Consulting Hours", "category": "Service", "unitPrice": 150.0, "monthlySales": [50, 45, 48, 52, 55, 60]},
]

_TABLES: dict[SubjectTable, list[dict[str, Any]]] = {
    SubjectTable.SALES: _SALES,
    SubjectTable.CUSTOMERS: _CUSTOMERS,
    SubjectTable.PRODUCTS: _PRODUCTS,
}

SQL_TEMPLATES: dict[SubjectTable, str] = {
    SubjectTable.SALES: (
        "SELECT month, revenue, expenses, profit, region FROM sales "
        "WHERE region IN ('North', 'South') ORDER BY month ASC"
    ),
    SubjectTable.CUSTOMERS: (
        "SELECT name, segment, annualSpend, loyaltyYears FROM customers "
        "ORDER BY annualSpend DESC"
    ),
    SubjectTable.PRODUCTS: (
        "SELECT id, name, category, unitPrice FROM products ORDER BY unitPrice ASC"
    ),
}

NARRATIVES: dict[SubjectTable, str] = {
    SubjectTable.SALES: (
        "Based on our analysis, sales revenue has shown a consistent growth trend over "
        "the first half of the year, with the North region outperforming the South. The "
        "profit margins appear to be improving month-over-month, with June showing the "
        "highest profitability. This suggests that our cost management strategies are "
        "working effectively alongside revenue growth."
    ),
    SubjectTable.CUSTOMERS: (
        "The customer data reveals that Enterprise segment clients generate the highest "
        "annual spend, with Global Industries being our top customer. However, we should "
        "note that SMB clients are growing in number and represent a significant "
        "opportunity for expansion. Customer loyalty appears to correlate positively with "
        "annual spend, suggesting we should focus on retention strategies for high-value "
        "accounts."
    ),
    SubjectTable.PRODUCTS: (
        "Our product analysis indicates that subscription-based offerings generate the "
        "most consistent revenue stream. The Basic Plan has the highest volume of sales, "
        "while the Enterprise Solution, despite lower volume, contributes significantly "
        "to revenue due to its higher price point. Monthly sales trends show growth "
        "across all product categories, with Premium Plan showing the most promising "
        "growth trajectory."
    ),
}


def get_table(table: SubjectTable) -> list[dict[str, Any]]:
    """Return a private copy of a table's rows."""
    return copy.deepcopy(_TABLES[table])


def build_sql(table: SubjectTable) -> str:
    return SQL_TEMPLATES[table]


def build_narrative(table: SubjectTable) -> str:
    return NARRATIVES[table]
