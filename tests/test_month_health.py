from __future__ import annotations

import pytest

from analytics.month_health import (
    NO_MONTH_DATA_EXPLANATION,
    budget_adherence_score,
    debt_management_score,
    expense_control_score,
    income_stability_score,
    savings_rate_score,
    score_month,
)
from core.models import MonthData
from builders import month_of


def test_empty_month_scores_zero():
    result = score_month(MonthData())

    assert result["total"] == 0
    assert result["explanation"] == NO_MONTH_DATA_EXPLANATION


@pytest.mark.parametrize(
    ("income", "prev_income", "expected"),
    [
        (0, 1000, 0),
        (1000, None, 15),
        (1000, 0, 15),
        (1000, 1000, 25),
        (1050, 1000, 25),
        (1100, 1000, 20),
        (800, 1000, 15),
        (700, 1000, 10),
        (600, 1000, 5),
    ],
)
def test_income_stability_tiers(income, prev_income, expected):
    assert income_stability_score(income, prev_income) == expected


@pytest.mark.parametrize(
    ("allocated", "expected"),
    [(1000, 25), (600, 25), (550, 20), (450, 15), (300, 8), (299, 0), (1001, 0)],
)
def test_expense_control_rewards_active_allocation(allocated, expected):
    assert expense_control_score(1000, allocated) == expected


def test_expense_control_without_income():
    assert expense_control_score(0, 500) == 0


@pytest.mark.parametrize(
    ("wealth", "expected"),
    [(250, 25), (200, 23), (150, 20), (100, 15), (50, 10), (1, 5), (0, 0)],
)
def test_savings_rate_tiers(wealth, expected):
    assert savings_rate_score(1000, wealth) == expected


@pytest.mark.parametrize(
    ("income", "debt_pay", "expected"),
    [
        (1000, 0, 25),
        (1000, 100, 24),
        (1000, 200, 20),
        (1000, 350, 15),
        (1000, 500, 8),
        (1000, 501, 0),
        (0, 0, 20),
        (0, 100, 0),
    ],
)
def test_debt_management_tiers(income, debt_pay, expected):
    assert debt_management_score(income, debt_pay) == expected


@pytest.mark.parametrize(
    ("savings", "prev_savings", "expected"),
    [(0, 500, 5), (300, None, 15), (300, 0, 15), (500, 500, 25), (400, 500, 20), (300, 500, 15), (100, 500, 8)],
)
def test_budget_adherence_tiers(savings, prev_savings, expected):
    assert budget_adherence_score(savings, prev_savings) == expected


def test_score_month_sums_five_metrics_without_clamp():
    prev = month_of(income=4000, expenses=2500, savings=1000)
    month = month_of(income=4000, expenses=2500, savings=1000)

    result = score_month(month, prev)

    assert result["income_score"] == 25
    assert result["expense_score"] == 25
    assert result["savings_score"] == 25
    assert result["debt_score"] == 25
    assert result["adherence_score"] == 25
    assert result["total"] == 125


def test_month_explanation_prose():
    result = score_month(month_of(income=2000, expenses=1000, savings=400, debt_pay=100))

    assert result["explanation"] == (
        "This month: Good allocation - you're actively managing 75% of income. "
        "Strong savings rate. Minimal debt."
    )


def test_month_explanation_for_idle_income():
    result = score_month(month_of(income=1000, expenses=200))

    assert result["explanation"].startswith("This month: CRITICAL allocation - only 20% of income is allocated")
    assert result["explanation"].endswith("No debt payments.")


def test_month_without_income_explains_itself():
    result = score_month(month_of(expenses=100))

    assert result["explanation"] == "No income recorded this month."
    assert result["debt_score"] == 20
    assert result["adherence_score"] == 5
