"""Five-metric month health breakdown used for trend comparison.

This is the ``TrendMetricScore`` model. Each metric is worth up to 25 points
on fixed step tiers. It deliberately does not share weighting with
:mod:`analytics.money_health`: savings rate and debt ratio are scored again
here on different boundaries, and the unweighted total is not clamped.
"""

from __future__ import annotations

from core.formatting import round_half_up
from core.models import MonthData, MonthHealthBreakdown

__all__ = [
    "NO_MONTH_DATA_EXPLANATION",
    "score_month",
    "income_stability_score",
    "expense_control_score",
    "savings_rate_score",
    "debt_management_score",
    "budget_adherence_score",
]

NO_MONTH_DATA_EXPLANATION = "No financial data recorded this month"


def income_stability_score(income: float, prev_income: float | None) -> int:
    if income <= 0:
        return 0
    if not prev_income or prev_income <= 0:
        return 15

    stability = income / prev_income
    if 0.95 <= stability <= 1.05:
        return 25
    if 0.9 <= stability <= 1.1:
        return 20
    if 0.8 <= stability <= 1.2:
        return 15
    if stability >= 0.7:
        return 10
    return 5


def expense_control_score(income: float, allocated: float) -> int:
    """Score how much of income is actively directed to a tracked bucket."""

    if income <= 0:
        return 0

    allocation_ratio = allocated / income
    if 0.6 <= allocation_ratio <= 1.0:
        return 25
    if 0.5 <= allocation_ratio < 0.6:
        return 20
    if 0.4 <= allocation_ratio < 0.5:
        return 15
    if 0.3 <= allocation_ratio < 0.4:
        return 8
    return 0


def savings_rate_score(income: float, wealth_building: float) -> int:
    if income <= 0:
        return 0

    rate = wealth_building / income
    if rate >= 0.25:
        return 25
    if rate >= 0.2:
        return 23
    if rate >= 0.15:
        return 20
    if rate >= 0.1:
        return 15
    if rate >= 0.05:
        return 10
    if rate > 0:
        return 5
    return 0


def debt_management_score(income: float, debt_pay: float) -> int:
    if income <= 0:
        # No income and no payments is neutral rather than full credit.
        return 20 if debt_pay == 0 else 0

    ratio = debt_pay / income
    if ratio == 0:
        return 25
    if ratio <= 0.1:
        return 24
    if ratio <= 0.2:
        return 20
    if ratio <= 0.35:
        return 15
    if ratio <= 0.5:
        return 8
    return 0


def budget_adherence_score(savings: float, prev_savings: float | None) -> int:
    """Score month-over-month consistency of the savings habit."""

    if savings <= 0:
        return 5
    if not prev_savings or prev_savings <= 0:
        return 15

    consistency = savings / prev_savings
    if 0.9 <= consistency <= 1.1:
        return 25
    if 0.8 <= consistency <= 1.2:
        return 20
    if 0.6 <= consistency <= 1.4:
        return 15
    return 8


def _month_explanation(income: float, expenses: float, savings: float, investing: float, debt_pay: float) -> str:
    if income == 0:
        return "No income recorded this month."

    allocation_ratio = (expenses + savings + investing + debt_pay) / income
    allocated_pct = int(round_half_up(allocation_ratio * 100))
    unallocated_pct = int(round_half_up((1 - allocation_ratio) * 100))
    savings_rate = (savings + investing) / income
    debt_ratio = debt_pay / income

    parts = ["This month:"]
    if allocation_ratio > 1:
        parts.append(f"You allocated {allocated_pct}% of income (overspending - more than you earned).")
    elif allocation_ratio >= 0.6:
        parts.append(f"Good allocation - you're actively managing {allocated_pct}% of income.")
    elif allocation_ratio >= 0.4:
        parts.append(
            f"Moderate allocation - only {allocated_pct}% of income is allocated, "
            f"{unallocated_pct}% is unaccounted for."
        )
    elif allocation_ratio >= 0.3:
        parts.append(
            f"Poor allocation - only {allocated_pct}% of income is allocated, "
            f"{unallocated_pct}% is sitting idle."
        )
    else:
        parts.append(
            f"CRITICAL allocation - only {allocated_pct}% of income is allocated, "
            f"{unallocated_pct}% is unaccounted for."
        )

    if savings_rate >= 0.15:
        parts.append("Strong savings rate.")
    elif savings_rate >= 0.05:
        parts.append("Building wealth gradually.")
    elif savings_rate == 0:
        parts.append("No savings or investing—money isn't working for you.")
    else:
        parts.append("Low savings.")

    if debt_ratio > 0.35:
        parts.append("High debt burden.")
    elif debt_ratio > 0.1:
        parts.append("Manageable debt.")
    elif debt_ratio > 0:
        parts.append("Minimal debt.")
    else:
        parts.append("No debt payments.")

    return " ".join(parts)


def score_month(month: MonthData, prev_month: MonthData | None = None) -> MonthHealthBreakdown:
    """Score a month on income stability, expense control, savings rate, debt and adherence."""

    t = month.totals
    if t.activity == 0:
        return {
            "income_score": 0,
            "expense_score": 0,
            "savings_score": 0,
            "debt_score": 0,
            "adherence_score": 0,
            "total": 0,
            "explanation": NO_MONTH_DATA_EXPLANATION,
        }

    prev_income = prev_month.totals.income if prev_month is not None else None
    prev_savings = prev_month.totals.savings if prev_month is not None else None

    income_score = income_stability_score(t.income, prev_income)
    expense_score = expense_control_score(t.income, t.expenses + t.savings + t.investing + t.debt_pay)
    savings_score = savings_rate_score(t.income, t.savings + t.investing)
    debt_score = debt_management_score(t.income, t.debt_pay)
    adherence_score = budget_adherence_score(t.savings, prev_savings)

    return {
        "income_score": income_score,
        "expense_score": expense_score,
        "savings_score": savings_score,
        "debt_score": debt_score,
        "adherence_score": adherence_score,
        "total": income_score + expense_score + savings_score + debt_score + adherence_score,
        "explanation": _month_explanation(t.income, t.expenses, t.savings, t.investing, t.debt_pay),
    }
