"""Primary money health score (0-100) for a single month.

This is the ``PrimaryHealthScore`` model: four weighted, piecewise-linear
components (cashflow 40, discipline 25, debt 25, trend 10), an emergency fund
bonus and two guardrail clamps. It overlaps conceptually with the
``TrendMetricScore`` model in :mod:`analytics.month_health` (both look at
savings rate and debt ratio) but uses different tier boundaries and point
scales. The two are kept separate: this one drives the headline score, the
other drives quarter-over-quarter trend comparison.
"""

from __future__ import annotations

from typing import Mapping, Sequence

import numpy as np

from core.formatting import round_half_up
from core.models import (
    AccountSnapshot,
    DebtItem,
    HealthScoreBreakdown,
    MoneyHealthResult,
    MonthData,
    RecommendedAction,
)
from core.months import MonthKey

__all__ = [
    "NO_DATA_EXPLANATION",
    "score_money",
    "score_money_for_month",
    "recommended_actions",
    "cashflow_points",
    "discipline_points",
    "debt_points",
]

NO_DATA_EXPLANATION = "No financial data entered yet"

SNAPSHOT_BASE_SCORE = 30
SNAPSHOT_TIERS = ((10_000, 55), (5_000, 45))
NO_INCOME_RISK_SCORE = 15
NEUTRAL_TREND = 5
NEGATIVE_CASH_CAP = 35
HIGH_DEBT_CAP = 25


def cashflow_points(outflow_ratio: float) -> float:
    """Cashflow stability points (0-40) for an outflow ratio."""

    if outflow_ratio > 1.0:
        return 0.0
    return float(np.interp(outflow_ratio, [0.7, 0.9, 1.0], [40.0, 25.0, 10.0]))


def discipline_points(wealth_rate: float, debt_ratio: float) -> float:
    """Savings and investing discipline points (0-25).

    Heavily indebted months (debt ratio above 35%) get a minimum of 5 points.
    """

    points = float(np.interp(wealth_rate, [0.0, 0.05, 0.1, 0.2], [0.0, 8.0, 15.0, 25.0]))
    if debt_ratio > 0.35 and points < 5:
        points = 5.0
    return float(np.clip(points, 0.0, 25.0))


def debt_points(debt_ratio: float, cash_balance: float, debt_pay: float) -> float:
    """Debt burden points (0-25), less 5 when cash cannot cover this month's payments."""

    if debt_ratio > 0.4:
        points = 0.0
    else:
        points = float(np.interp(debt_ratio, [0.15, 0.3, 0.4], [25.0, 15.0, 5.0]))

    if debt_pay > 0 and cash_balance < debt_pay:
        points = max(0.0, points - 5)
    return float(np.clip(points, 0.0, 25.0))


def _trend_points(
    outflow_ratio: float,
    debt_ratio: float,
    wealth_rate: float,
    prev_month: MonthData | None,
) -> float:
    if prev_month is None:
        return NEUTRAL_TREND

    prev = prev_month.totals
    if prev.income <= 0:
        return NEUTRAL_TREND

    prev_outflow_ratio = (prev.expenses + prev.savings + prev.investing + prev.debt_pay) / prev.income
    prev_debt_ratio = prev.debt_pay / prev.income
    prev_wealth_rate = (prev.savings + prev.investing) / prev.income

    points = NEUTRAL_TREND
    if outflow_ratio < prev_outflow_ratio:
        points += 3
    if debt_ratio < prev_debt_ratio:
        points += 3
    if wealth_rate >= prev_wealth_rate * 0.95:
        points += 4
    return min(10, points)


def _emergency_bonus(emergency_months: float) -> int:
    if emergency_months >= 3:
        return 10
    if emergency_months >= 1:
        return 5
    return 0


def _percent(value: float) -> int:
    return int(round_half_up(value * 100))


def _cashflow_explanation(ratio: float) -> str:
    percent = _percent(ratio)
    if ratio <= 0.7:
        return f"You allocated {percent}% of income. Excellent control."
    if ratio <= 0.9:
        return f"You allocated {percent}% of income. Good but watch closely."
    if ratio <= 1.0:
        return f"You allocated {percent}% of income. Very tight, no margin."
    return f"You allocated {percent}% of income. Overspending detected."


def _wealth_explanation(rate: float) -> str:
    percent = _percent(rate)
    if rate >= 0.2:
        return f"You saved/invested {percent}% of income. Excellent discipline."
    if rate >= 0.1:
        return f"You saved/invested {percent}% of income. Good habit."
    if rate >= 0.05:
        return f"You saved/invested {percent}% of income. Building slowly."
    if rate > 0:
        return f"You saved/invested {percent}% of income. Start increasing."
    return "No savings or investing this month. Consider setting aside funds."


def _debt_explanation(ratio: float) -> str:
    percent = _percent(ratio)
    if ratio == 0:
        return "You have no active debt. Perfect position—focus on building wealth."
    if ratio <= 0.15:
        return f"Debt payments are {percent}% of income. Very manageable and healthy."
    if ratio <= 0.3:
        return f"Debt payments are {percent}% of income. Monitor and consider accelerating payoff."
    if ratio <= 0.4:
        return f"Debt payments are {percent}% of income. Heavy burden—prioritize debt reduction."
    return f"Debt payments are {percent}% of income. Critical level—take immediate action."


def _trend_explanation(month: MonthData, prev_month: MonthData | None) -> str:
    if prev_month is None:
        return "Add more months of data to see trends."

    prev_income = prev_month.totals.income
    income = month.totals.income
    if income > prev_income:
        return "Income trending up. Good momentum."
    if income < prev_income * 0.9:
        return "Income declining. Watch expenses carefully."
    return "Income stable. Consistent month-to-month."


def _zero_score() -> MoneyHealthResult:
    return {
        "score": 0,
        "components": {"cashflow": 0, "discipline": 0, "debt": 0, "trend": 0},
        "breakdown": {
            "cashflow_ratio": 0,
            "cashflow_explanation": NO_DATA_EXPLANATION,
            "wealth_rate": 0,
            "wealth_explanation": "Add your income and expenses to get started",
            "debt_ratio": 0,
            "debt_explanation": "No debt information",
            "trend_explanation": "Add monthly data to see trends",
            "emergency_fund_months": 0,
        },
    }


def _no_income_risk_score() -> MoneyHealthResult:
    return {
        "score": NO_INCOME_RISK_SCORE,
        "components": {"cashflow": 0, "discipline": 0, "debt": 0, "trend": 0},
        "breakdown": {
            "cashflow_ratio": 999,
            "cashflow_explanation": "No income recorded",
            "wealth_rate": 0,
            "wealth_explanation": "Cannot save without income",
            "debt_ratio": 999,
            "debt_explanation": "No income to pay debt",
            "trend_explanation": "Insufficient data",
            "emergency_fund_months": 0,
        },
    }


def _snapshot_score(snapshot: AccountSnapshot) -> MoneyHealthResult:
    # Balance tiers are absolute amounts in whatever currency the user records in.
    total_balance = snapshot.total_balance
    score = SNAPSHOT_BASE_SCORE
    for threshold, tier_score in SNAPSHOT_TIERS:
        if total_balance >= threshold:
            score = tier_score
            break

    return {
        "score": score,
        "components": {"cashflow": 0, "discipline": 0, "debt": 0, "trend": 0},
        "breakdown": {
            "cashflow_ratio": 0,
            "cashflow_explanation": "Add income to get started",
            "wealth_rate": 0,
            "wealth_explanation": "Good balances, but no income tracked",
            "debt_ratio": 0,
            "debt_explanation": "No income data",
            "trend_explanation": "Need monthly income to analyze trends",
            "emergency_fund_months": 0,
        },
    }


def score_money(
    month: MonthData,
    snapshot: AccountSnapshot | None = None,
    debts: Sequence[DebtItem] = (),
    prev_month: MonthData | None = None,
) -> MoneyHealthResult:
    """Compute the primary 0-100 money health score for one month.

    Parameters
    ----------
    month:
        Aggregated data for the month being scored.
    snapshot:
        Current account balances; an empty snapshot is assumed when missing.
    debts:
        Debt records. Their summed ``monthly`` obligations act as a floor for
        the month's debt payments even before a payment is logged.
    prev_month:
        The preceding calendar month, used only for the trend component.

    Returns
    -------
    MoneyHealthResult
        Final score, rounded component points and explanation breakdown.
    """

    totals = month.totals
    if totals.activity == 0:
        return _zero_score()

    snapshot = snapshot or AccountSnapshot()
    income = totals.income
    expenses = totals.expenses
    savings = totals.savings
    investing = totals.investing
    debt_pay = max(totals.debt_pay, sum(debt.monthly for debt in debts))

    if income <= 0:
        if expenses > 0 or debts or debt_pay > 0:
            return _no_income_risk_score()
        return _snapshot_score(snapshot)

    outflow_ratio = (expenses + savings + investing + debt_pay) / income
    wealth_rate = (savings + investing) / income
    debt_ratio = debt_pay / income

    cashflow = cashflow_points(outflow_ratio)
    discipline = discipline_points(wealth_rate, debt_ratio)
    debt = debt_points(debt_ratio, snapshot.cash, debt_pay)
    trend = _trend_points(outflow_ratio, debt_ratio, wealth_rate, prev_month)

    emergency_months = snapshot.emergency / (expenses if expenses > 0 else 1)
    raw_score = cashflow + discipline + debt + trend + _emergency_bonus(emergency_months)

    remaining_cash = income - expenses - savings - investing - debt_pay
    if remaining_cash < 0:
        raw_score = min(raw_score, NEGATIVE_CASH_CAP)
    if debt_ratio > 0.5:
        raw_score = min(raw_score, HIGH_DEBT_CAP)

    breakdown: HealthScoreBreakdown = {
        "cashflow_ratio": round_half_up(outflow_ratio, 2),
        "cashflow_explanation": _cashflow_explanation(outflow_ratio),
        "wealth_rate": _percent(wealth_rate),
        "wealth_explanation": _wealth_explanation(wealth_rate),
        "debt_ratio": _percent(debt_ratio),
        "debt_explanation": _debt_explanation(debt_ratio),
        "trend_explanation": _trend_explanation(month, prev_month),
        "emergency_fund_months": round_half_up(emergency_months, 1),
    }

    return {
        "score": int(np.clip(round_half_up(raw_score), 0, 100)),
        "components": {
            "cashflow": int(round_half_up(cashflow)),
            "discipline": int(round_half_up(discipline)),
            "debt": int(round_half_up(debt)),
            "trend": int(round_half_up(trend)),
        },
        "breakdown": breakdown,
    }


def score_money_for_month(
    months: Mapping[str, MonthData],
    month_key: str,
    snapshot: AccountSnapshot | None = None,
    debts: Sequence[DebtItem] = (),
) -> MoneyHealthResult:
    """Score ``month_key`` from a months map, using the preceding calendar month for trend."""

    key = MonthKey.parse(month_key)
    month = months.get(str(key))
    if month is None:
        return _zero_score()
    prev_month = months.get(str(key.shift(-1)))
    return score_money(month, snapshot, debts, prev_month)


def recommended_actions(
    result: MoneyHealthResult,
    snapshot: AccountSnapshot | None = None,
) -> list[RecommendedAction]:
    """Turn a money health result into red/yellow/green action items."""

    breakdown = result["breakdown"]
    if breakdown["cashflow_explanation"] == NO_DATA_EXPLANATION:
        return [
            {
                "priority": "red",
                "title": "Get Started with Your Finances",
                "description": (
                    "Add your current account balances and enter your monthly income and "
                    "expenses to get personalized insights."
                ),
            }
        ]

    snapshot = snapshot or AccountSnapshot()
    cashflow_ratio = breakdown["cashflow_ratio"]
    debt_pct = breakdown["debt_ratio"]
    wealth_pct = breakdown["wealth_rate"]
    actions: list[RecommendedAction] = []

    if cashflow_ratio > 1.0:
        actions.append(
            {
                "priority": "red",
                "title": "Overspending Alert",
                "description": "You're spending more than you earn. Immediately reduce expenses or increase income.",
            }
        )
    if debt_pct > 40:
        actions.append(
            {
                "priority": "red",
                "title": "High Debt Burden",
                "description": "Debt payments exceed 40% of income. Focus on paying down debt or increasing income.",
            }
        )
    if debt_pct > 20 and snapshot.cash < debt_pct * 100:
        actions.append(
            {
                "priority": "red",
                "title": "Low Cash Reserve",
                "description": "Your cash balance is low relative to debt payments. Build an emergency buffer.",
            }
        )
    if snapshot.emergency == 0 and cashflow_ratio > 0.8:
        actions.append(
            {
                "priority": "red",
                "title": "No Emergency Fund",
                "description": "You have no emergency cushion. Start building one, even a small amount each month helps.",
            }
        )

    if 0.9 < cashflow_ratio <= 1.0:
        actions.append(
            {
                "priority": "yellow",
                "title": "Tight Cashflow",
                "description": "You have very little margin. Small unexpected costs could cause problems.",
            }
        )
    if 25 < debt_pct <= 40:
        actions.append(
            {
                "priority": "yellow",
                "title": "Moderate Debt",
                "description": "Your debt payments are significant. Consider accelerating payoff or refinancing.",
            }
        )
    if 0 < wealth_pct < 5:
        actions.append(
            {
                "priority": "yellow",
                "title": "Low Savings Rate",
                "description": "You're saving less than 5%. Try to increase to 10%+ for financial security.",
            }
        )

    if 0 < cashflow_ratio < 0.85:
        actions.append(
            {
                "priority": "green",
                "title": "Healthy Cashflow",
                "description": "Good spending control. Keep maintaining this balance.",
            }
        )
    if debt_pct < 20:
        actions.append(
            {
                "priority": "green",
                "title": "Manageable Debt",
                "description": "Debt is under control. You have room in your budget for savings.",
            }
        )
    if wealth_pct >= 10:
        actions.append(
            {
                "priority": "green",
                "title": "Strong Savings Discipline",
                "description": "Excellent job saving 10%+. Keep building wealth.",
            }
        )
    if breakdown["emergency_fund_months"] >= 1:
        actions.append(
            {
                "priority": "green",
                "title": "Emergency Fund Building",
                "description": (
                    f"You have {breakdown['emergency_fund_months']} months of expenses saved. "
                    "Continue building."
                ),
            }
        )

    return actions
