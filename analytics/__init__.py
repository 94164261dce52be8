"""Scoring, trend, tip and risk analytics shared across Spendio services."""

from analytics.money_health import (
    cashflow_points,
    debt_points,
    discipline_points,
    recommended_actions,
    score_money,
    score_money_for_month,
)
from analytics.month_health import (
    budget_adherence_score,
    debt_management_score,
    expense_control_score,
    income_stability_score,
    savings_rate_score,
    score_month,
)
from analytics.risk import assess_transaction, assess_transaction_for_month
from analytics.tips import generate_tips, render_tips
from analytics.trend import TREND_THRESHOLD, classify_trend, compute_health_trend

__all__ = [
    "cashflow_points",
    "debt_points",
    "discipline_points",
    "recommended_actions",
    "score_money",
    "score_money_for_month",
    "budget_adherence_score",
    "debt_management_score",
    "expense_control_score",
    "income_stability_score",
    "savings_rate_score",
    "score_month",
    "assess_transaction",
    "assess_transaction_for_month",
    "generate_tips",
    "render_tips",
    "TREND_THRESHOLD",
    "classify_trend",
    "compute_health_trend",
]
