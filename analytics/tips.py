"""Rule-based financial tips derived from month health and trend results."""

from __future__ import annotations

from core.models import HealthTip, HealthTrend, MonthHealthBreakdown, Targets

__all__ = ["generate_tips", "render_tips"]


def _income_tip(health: MonthHealthBreakdown, trend: HealthTrend | None) -> HealthTip | None:
    if health["income_score"] == 0:
        return {
            "category": "income",
            "priority": "high",
            "title": "No income recorded",
            "description": "Start by tracking your monthly income to get personalized financial insights.",
            "actionable": "Go to Financial Data → add your income sources",
        }
    if health["income_score"] < 10:
        return {
            "category": "income",
            "priority": "high",
            "title": "Income is unstable",
            "description": "Your income varies significantly month-to-month. This makes budgeting difficult.",
            "actionable": "Build an emergency fund to cover 3-6 months of expenses",
        }
    if trend is not None and trend["metrics"]["income_stability"]["change"] < -5:
        drop = abs(trend["metrics"]["income_stability"]["change"])
        return {
            "category": "income",
            "priority": "medium",
            "title": "Income is declining",
            "description": f"Your income dropped {drop} points compared to last quarter.",
            "actionable": "Review income sources and consider side income if needed",
        }
    return None


def _expense_tip(health: MonthHealthBreakdown) -> HealthTip | None:
    score = health["expense_score"]
    if score == 0:
        return {
            "category": "expenses",
            "priority": "high",
            "title": "Money not being allocated productively",
            "description": (
                "Less than 30% of income is being used (expenses + savings + debt). "
                "Most money is just sitting idle."
            ),
            "actionable": (
                "Create a budget: allocate 60-100% of income to expenses (50-70%), "
                "savings (10-20%), or debt (0-30%)"
            ),
        }
    if score < 10:
        return {
            "category": "expenses",
            "priority": "high",
            "title": "Poor income allocation",
            "description": (
                "Only 30-40% of income is allocated. The rest is unaccounted for—"
                "this isn't 'saving', it's neglect."
            ),
            "actionable": "Build a spending plan: allocate every unit of income to either expenses, savings, or investing",
        }
    if score < 15:
        return {
            "category": "expenses",
            "priority": "medium",
            "title": "Low income allocation",
            "description": "Only 40-50% of income is being managed. Increase allocation to 60%+ for better control.",
            "actionable": "Increase either expenses, savings, or debt payments to fully utilize your income",
        }
    return None


def _savings_tip(health: MonthHealthBreakdown) -> HealthTip | None:
    score = health["savings_score"]
    if score == 0:
        return {
            "category": "savings",
            "priority": "high",
            "title": "You're not saving anything",
            "description": "Building wealth requires consistent savings. Start small if needed.",
            "actionable": "Allocate even 5% of income to savings—automate it to make it effortless",
        }
    if score < 10:
        return {
            "category": "savings",
            "priority": "medium",
            "title": "Low savings rate",
            "description": "You're saving less than 5% of income. Aim for 10-20%.",
            "actionable": "Review expenses and find 100-200/month to redirect to savings",
        }
    if score >= 20:
        return {
            "category": "savings",
            "priority": "low",
            "title": "Excellent savings discipline",
            "description": "You're saving 20%+ of income. Keep up this momentum!",
            "actionable": "Consider diversifying: spread savings across emergency fund, investments, and goals",
        }
    return None


def _debt_tip(health: MonthHealthBreakdown, trend: HealthTrend | None) -> HealthTip | None:
    score = health["debt_score"]
    if score == 25:
        return {
            "category": "debt",
            "priority": "low",
            "title": "Debt-free! Focus on wealth building",
            "description": "With no debt payments, you can fully focus on saving and investing.",
            "actionable": "Increase your savings rate to 15%+ or invest in long-term goals",
        }
    if score < 10:
        return {
            "category": "debt",
            "priority": "high",
            "title": "High debt burden",
            "description": "Debt payments exceed 35% of income. This limits your financial flexibility.",
            "actionable": (
                "Create a debt payoff plan: pay off smallest balance first OR highest interest rate first"
            ),
        }
    if score < 20 and trend is not None and trend["metrics"]["debt_management"]["change"] < 0:
        return {
            "category": "debt",
            "priority": "medium",
            "title": "Debt payments are increasing",
            "description": "Your debt burden score declined. Avoid taking on new debt.",
            "actionable": "Redirect extra income toward debt payoff",
        }
    return None


def _adherence_tip(health: MonthHealthBreakdown) -> HealthTip | None:
    score = health["adherence_score"]
    if score < 10:
        return {
            "category": "goals",
            "priority": "medium",
            "title": "Inconsistent savings pattern",
            "description": "Your savings amounts vary significantly—make it a fixed habit.",
            "actionable": "Set up automatic transfers for the same day each month",
        }
    if score >= 20:
        return {
            "category": "goals",
            "priority": "low",
            "title": "Consistent with your goals",
            "description": "You're maintaining steady progress on your savings targets.",
            "actionable": "Consider increasing targets as your income grows",
        }
    return None


def _trend_tip(trend: HealthTrend | None) -> HealthTip | None:
    if trend is None:
        return None
    if trend["trend"] == "improving":
        return {
            "category": "goals",
            "priority": "low",
            "title": f"Health score improved by {trend['change_points']} points",
            "description": "Your financial health is trending positively. Maintain this trajectory!",
            "actionable": "Review what's working (lower expenses? higher income?) and double down on it",
        }
    if trend["trend"] == "declining":
        return {
            "category": "goals",
            "priority": "high",
            "title": f"Health score declined by {abs(trend['change_points'])} points",
            "description": "Your financial situation has worsened over the last 3 months.",
            "actionable": "Review the metrics that dropped most and address them immediately",
        }
    return None


def _targets_tip(targets: Targets | None) -> HealthTip | None:
    if targets is None or targets.savings != 0 or targets.investing != 0:
        return None
    return {
        "category": "goals",
        "priority": "low",
        "title": "No savings targets set",
        "description": "Targets turn good intentions into a monthly plan you can track.",
        "actionable": "Set savings and investing targets in the Wealth section",
    }


def generate_tips(
    health: MonthHealthBreakdown,
    trend: HealthTrend | None = None,
    targets: Targets | None = None,
) -> list[HealthTip]:
    """Return tips in fixed order: income, expenses, savings, debt, adherence, trend, targets.

    At most one tip fires per metric; the output is fully determined by the
    inputs.
    """

    candidates = (
        _income_tip(health, trend),
        _expense_tip(health),
        _savings_tip(health),
        _debt_tip(health, trend),
        _adherence_tip(health),
        _trend_tip(trend),
        _targets_tip(targets),
    )
    return [tip for tip in candidates if tip is not None]


def render_tips(tips: list[HealthTip]) -> list[str]:
    """Flatten tips into display bullets, e.g. for the AI fallback path."""

    return [f"{tip['title']}: {tip['description']} {tip['actionable']}" for tip in tips]
