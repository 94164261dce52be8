from __future__ import annotations

from analytics.tips import generate_tips, render_tips
from core.models import HealthTrend, MonthHealthBreakdown, Targets


def _health(**scores: int) -> MonthHealthBreakdown:
    base: MonthHealthBreakdown = {
        "income_score": 15,
        "expense_score": 25,
        "savings_score": 15,
        "debt_score": 15,
        "adherence_score": 15,
        "total": 85,
        "explanation": "",
    }
    base.update(scores)  # type: ignore[typeddict-item]
    return base


def _trend(change_points: int, direction: str, income_change: int = 0, debt_change: int = 0) -> HealthTrend:
    def metric(change: int):
        return {"current": 15 + change, "previous": 15, "change": change}

    return {
        "current_score": 70 + change_points,
        "previous_score": 70,
        "change_points": change_points,
        "trend": direction,  # type: ignore[typeddict-item]
        "current_period": "Last 3 months (2024-04 to 2024-06)",
        "previous_period": "3 months prior (2024-01 to 2024-03)",
        "metrics": {
            "income_stability": metric(income_change),
            "expense_control": metric(0),
            "savings_rate": metric(0),
            "debt_management": metric(debt_change),
        },
    }


def test_neutral_health_produces_no_tips():
    assert generate_tips(_health()) == []


def test_tips_follow_metric_order():
    tips = generate_tips(
        _health(income_score=0, expense_score=0, savings_score=0, debt_score=8, adherence_score=5),
        _trend(-10, "declining"),
    )

    assert [tip["category"] for tip in tips] == ["income", "expenses", "savings", "debt", "goals", "goals"]
    assert tips[0]["title"] == "No income recorded"
    assert tips[-1]["title"] == "Health score declined by 10 points"
    assert tips[-1]["priority"] == "high"


def test_expense_tip_boundaries_are_exclusive():
    titles = [generate_tips(_health(expense_score=score))[0]["title"] for score in (0, 8, 10)]

    assert titles == ["Money not being allocated productively", "Poor income allocation", "Low income allocation"]
    assert generate_tips(_health(expense_score=15)) == []


def test_income_decline_tip_needs_trend():
    assert generate_tips(_health()) == []

    tips = generate_tips(_health(), _trend(0, "stable", income_change=-8))

    assert [tip["title"] for tip in tips] == ["Income is declining"]
    assert tips[0]["description"] == "Your income dropped 8 points compared to last quarter."


def test_debt_tips():
    assert generate_tips(_health(debt_score=25))[0]["title"] == "Debt-free! Focus on wealth building"
    assert generate_tips(_health(debt_score=0))[0]["title"] == "High debt burden"

    rising = generate_tips(_health(debt_score=15), _trend(0, "stable", debt_change=-5))
    assert [tip["title"] for tip in rising] == ["Debt payments are increasing"]


def test_positive_tips_are_low_priority():
    tips = generate_tips(_health(savings_score=25, adherence_score=25), _trend(12, "improving"))

    assert [tip["title"] for tip in tips] == [
        "Excellent savings discipline",
        "Consistent with your goals",
        "Health score improved by 12 points",
    ]
    assert {tip["priority"] for tip in tips} == {"low"}


def test_targets_tip_only_when_no_targets_set():
    assert generate_tips(_health(), targets=Targets(savings=200)) == []

    tips = generate_tips(_health(), targets=Targets())

    assert [tip["title"] for tip in tips] == ["No savings targets set"]


def test_generation_is_deterministic():
    health = _health(income_score=5, savings_score=5)

    assert generate_tips(health) == generate_tips(health)


def test_render_tips_flattens_text():
    rendered = render_tips(generate_tips(_health(savings_score=0)))

    assert rendered == [
        "You're not saving anything: Building wealth requires consistent savings. Start small if needed. "
        "Allocate even 5% of income to savings—automate it to make it effortless"
    ]
