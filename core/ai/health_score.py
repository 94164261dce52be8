"""AI-assisted financial health score with a deterministic local fallback."""

from __future__ import annotations

import logging
import math
from typing import Any, Mapping, Sequence

import pandas as pd

from config import get_app_settings
from core.ai.client import AIServiceError, ClientFactory, extract_json_object, request_completion
from core.formatting import currency_symbol, format_percent_change, round_half_up
from core.health_service import build_health_report
from core.ledger import transaction_bucket
from core.models import AccountSnapshot, DebtItem, HealthReport, HealthScoreAnalysis, MonthData, Targets
from prompts import get_prompt_text, render_prompt

__all__ = [
    "BENCHMARKS",
    "prepare_financial_data",
    "build_health_score_prompt",
    "calculate_ai_health_score",
    "fallback_health_score",
    "rating_for_score",
]

logger = logging.getLogger(__name__)

PROMPT_SYSTEM = "health_score_system"
PROMPT_USER = "health_score"

BENCHMARKS: dict[str, float] = {
    "avg_savings_rate": 20,
    "avg_investment_rate": 5,
    "avg_debt_to_income": 36,
    "recommended_emergency_fund": 6,
    "avg_expense_ratio": 70,
}

_TOTAL_COLUMNS = ["income", "expenses", "savings", "investing", "debt_pay"]
_RATINGS = frozenset({"Poor", "Fair", "Good", "Excellent"})

# Camel-cased keys the model is asked for, mapped onto our payload keys.
_TEXT_FIELDS = {
    "summary": ("summary", ""),
    "insights": ("insights", ""),
    "benchmarkComparison": ("benchmark_comparison", ""),
    "trendAnalysis": ("trend_analysis", ""),
}
_LIST_FIELDS = {
    "strengths": "strengths",
    "weaknesses": "weaknesses",
    "recommendations": "recommendations",
    "personalizedGoals": "personalized_goals",
    "riskFactors": "risk_factors",
    "opportunityAreas": "opportunity_areas",
}


def rating_for_score(score: float) -> str:
    if score >= 80:
        return "Excellent"
    if score >= 60:
        return "Good"
    if score >= 40:
        return "Fair"
    return "Poor"


def _percent(numerator: float, denominator: float) -> int:
    if denominator <= 0:
        return 0
    return int(round_half_up(numerator / denominator * 100))


def _months_frame(months: Mapping[str, MonthData]) -> pd.DataFrame:
    records = [
        {"month": key, **{column: getattr(month.totals, column) for column in _TOTAL_COLUMNS}}
        for key, month in months.items()
    ]
    frame = pd.DataFrame.from_records(records, columns=["month", *_TOTAL_COLUMNS])
    return frame.sort_values("month").reset_index(drop=True)


def _expense_by_category(months: Mapping[str, MonthData]) -> dict[str, float]:
    rows = [
        {"category": tx.category or "Other", "amount": float(tx.amount)}
        for month in months.values()
        for tx in month.tx
        if transaction_bucket(tx.type) == "expenses"
    ]
    if not rows:
        return {}
    frame = pd.DataFrame.from_records(rows)
    totals = frame.groupby("category")["amount"].sum().sort_values(ascending=False)
    return {str(category): float(amount) for category, amount in totals.items()}


def _ratings(savings_rate: int, investment_rate: int, debt_to_income: int, emergency_months: float) -> dict[str, str]:
    return {
        "savings": "above average" if savings_rate >= BENCHMARKS["avg_savings_rate"] else "below average",
        "investing": "above average" if investment_rate >= BENCHMARKS["avg_investment_rate"] else "below average",
        "debt": "healthy" if debt_to_income <= BENCHMARKS["avg_debt_to_income"] else "elevated",
        "emergency_fund": (
            "fully funded" if emergency_months >= BENCHMARKS["recommended_emergency_fund"] else "underfunded"
        ),
    }


def prepare_financial_data(
    months: Mapping[str, MonthData],
    snapshot: AccountSnapshot | None = None,
    debts: Sequence[DebtItem] = (),
    targets: Targets | None = None,
    currency: str = "EUR",
) -> dict[str, Any]:
    """Aggregate every recorded month into the metrics sent to the model.

    Parameters
    ----------
    months:
        Aggregated months keyed by ``"YYYY-MM"``.
    snapshot:
        Current balances; defaults to all zeros.
    debts:
        Debt records; their outstanding totals feed the debt-to-income ratio.
    targets:
        Monthly savings and investing goals.
    currency:
        ISO code used for symbols in the prompt.

    Returns
    -------
    dict
        Totals, per-month averages, rates in percent, month-over-month
        changes of the last two months, expense totals by category,
        benchmarks and ratings against them.
    """

    snapshot = snapshot or AccountSnapshot()
    targets = targets or Targets()
    frame = _months_frame(months)
    data_points = max(len(frame), 1)

    totals = {column: float(frame[column].sum()) for column in _TOTAL_COLUMNS}
    averages = {column: value / data_points for column, value in totals.items()}

    savings_rate = _percent(totals["savings"], totals["income"])
    investment_rate = _percent(totals["investing"], totals["income"])
    expense_ratio = _percent(totals["expenses"], totals["income"])
    total_debt = float(sum(debt.total for debt in debts))
    debt_to_income = _percent(total_debt, averages["income"])
    emergency_months = (
        round_half_up(snapshot.emergency / averages["expenses"], 1) if averages["expenses"] > 0 else 0.0
    )

    changes = {"income": 0.0, "expenses": 0.0, "savings": 0.0}
    if len(frame) >= 2:
        current, previous = frame.iloc[-1], frame.iloc[-2]
        changes = {
            column: format_percent_change(float(current[column]), float(previous[column])) for column in changes
        }

    if changes["income"] > 0 and changes["expenses"] <= changes["income"]:
        current_trend = "improving"
    elif changes["expenses"] > 0 and changes["expenses"] > changes["income"]:
        current_trend = "declining"
    else:
        current_trend = "stable"

    return {
        "currency": currency,
        "months_of_data": len(frame),
        "totals": totals,
        "averages": averages,
        "savings_rate": savings_rate,
        "investment_rate": investment_rate,
        "expense_ratio": expense_ratio,
        "total_debt": total_debt,
        "debt_count": len(debts),
        "debt_to_income": debt_to_income,
        "emergency_fund": snapshot.emergency,
        "emergency_months": emergency_months,
        "current_cash": snapshot.cash,
        "total_balance": snapshot.total_balance,
        "expense_by_category": _expense_by_category(months),
        "changes": changes,
        "current_trend": current_trend,
        "targets": {"savings": targets.savings, "investing": targets.investing},
        "benchmarks": dict(BENCHMARKS),
        "ratings": _ratings(savings_rate, investment_rate, debt_to_income, emergency_months),
    }


def build_health_score_prompt(data: Mapping[str, Any], name: str = "the user") -> str:
    symbol = currency_symbol(str(data.get("currency", "EUR")))
    categories = list(data["expense_by_category"].items())[:5]
    top_expenses = ", ".join(f"{category}: {symbol}{amount:.0f}" for category, amount in categories) or "none recorded"

    return render_prompt(
        PROMPT_USER,
        name=name,
        symbol=symbol,
        avg_income=data["averages"]["income"],
        avg_expenses=data["averages"]["expenses"],
        expense_ratio=f"{data['expense_ratio']}%",
        top_expenses=top_expenses,
        savings_rate=data["savings_rate"],
        investment_rate=data["investment_rate"],
        total_savings=data["totals"]["savings"],
        total_investing=data["totals"]["investing"],
        savings_goal=data["targets"]["savings"],
        investing_goal=data["targets"]["investing"],
        emergency_fund=data["emergency_fund"],
        emergency_months=data["emergency_months"],
        current_cash=data["current_cash"],
        total_debt=data["total_debt"],
        debt_count=data["debt_count"],
        debt_to_income=data["debt_to_income"],
        income_change=data["changes"]["income"],
        expense_change=data["changes"]["expenses"],
        savings_change=data["changes"]["savings"],
        current_trend=data["current_trend"],
    )


def _coerce_score(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        raise AIServiceError("AI reply did not include a numeric score")
    try:
        score = float(value)
    except (TypeError, ValueError) as exc:
        raise AIServiceError(f"AI score is not numeric: {value!r}") from exc
    if not math.isfinite(score):
        raise AIServiceError("AI score is not finite")
    return int(min(100, max(0, round_half_up(score))))


def _coerce_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None and str(item).strip()]


def _parse_analysis(raw: Mapping[str, Any]) -> HealthScoreAnalysis:
    score = _coerce_score(raw.get("score"))
    rating = raw.get("rating")
    if not isinstance(rating, str) or rating not in _RATINGS:
        rating = rating_for_score(score)
    analysis: HealthScoreAnalysis = {
        "score": score,
        "rating": rating,
        "source": "ai",
    }
    for remote_key, (local_key, default) in _TEXT_FIELDS.items():
        value = raw.get(remote_key, raw.get(local_key))
        analysis[local_key] = str(value) if isinstance(value, str) and value.strip() else default  # type: ignore[literal-required]
    for remote_key, local_key in _LIST_FIELDS.items():
        analysis[local_key] = _coerce_list(raw.get(remote_key, raw.get(local_key)))  # type: ignore[literal-required]
    return analysis


def _unique(items: Sequence[str]) -> list[str]:
    seen: list[str] = []
    for item in items:
        if item not in seen:
            seen.append(item)
    return seen


def fallback_health_score(report: HealthReport, data: Mapping[str, Any]) -> HealthScoreAnalysis:
    """Build the analysis from local scorers when the model is unavailable."""

    score = report["money_health"]["score"]
    actions = report["actions"]
    trend = report["trend"]

    strengths = [action["title"] for action in actions if action["priority"] == "green"]
    weaknesses = [action["title"] for action in actions if action["priority"] in ("red", "yellow")]
    recommendations = _unique([tip["actionable"] for tip in report["tips"]])

    cash_flow = data["averages"]["income"] - data["averages"]["expenses"]
    direction = "positive" if cash_flow >= 0 else "negative"
    insights = (
        f"Based on {data['months_of_data']} months of data: you have {direction} cash flow "
        f"with a {data['savings_rate']}% savings rate."
    )

    if trend is None:
        trend_analysis = "Record at least one month in each of the last two quarters to see trends."
    else:
        trend_analysis = (
            f"Health score is {trend['trend']}: {trend['current_score']} over the {trend['current_period'].lower()} "
            f"versus {trend['previous_score']} for the {trend['previous_period'].lower()}."
        )

    ratings = data["ratings"]
    benchmark_comparison = (
        f"Savings rate {data['savings_rate']}% is {ratings['savings']} "
        f"(typical {BENCHMARKS['avg_savings_rate']:.0f}%); debt-to-income {data['debt_to_income']}% "
        f"is {ratings['debt']}; emergency fund is {ratings['emergency_fund']}."
    )

    return {
        "score": score,
        "rating": rating_for_score(score),
        "summary": f"{report['score_label']}. {report['month_health']['explanation']}",
        "strengths": strengths[:3] or ["Consistent spending tracking"],
        "weaknesses": weaknesses[:3],
        "recommendations": recommendations[:5] or ["Continue tracking expenses regularly"],
        "insights": insights,
        "benchmark_comparison": benchmark_comparison,
        "trend_analysis": trend_analysis,
        "personalized_goals": [],
        "risk_factors": [action["title"] for action in actions if action["priority"] == "red"],
        "opportunity_areas": [action["title"] for action in actions if action["priority"] == "yellow"],
        "source": "fallback",
    }


def calculate_ai_health_score(
    months: Mapping[str, MonthData],
    month_key: str,
    snapshot: AccountSnapshot | None = None,
    debts: Sequence[DebtItem] = (),
    targets: Targets | None = None,
    *,
    name: str = "the user",
    currency: str | None = None,
    client_factory: ClientFactory | None = None,
) -> HealthScoreAnalysis:
    """Ask the model for a health analysis, falling back to the local score.

    Never raises for remote failures: missing credentials, API errors,
    timeouts and unusable replies all produce :func:`fallback_health_score`.
    """

    currency = currency or get_app_settings().currency
    data = prepare_financial_data(months, snapshot, debts, targets, currency)

    try:
        reply = request_completion(
            [
                {"role": "system", "content": get_prompt_text(PROMPT_SYSTEM)},
                {"role": "user", "content": build_health_score_prompt(data, name)},
            ],
            client_factory=client_factory,
            temperature=0.7,
        )
        return _parse_analysis(extract_json_object(reply))
    except AIServiceError as exc:
        logger.warning("AI health score unavailable, using local score: %s", exc)

    report = build_health_report(months, month_key, snapshot, debts, targets)
    return fallback_health_score(report, data)
