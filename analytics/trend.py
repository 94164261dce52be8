"""Quarter-over-quarter health trend built on the month health breakdown."""

from __future__ import annotations

from typing import Mapping, Sequence

from analytics.month_health import score_month
from core.formatting import round_half_up
from core.models import HealthTrend, MetricChange, MonthData, MonthHealthBreakdown, TrendDirection
from core.months import MonthKey, rolling_window

__all__ = ["TREND_THRESHOLD", "compute_health_trend", "classify_trend"]

TREND_THRESHOLD = 5


def classify_trend(change_points: int) -> TrendDirection:
    if change_points > TREND_THRESHOLD:
        return "improving"
    if change_points < -TREND_THRESHOLD:
        return "declining"
    return "stable"


def _window_scores(months: Mapping[str, MonthData], window: Sequence[MonthKey]) -> list[MonthHealthBreakdown]:
    """Score the months of a window that exist and hold data; gaps are skipped."""

    scores: list[MonthHealthBreakdown] = []
    for key in window:
        month = months.get(str(key))
        if month is None or month.totals.is_empty:
            continue
        scores.append(score_month(month))
    return scores


def _average(scores: Sequence[MonthHealthBreakdown], field: str) -> float:
    return sum(score[field] for score in scores) / len(scores)


def _metric_change(
    current: Sequence[MonthHealthBreakdown],
    previous: Sequence[MonthHealthBreakdown],
    field: str,
) -> MetricChange:
    current_avg = int(round_half_up(_average(current, field)))
    previous_avg = int(round_half_up(_average(previous, field)))
    return {"current": current_avg, "previous": previous_avg, "change": current_avg - previous_avg}


def compute_health_trend(months: Mapping[str, MonthData], month_key: str) -> HealthTrend | None:
    """Compare the three months ending at ``month_key`` with the three before them.

    Parameters
    ----------
    months:
        Aggregated months keyed by ``"YYYY-MM"``.
    month_key:
        Last month of the current window.

    Returns
    -------
    HealthTrend | None
        Averaged month health totals for both windows with the signed change
        and a per-metric breakdown, or ``None`` when either window has no
        month with recorded activity.
    """

    end = MonthKey.parse(month_key)
    current_window = rolling_window(end, 3)
    previous_window = rolling_window(end, 3, offset=3)

    current_scores = _window_scores(months, current_window)
    previous_scores = _window_scores(months, previous_window)
    if not current_scores or not previous_scores:
        return None

    current_avg = _average(current_scores, "total")
    previous_avg = _average(previous_scores, "total")
    change_points = int(round_half_up(current_avg - previous_avg))

    return {
        "current_score": int(round_half_up(current_avg)),
        "previous_score": int(round_half_up(previous_avg)),
        "change_points": change_points,
        "trend": classify_trend(change_points),
        "current_period": f"Last 3 months ({current_window[0]} to {current_window[-1]})",
        "previous_period": f"3 months prior ({previous_window[0]} to {previous_window[-1]})",
        "metrics": {
            "income_stability": _metric_change(current_scores, previous_scores, "income_score"),
            "expense_control": _metric_change(current_scores, previous_scores, "expense_score"),
            "savings_rate": _metric_change(current_scores, previous_scores, "savings_score"),
            "debt_management": _metric_change(current_scores, previous_scores, "debt_score"),
        },
    }
