"""Assemble the full financial health report for a single month."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Mapping, Sequence

from analytics.money_health import recommended_actions, score_money
from analytics.month_health import score_month
from analytics.tips import generate_tips
from analytics.trend import compute_health_trend
from core.data_loader import load_ledger
from core.formatting import score_color, score_label
from core.ledger import derive_snapshot, group_by_month
from core.models import AccountSnapshot, DebtItem, HealthReport, MonthData, Targets
from core.months import MonthKey

__all__ = ["build_health_report", "prepare_health_report"]

logger = logging.getLogger(__name__)


def build_health_report(
    months: Mapping[str, MonthData],
    month_key: str,
    snapshot: AccountSnapshot | None = None,
    debts: Sequence[DebtItem] = (),
    targets: Targets | None = None,
) -> HealthReport:
    """Run every local scorer for ``month_key`` and bundle the results.

    Parameters
    ----------
    months:
        Aggregated months keyed by ``"YYYY-MM"``. A missing target month is
        scored as an empty month.
    month_key:
        Month to report on.
    snapshot, debts, targets:
        Current balances, debt records and monthly goals of the user.

    Returns
    -------
    HealthReport
        Money health score with label, colour and actions, the month health
        breakdown, the quarter-over-quarter trend and the rule-based tips.
    """

    key = MonthKey.parse(month_key)
    month = months.get(str(key)) or MonthData()
    prev_month = months.get(str(key.shift(-1)))

    money_health = score_money(month, snapshot, debts, prev_month)
    month_health = score_month(month, prev_month)
    trend = compute_health_trend(months, str(key))
    tips = generate_tips(month_health, trend, targets)

    logger.debug("Health report for %s: score=%s", key, money_health["score"])
    return {
        "month_key": str(key),
        "money_health": money_health,
        "score_label": score_label(money_health["score"]),
        "score_color": score_color(money_health["score"]),
        "actions": recommended_actions(money_health, snapshot),
        "month_health": month_health,
        "trend": trend,
        "tips": tips,
    }


def prepare_health_report(
    csv_path: str | Path,
    month_key: str | None = None,
    opening: AccountSnapshot | None = None,
    debts: Sequence[DebtItem] = (),
    targets: Targets | None = None,
) -> HealthReport:
    """Load a ledger CSV and build the report for ``month_key``.

    When ``month_key`` is omitted the latest month present in the ledger is
    used. The account snapshot is derived by replaying the ledger on top of
    ``opening``.
    """

    transactions = load_ledger(csv_path)
    if not transactions:
        raise ValueError("The provided CSV contains no transactions.")

    months = group_by_month(transactions)
    target = month_key or max(months)
    snapshot = derive_snapshot(transactions, opening or AccountSnapshot())
    return build_health_report(months, target, snapshot, debts, targets)
