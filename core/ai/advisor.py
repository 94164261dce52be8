"""AI-narrated tips, transaction checks and advisor chat."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from analytics.risk import assess_transaction_for_month
from analytics.tips import render_tips
from config import get_app_settings
from core.ai.client import AIServiceError, ClientFactory, format_payload, normalise_bullets, request_completion
from core.health_service import build_health_report
from core.models import AccountSnapshot, DebtItem, HealthReport, MonthData, Targets, TransactionAssessment
from core.months import MonthKey
from prompts import get_prompt_text

__all__ = [
    "build_financial_context",
    "generate_ai_tips",
    "assess_transaction_narrative",
    "ask_advisor",
]

logger = logging.getLogger(__name__)

PROMPT_RECOMMEND = "recommend"
PROMPT_ASSESS = "assess_transaction"
PROMPT_ADVISOR = "advisor"
ADVISOR_FALLBACK = (
    "The advisor is unavailable right now. Your health score, actions and tips above are computed locally "
    "and are still up to date."
)


def build_financial_context(
    months: Mapping[str, MonthData],
    month_key: str,
    report: HealthReport,
    snapshot: AccountSnapshot | None = None,
    debts: Sequence[DebtItem] = (),
    currency: str = "EUR",
) -> dict[str, Any]:
    """Collect the month figures and local findings shared with the model."""

    key = str(MonthKey.parse(month_key))
    month = months.get(key) or MonthData()
    snapshot = snapshot or AccountSnapshot()
    totals = month.totals

    return {
        "month": key,
        "currency": currency,
        "totals": {
            "income": totals.income,
            "expenses": totals.expenses,
            "savings": totals.savings,
            "investing": totals.investing,
            "debt_payments": totals.debt_pay,
        },
        "top_expenses": dict(sorted(month.expense_breakdown.items(), key=lambda item: item[1], reverse=True)[:5]),
        "balances": {
            "cash": snapshot.cash,
            "emergency": snapshot.emergency,
            "savings": snapshot.savings,
            "investing": snapshot.investing,
            "total": snapshot.total_balance,
        },
        "debts": [{"name": debt.name, "total": debt.total, "monthly": debt.monthly} for debt in debts],
        "health_score": report["money_health"]["score"],
        "health_label": report["score_label"],
        "breakdown": report["money_health"]["breakdown"],
        "month_health": report["month_health"],
        "trend": report["trend"],
        "actions": report["actions"],
        "tips": [tip["title"] for tip in report["tips"]],
    }


def generate_ai_tips(
    months: Mapping[str, MonthData],
    month_key: str,
    snapshot: AccountSnapshot | None = None,
    debts: Sequence[DebtItem] = (),
    targets: Targets | None = None,
    *,
    currency: str | None = None,
    client_factory: ClientFactory | None = None,
) -> list[str]:
    """Return model-written recommendation bullets, or the local tips rendered as text."""

    report = build_health_report(months, month_key, snapshot, debts, targets)
    context = build_financial_context(
        months, month_key, report, snapshot, debts, currency or get_app_settings().currency
    )
    user_message = (
        f"Recommend next steps for {context['month']}.\n\n"
        "Data (JSON):\n"
        f"{format_payload(context)}"
    )

    try:
        reply = request_completion(
            [
                {"role": "system", "content": get_prompt_text(PROMPT_RECOMMEND)},
                {"role": "user", "content": user_message},
            ],
            client_factory=client_factory,
            max_tokens=400,
        )
    except AIServiceError as exc:
        logger.warning("AI tips unavailable, using local tips: %s", exc)
        return render_tips(report["tips"])

    bullets = normalise_bullets(reply)
    return bullets or render_tips(report["tips"])


def assess_transaction_narrative(
    months: Mapping[str, MonthData],
    month_key: str,
    transaction_type: str,
    amount: float,
    category: str | None = None,
    *,
    currency: str | None = None,
    client_factory: ClientFactory | None = None,
) -> tuple[TransactionAssessment, str]:
    """Run the local risk check and ask the model to narrate it.

    The local assessment is always returned unchanged; the narrative falls
    back to its message when the model cannot be reached.
    """

    currency = currency or get_app_settings().currency
    assessment = assess_transaction_for_month(months, month_key, transaction_type, amount, category, currency)
    month = months.get(str(MonthKey.parse(month_key))) or MonthData()
    payload = {
        "pending_transaction": {
            "type": transaction_type,
            "amount": amount,
            "category": category,
            "currency": currency,
        },
        "month_totals": {
            "income": month.totals.income,
            "expenses": month.totals.expenses,
            "savings": month.totals.savings,
            "investing": month.totals.investing,
            "debt_payments": month.totals.debt_pay,
        },
        "verdict": assessment,
    }

    try:
        reply = request_completion(
            [
                {"role": "system", "content": get_prompt_text(PROMPT_ASSESS)},
                {"role": "user", "content": format_payload(payload)},
            ],
            client_factory=client_factory,
            max_tokens=200,
        )
    except AIServiceError as exc:
        logger.warning("AI transaction narrative unavailable: %s", exc)
        return assessment, assessment["message"]

    return assessment, " ".join(normalise_bullets(reply))


def ask_advisor(
    question: str,
    months: Mapping[str, MonthData],
    month_key: str,
    snapshot: AccountSnapshot | None = None,
    debts: Sequence[DebtItem] = (),
    targets: Targets | None = None,
    history: Sequence[Mapping[str, str]] = (),
    *,
    currency: str | None = None,
    client_factory: ClientFactory | None = None,
) -> str:
    """Answer a free-form question about the user's finances."""

    report = build_health_report(months, month_key, snapshot, debts, targets)
    context = build_financial_context(
        months, month_key, report, snapshot, debts, currency or get_app_settings().currency
    )
    messages = [
        {"role": "system", "content": get_prompt_text(PROMPT_ADVISOR)},
        {"role": "system", "content": f"Financial context (JSON):\n{format_payload(context)}"},
        *({"role": turn["role"], "content": turn["content"]} for turn in history[-10:]),
        {"role": "user", "content": question},
    ]

    try:
        return request_completion(messages, client_factory=client_factory, temperature=0.5).strip()
    except AIServiceError as exc:
        logger.warning("AI advisor unavailable: %s", exc)
        return ADVISOR_FALLBACK
