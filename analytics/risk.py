"""Real-time risk check for a single transaction before it is recorded."""

from __future__ import annotations

from typing import Mapping

from core.formatting import format_currency, round_half_up
from core.ledger import validate_amount
from core.models import MonthData, MonthTotals, TransactionAssessment
from core.months import MonthKey

__all__ = ["assess_transaction", "assess_transaction_for_month"]


def _pct(ratio: float) -> int:
    return int(round_half_up(ratio * 100))


def _result(risk_level: str, title: str, message: str, recommendation: str) -> TransactionAssessment:
    return {
        "risk_level": risk_level,  # type: ignore[typeddict-item]
        "title": title,
        "message": message,
        "recommendation": recommendation,
        "should_warn": risk_level != "green",
    }


def _without_income(transaction_type: str, amount: str) -> TransactionAssessment | None:
    if transaction_type == "expense":
        return _result(
            "red",
            "No income recorded",
            "You haven't recorded any income this month. Adding expenses without income will drain your savings.",
            "Record your income first, then add expenses.",
        )
    if transaction_type == "debt_payment":
        return _result(
            "red",
            "No income recorded",
            "Paying debt without recorded income could strain your finances.",
            "Record your income first.",
        )
    if transaction_type == "savings":
        return _result(
            "yellow",
            "No income recorded",
            f"You're saving {amount} with no income recorded this month.",
            "Make sure essential expenses are covered before moving money into savings.",
        )
    if transaction_type == "investing":
        return _result(
            "green",
            "Solid investment",
            f"Investing {amount} will help build long-term wealth.",
            "Record this month's income to see how this fits your budget.",
        )
    return None


def _assess_expense(totals: MonthTotals, amount: float, currency: str, label: str) -> TransactionAssessment:
    income = totals.income
    total_would_be = totals.expenses + amount
    expense_ratio = total_would_be / income

    if amount > income * 0.5:
        return _result(
            "red",
            "Very large expense",
            f"This {label} is {_pct(amount / income)}% of your monthly income "
            f"({format_currency(income, currency)}).",
            "Is this a necessary purchase? Consider waiting or finding a cheaper alternative.",
        )
    if expense_ratio > 1:
        return _result(
            "red",
            "Will exceed monthly income",
            f"Adding {format_currency(amount, currency)} will bring total expenses to "
            f"{format_currency(total_would_be, currency)}, which exceeds income of "
            f"{format_currency(income, currency)}.",
            "This will result in deficit spending. Reduce expenses or increase income.",
        )
    if expense_ratio > 0.8:
        return _result(
            "yellow",
            "High expense ratio",
            f"With this expense, you'll spend {_pct(expense_ratio)}% of income, leaving only "
            f"{_pct(1 - expense_ratio)}% for savings/debt.",
            "You'll have very little left to save. Consider postponing this purchase.",
        )
    return _result(
        "green",
        "Purchase looks reasonable",
        f"This {label} is sustainable. You'll still have funds for savings/debt.",
        "Go ahead with this purchase.",
    )


def _assess_savings(totals: MonthTotals, amount: float, currency: str) -> TransactionAssessment:
    income = totals.income
    savings_ratio = (totals.savings + amount) / income

    if amount > income * 0.5:
        return _result(
            "yellow",
            "Large savings deposit",
            f"You're saving {format_currency(amount, currency)}, which is {_pct(amount / income)}% of income.",
            "That's aggressive saving! Make sure you have enough for essential expenses.",
        )
    if savings_ratio > 0.5:
        return _result(
            "yellow",
            "Very high savings rate",
            f"You'll be saving {_pct(savings_ratio)}% of income. Ensure you cover all expenses first.",
            "Good habit, but don't over-save at the expense of essential spending.",
        )
    return _result(
        "green",
        "Good savings move",
        f"Saving {format_currency(amount, currency)} is a smart choice for building wealth.",
        "Continue this habit!",
    )


def _assess_investing(totals: MonthTotals, amount: float, currency: str) -> TransactionAssessment:
    income = totals.income
    if amount > income * 0.3:
        return _result(
            "yellow",
            "Large investment amount",
            f"You're investing {format_currency(amount, currency)}, which is {_pct(amount / income)}% of income.",
            "Good for growth, but ensure you have an emergency fund (3-6 months expenses).",
        )
    return _result(
        "green",
        "Solid investment",
        f"Investing {format_currency(amount, currency)} will help build long-term wealth.",
        "Great decision!",
    )


def _assess_debt_payment(totals: MonthTotals, amount: float, currency: str) -> TransactionAssessment:
    income = totals.income
    debt_ratio = (totals.debt_pay + amount) / income

    if amount > income * 0.5:
        return _result(
            "red",
            "Very large debt payment",
            f"This {format_currency(amount, currency)} payment is {_pct(amount / income)}% of your monthly income.",
            "Verify you can afford this and still cover essential expenses.",
        )
    if debt_ratio > 0.5:
        return _result(
            "red",
            "Debt payments exceed 50% of income",
            f"Your total debt payments would be {_pct(debt_ratio)}% of income—this is unsustainable.",
            "Consider negotiating lower payment amounts with creditors.",
        )
    if debt_ratio > 0.3:
        return _result(
            "yellow",
            "High debt payment ratio",
            f"Debt payments will be {_pct(debt_ratio)}% of income. Monitor your budget carefully.",
            "You're managing debt, but watch for over-commitment.",
        )
    return _result(
        "green",
        "Good debt payment",
        f"Paying {format_currency(amount, currency)} towards debt is manageable and reduces your liability.",
        "Keep up the debt payoff plan!",
    )


def assess_transaction(
    month: MonthData,
    transaction_type: str,
    amount: float,
    category: str | None = None,
    currency: str = "EUR",
) -> TransactionAssessment:
    """Assess whether adding a transaction to ``month`` is wise.

    Only the month's running totals are consulted. Anything other than an
    expense, savings, investing or debt payment gets a neutral green result.
    Negative or non-finite amounts raise :class:`~core.ledger.InvalidTransactionError`.
    """

    amount = validate_amount(amount)
    totals = month.totals
    tx_type = (transaction_type or "").strip().lower()

    if totals.income <= 0:
        flagged = _without_income(tx_type, format_currency(amount, currency))
        if flagged is not None:
            return flagged
    elif tx_type == "expense":
        label = f"{format_currency(amount, currency)} expense"
        if category:
            label = f"{format_currency(amount, currency)} {category} expense"
        return _assess_expense(totals, amount, currency, label)
    elif tx_type == "savings":
        return _assess_savings(totals, amount, currency)
    elif tx_type == "investing":
        return _assess_investing(totals, amount, currency)
    elif tx_type == "debt_payment":
        return _assess_debt_payment(totals, amount, currency)

    return _result("green", "Transaction ready", "This transaction is ready to add.", "Proceed.")


def assess_transaction_for_month(
    months: Mapping[str, MonthData],
    month_key: str,
    transaction_type: str,
    amount: float,
    category: str | None = None,
    currency: str = "EUR",
) -> TransactionAssessment:
    """Assess against ``month_key`` from a months map; a missing month counts as empty."""

    month = months.get(str(MonthKey.parse(month_key))) or MonthData()
    return assess_transaction(month, transaction_type, amount, category, currency)
