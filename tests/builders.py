"""Small constructors for test months."""

from __future__ import annotations

from core.models import MonthData, MonthTotals


def month_of(
    income: float = 0.0,
    expenses: float = 0.0,
    savings: float = 0.0,
    investing: float = 0.0,
    debt_pay: float = 0.0,
) -> MonthData:
    return MonthData(totals=MonthTotals(income, expenses, savings, investing, debt_pay))
