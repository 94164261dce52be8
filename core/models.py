"""Shared data model definitions for the Spendio health engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal, Mapping, TypedDict

TransactionType = Literal[
    "income",
    "salary",
    "business",
    "freelance",
    "investments",
    "side_hustle",
    "expense",
    "savings",
    "investing",
    "debt_payment",
    "emergency_fund",
    "cash_adjustment",
]

RiskLevel = Literal["green", "yellow", "red"]
TipPriority = Literal["high", "medium", "low"]
TipCategory = Literal["income", "expenses", "savings", "debt", "goals"]
TrendDirection = Literal["improving", "declining", "stable"]
ActionPriority = Literal["red", "yellow", "green"]


@dataclass(frozen=True, slots=True)
class Transaction:
    id: str
    type: str
    date: date
    category: str
    amount: float
    description: str = ""
    sub_category: str | None = None

    @property
    def breakdown_key(self) -> str:
        if self.sub_category:
            return f"{self.category}:{self.sub_category}"
        return self.category


@dataclass(frozen=True, slots=True)
class MonthTotals:
    income: float = 0.0
    expenses: float = 0.0
    savings: float = 0.0
    investing: float = 0.0
    debt_pay: float = 0.0

    @property
    def activity(self) -> float:
        return self.income + self.expenses + self.savings + self.investing + self.debt_pay

    @property
    def is_empty(self) -> bool:
        return (
            self.income <= 0
            and self.expenses <= 0
            and self.savings <= 0
            and self.investing <= 0
            and self.debt_pay <= 0
        )


@dataclass(frozen=True, slots=True)
class MonthData:
    """Aggregated view of one calendar month of the ledger."""

    totals: MonthTotals = field(default_factory=MonthTotals)
    tx: tuple[Transaction, ...] = ()
    income_breakdown: Mapping[str, float] = field(default_factory=dict)
    expense_breakdown: Mapping[str, float] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class AccountSnapshot:
    cash: float = 0.0
    emergency: float = 0.0
    savings: float = 0.0
    investing: float = 0.0
    debt: float = 0.0

    @property
    def total_balance(self) -> float:
        return self.cash + self.savings + self.investing + self.emergency


@dataclass(frozen=True, slots=True)
class DebtItem:
    id: str
    type: str
    name: str
    total: float = 0.0
    monthly: float = 0.0


@dataclass(frozen=True, slots=True)
class Targets:
    savings: float = 0.0
    investing: float = 0.0


class HealthComponents(TypedDict):
    cashflow: int
    discipline: int
    debt: int
    trend: int


class HealthScoreBreakdown(TypedDict):
    cashflow_ratio: float
    cashflow_explanation: str
    wealth_rate: int
    wealth_explanation: str
    debt_ratio: int
    debt_explanation: str
    trend_explanation: str
    emergency_fund_months: float


class MoneyHealthResult(TypedDict):
    score: int
    components: HealthComponents
    breakdown: HealthScoreBreakdown


class RecommendedAction(TypedDict):
    priority: ActionPriority
    title: str
    description: str


class MonthHealthBreakdown(TypedDict):
    income_score: int
    expense_score: int
    savings_score: int
    debt_score: int
    adherence_score: int
    total: int
    explanation: str


class MetricChange(TypedDict):
    current: int
    previous: int
    change: int


class TrendMetrics(TypedDict):
    income_stability: MetricChange
    expense_control: MetricChange
    savings_rate: MetricChange
    debt_management: MetricChange


class HealthTrend(TypedDict):
    current_score: int
    previous_score: int
    change_points: int
    trend: TrendDirection
    current_period: str
    previous_period: str
    metrics: TrendMetrics


class HealthTip(TypedDict):
    category: TipCategory
    priority: TipPriority
    title: str
    description: str
    actionable: str


class TransactionAssessment(TypedDict):
    risk_level: RiskLevel
    title: str
    message: str
    recommendation: str
    should_warn: bool


class HealthScoreAnalysis(TypedDict, total=False):
    score: int
    rating: str
    summary: str
    strengths: list[str]
    weaknesses: list[str]
    recommendations: list[str]
    insights: str
    benchmark_comparison: str
    trend_analysis: str
    personalized_goals: list[str]
    risk_factors: list[str]
    opportunity_areas: list[str]
    source: Literal["ai", "fallback"]


class HealthReport(TypedDict):
    month_key: str
    money_health: MoneyHealthResult
    score_label: str
    score_color: str
    actions: list[RecommendedAction]
    month_health: MonthHealthBreakdown
    trend: HealthTrend | None
    tips: list[HealthTip]


__all__ = [
    "TransactionType",
    "RiskLevel",
    "TipPriority",
    "TipCategory",
    "TrendDirection",
    "ActionPriority",
    "Transaction",
    "MonthTotals",
    "MonthData",
    "AccountSnapshot",
    "DebtItem",
    "Targets",
    "HealthComponents",
    "HealthScoreBreakdown",
    "MoneyHealthResult",
    "RecommendedAction",
    "MonthHealthBreakdown",
    "MetricChange",
    "TrendMetrics",
    "HealthTrend",
    "HealthTip",
    "TransactionAssessment",
    "HealthScoreAnalysis",
    "HealthReport",
]
