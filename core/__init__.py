"""Core domain package for the Spendio health engine.

Only the dependency-free building blocks are re-exported here; the report
service (``core.health_service``) and the AI helpers (``core.ai``) build on
``analytics`` and are imported from their own modules.
"""

from .formatting import currency_symbol, format_currency, round_half_up, score_color, score_label
from .ledger import (
    InvalidTransactionError,
    aggregate,
    apply_loan_payment,
    build_month,
    derive_snapshot,
    edit_transaction,
    group_by_month,
    remove_transaction,
    transaction_bucket,
    validate_amount,
    validate_transaction,
)
from .models import (
    AccountSnapshot,
    DebtItem,
    HealthReport,
    MoneyHealthResult,
    MonthData,
    MonthHealthBreakdown,
    MonthTotals,
    Targets,
    Transaction,
)
from .months import MonthKey, month_key_for, rolling_window

__all__ = [
    "AccountSnapshot",
    "DebtItem",
    "HealthReport",
    "MoneyHealthResult",
    "MonthData",
    "MonthHealthBreakdown",
    "MonthTotals",
    "Targets",
    "Transaction",
    "InvalidTransactionError",
    "aggregate",
    "apply_loan_payment",
    "build_month",
    "derive_snapshot",
    "edit_transaction",
    "group_by_month",
    "remove_transaction",
    "transaction_bucket",
    "validate_amount",
    "validate_transaction",
    "MonthKey",
    "month_key_for",
    "rolling_window",
    "currency_symbol",
    "format_currency",
    "round_half_up",
    "score_color",
    "score_label",
]
