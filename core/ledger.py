"""Ledger aggregation and balance replay for Spendio months."""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import replace
from typing import Iterable, Literal, Sequence

import pandas as pd

from core.models import AccountSnapshot, DebtItem, MonthData, MonthTotals, Transaction
from core.months import month_key_for

__all__ = [
    "INCOME_TYPES",
    "InvalidTransactionError",
    "transaction_bucket",
    "validate_amount",
    "validate_transaction",
    "aggregate",
    "build_month",
    "group_by_month",
    "edit_transaction",
    "remove_transaction",
    "derive_snapshot",
    "apply_loan_payment",
]

logger = logging.getLogger(__name__)

INCOME_TYPES = frozenset({"income", "salary", "business", "freelance", "investments", "side_hustle"})

_SINGLE_BUCKETS = {
    "expense": "expenses",
    "savings": "savings",
    "investing": "investing",
    "debt_payment": "debt_pay",
}

# Signed effect of each transaction type on the snapshot balances.
_SNAPSHOT_EFFECTS: dict[str, tuple[str, int]] = {
    "expense": ("cash", -1),
    "debt_payment": ("cash", -1),
    "savings": ("savings", 1),
    "investing": ("investing", 1),
    "emergency_fund": ("emergency", 1),
    "cash_adjustment": ("cash", 1),
}

_RECORD_COLUMNS = ["bucket", "key", "amount"]


class InvalidTransactionError(ValueError):
    """Raised when a transaction amount cannot be aggregated safely."""


def transaction_bucket(tx_type: str) -> str | None:
    """Return the totals bucket for a transaction type, or ``None`` if it has none."""

    normalized = (tx_type or "").strip().lower()
    if normalized in INCOME_TYPES:
        return "income"
    return _SINGLE_BUCKETS.get(normalized)


def validate_amount(value: object, label: str = "Amount") -> float:
    """Return ``value`` as a float, rejecting negative or non-finite values."""

    try:
        amount = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidTransactionError(f"{label} is not numeric") from exc
    if not math.isfinite(amount):
        raise InvalidTransactionError(f"{label} is not finite")
    if amount < 0:
        raise InvalidTransactionError(f"{label} is negative")
    return amount


def validate_transaction(tx: Transaction) -> float:
    """Return the transaction amount as a float, rejecting negative or non-finite values."""

    return validate_amount(tx.amount, f"Amount of transaction {tx.id!r}")


def _build_records(transactions: Iterable[Transaction]) -> pd.DataFrame:
    records = [
        {
            "bucket": transaction_bucket(tx.type),
            "key": tx.breakdown_key,
            "amount": validate_transaction(tx),
        }
        for tx in transactions
    ]
    return pd.DataFrame.from_records(records, columns=_RECORD_COLUMNS)


def _breakdown(frame: pd.DataFrame, bucket: str) -> dict[str, float]:
    subset = frame[frame["bucket"] == bucket]
    if subset.empty:
        return {}
    grouped = subset.groupby("key", sort=True)["amount"].agg(math.fsum)
    return {str(key): float(value) for key, value in grouped.items()}


def aggregate(
    transactions: Iterable[Transaction],
) -> tuple[MonthTotals, dict[str, float], dict[str, float]]:
    """Sum a month's transactions into totals and income/expense breakdowns.

    Parameters
    ----------
    transactions:
        Transactions recorded for a single month, in any order.

    Returns
    -------
    tuple[MonthTotals, dict[str, float], dict[str, float]]
        Bucket totals, income breakdown and expense breakdown. Breakdown keys
        are ``category`` or ``category:sub_category``. Sums are exact so the
        result does not depend on input order.
    """

    frame = _build_records(transactions)
    if frame.empty:
        return MonthTotals(), {}, {}

    bucket_totals = frame.dropna(subset=["bucket"]).groupby("bucket")["amount"].agg(math.fsum)
    totals = MonthTotals(
        income=float(bucket_totals.get("income", 0.0)),
        expenses=float(bucket_totals.get("expenses", 0.0)),
        savings=float(bucket_totals.get("savings", 0.0)),
        investing=float(bucket_totals.get("investing", 0.0)),
        debt_pay=float(bucket_totals.get("debt_pay", 0.0)),
    )
    return totals, _breakdown(frame, "income"), _breakdown(frame, "expenses")


def build_month(transactions: Iterable[Transaction]) -> MonthData:
    """Rebuild a :class:`MonthData` from scratch for the given transactions."""

    tx = tuple(transactions)
    totals, income_breakdown, expense_breakdown = aggregate(tx)
    return MonthData(
        totals=totals,
        tx=tx,
        income_breakdown=income_breakdown,
        expense_breakdown=expense_breakdown,
    )


def group_by_month(transactions: Iterable[Transaction]) -> dict[str, MonthData]:
    """Split a ledger into months keyed by ``"YYYY-MM"``, oldest first."""

    grouped: dict[str, list[Transaction]] = defaultdict(list)
    for tx in transactions:
        grouped[month_key_for(tx.date)].append(tx)
    return {key: build_month(grouped[key]) for key in sorted(grouped)}


def edit_transaction(
    transactions: Sequence[Transaction],
    tx_id: str,
    amount: float,
    description: str | None = None,
) -> list[Transaction]:
    """Return a new ledger with the amount and description of ``tx_id`` replaced.

    ``description=None`` keeps the current description; an empty string falls
    back to the sub-category.
    """

    updated: list[Transaction] = []
    found = False
    for tx in transactions:
        if tx.id == tx_id:
            found = True
            new_description = tx.description
            if description is not None:
                new_description = description or tx.sub_category or tx.description
            edited = replace(tx, amount=amount, description=new_description)
            validate_transaction(edited)
            logger.debug("Edited transaction %s: %s -> %s", tx_id, tx.amount, amount)
            updated.append(edited)
        else:
            updated.append(tx)
    if not found:
        raise KeyError(tx_id)
    return updated


def remove_transaction(transactions: Sequence[Transaction], tx_id: str) -> list[Transaction]:
    """Return a new ledger without ``tx_id``."""

    remaining = [tx for tx in transactions if tx.id != tx_id]
    if len(remaining) == len(transactions):
        raise KeyError(tx_id)
    logger.debug("Removed transaction %s", tx_id)
    return remaining


def derive_snapshot(
    transactions: Iterable[Transaction],
    opening: AccountSnapshot | None = None,
) -> AccountSnapshot:
    """Replay the ledger on top of an opening balance to get current balances.

    Income-type transactions add to cash, expenses and debt payments draw from
    cash, and savings, investing and emergency fund deposits grow their own
    balances. Because balances are always recomputed from the full list, edits
    and deletions never need compensating deltas.
    """

    base = opening or AccountSnapshot()
    balances = {
        "cash": base.cash,
        "emergency": base.emergency,
        "savings": base.savings,
        "investing": base.investing,
    }
    for tx in transactions:
        amount = validate_transaction(tx)
        tx_type = (tx.type or "").strip().lower()
        if tx_type in INCOME_TYPES:
            balances["cash"] += amount
            continue
        effect = _SNAPSHOT_EFFECTS.get(tx_type)
        if effect is None:
            continue
        field_name, sign = effect
        balances[field_name] += sign * amount

    return AccountSnapshot(debt=base.debt, **balances)


def apply_loan_payment(
    debts: Sequence[DebtItem],
    debt_id: str,
    amount: float,
    mode: Literal["full", "monthly"] = "monthly",
    monthly_amount: float = 0.0,
) -> list[DebtItem]:
    """Apply a loan payment to the matching debt record.

    ``mode="full"`` pays down the outstanding ``total`` (never below zero);
    ``mode="monthly"`` records the installment as the debt's new ``monthly``
    obligation, replacing rather than adding to the previous value.
    """

    updated: list[DebtItem] = []
    matched = False
    for debt in debts:
        if debt.id != debt_id:
            updated.append(debt)
            continue
        matched = True
        if mode == "full":
            updated.append(replace(debt, total=max(0.0, debt.total - amount)))
        else:
            updated.append(replace(debt, monthly=monthly_amount if monthly_amount > 0 else amount))

    if not matched:
        logger.warning("Loan payment for unknown debt %s ignored", debt_id)
    return updated
