"""Data loading utilities for Spendio's ledger pipeline."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Final

import pandas as pd

from core.ledger import validate_transaction
from core.models import Transaction

__all__ = ["LEDGER_COLUMNS", "load_ledger", "load_ledger_frame", "frame_to_transactions"]


_CACHE_SIZE: Final[int] = 8

LEDGER_COLUMNS: Final[tuple[str, ...]] = (
    "id",
    "type",
    "date",
    "category",
    "sub_category",
    "amount",
    "description",
)
_REQUIRED_COLUMNS: Final[frozenset[str]] = frozenset({"type", "date", "category", "amount"})


def load_ledger_frame(csv_path: str | Path) -> pd.DataFrame:
    """Return a cleaned ledger dataframe for the given CSV path.

    Missing optional columns are added, ids are generated from the row
    position when absent, and type names are lower-cased.
    """

    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")

    df = pd.read_csv(path, parse_dates=["date"])
    missing = _REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Ledger CSV is missing columns: {', '.join(sorted(missing))}")

    if "id" not in df.columns:
        df["id"] = [f"tx-{index}" for index in range(len(df))]
    for column in ("sub_category", "description"):
        if column not in df.columns:
            df[column] = None

    df = df.dropna(subset=["date"]).copy()
    df["id"] = df["id"].astype(str)
    df["type"] = df["type"].astype(str).str.strip().str.lower()
    df["category"] = df["category"].fillna("uncategorized").astype(str)
    df["amount"] = pd.to_numeric(df["amount"], errors="coerce")
    df["description"] = df["description"].fillna("").astype(str)
    return df[list(LEDGER_COLUMNS)].sort_values("date", kind="stable").reset_index(drop=True)


def frame_to_transactions(df: pd.DataFrame) -> tuple[Transaction, ...]:
    """Convert ledger rows into validated :class:`Transaction` values."""

    transactions: list[Transaction] = []
    for row in df.to_dict(orient="records"):
        sub_category = row.get("sub_category")
        if sub_category is None or pd.isna(sub_category) or not str(sub_category).strip():
            sub_category = None
        tx = Transaction(
            id=str(row["id"]),
            type=str(row["type"]),
            date=pd.Timestamp(row["date"]).date(),
            category=str(row["category"]),
            amount=float(row["amount"]),
            description=str(row.get("description") or ""),
            sub_category=str(sub_category) if sub_category is not None else None,
        )
        validate_transaction(tx)
        transactions.append(tx)
    return tuple(transactions)


@lru_cache(maxsize=_CACHE_SIZE)
def load_ledger(csv_path: str | Path) -> tuple[Transaction, ...]:
    """Return the validated transactions stored in ``csv_path``.

    Results are cached so rebuilding reports for the same file during a
    session does not re-read it from disk.
    """

    return frame_to_transactions(load_ledger_frame(csv_path))
