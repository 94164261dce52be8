"""Tests for ledger CSV loading and the assembled health report."""

from __future__ import annotations

import pandas as pd
import pytest

from core.data_loader import load_ledger, load_ledger_frame
from core.health_service import build_health_report, prepare_health_report
from core.ledger import InvalidTransactionError, group_by_month
from core.models import AccountSnapshot, DebtItem, Targets


@pytest.fixture()
def sample_ledger_csv(tmp_path) -> str:
    frame = pd.DataFrame(
        [
            {"id": "a1", "type": "Salary", "date": "2024-01-01", "category": "Salary", "amount": 3000},
            {"id": "a2", "type": "expense", "date": "2024-01-05", "category": "Food", "sub_category": "Groceries", "amount": 400},
            {"id": "a3", "type": "expense", "date": "2024-01-06", "category": "Rent", "amount": 1200},
            {"id": "a4", "type": "savings", "date": "2024-01-10", "category": "Savings", "amount": 300},
            {"id": "b1", "type": "salary", "date": "2024-02-01", "category": "Salary", "amount": 3000},
            {"id": "b2", "type": "expense", "date": "2024-02-05", "category": "Rent", "amount": 1200},
            {"id": "b3", "type": "savings", "date": "2024-02-10", "category": "Savings", "amount": 600},
            {"id": "b4", "type": "emergency_fund", "date": "2024-02-11", "category": "Buffer", "amount": 500},
        ]
    )
    csv_path = tmp_path / "ledger.csv"
    frame.to_csv(csv_path, index=False)
    return str(csv_path)


def test_load_ledger_parses_rows(sample_ledger_csv):
    transactions = load_ledger(sample_ledger_csv)

    assert len(transactions) == 8
    assert transactions[0].type == "salary"
    groceries = next(tx for tx in transactions if tx.id == "a2")
    assert groceries.breakdown_key == "Food:Groceries"
    rent = next(tx for tx in transactions if tx.id == "a3")
    assert rent.sub_category is None
    assert rent.description == ""


def test_load_ledger_frame_generates_missing_ids(tmp_path):
    csv_path = tmp_path / "no_ids.csv"
    pd.DataFrame([{"type": "income", "date": "2024-01-01", "category": "Job", "amount": 10}]).to_csv(
        csv_path, index=False
    )

    frame = load_ledger_frame(csv_path)

    assert frame.loc[0, "id"] == "tx-0"


def test_load_ledger_rejects_missing_file_and_columns(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_ledger(tmp_path / "missing.csv")

    csv_path = tmp_path / "partial.csv"
    pd.DataFrame([{"date": "2024-01-01", "amount": 1}]).to_csv(csv_path, index=False)
    with pytest.raises(ValueError, match="category, type"):
        load_ledger_frame(csv_path)


def test_load_ledger_rejects_negative_amounts(tmp_path):
    csv_path = tmp_path / "negative.csv"
    pd.DataFrame([{"type": "expense", "date": "2024-01-01", "category": "Food", "amount": -5}]).to_csv(
        csv_path, index=False
    )

    with pytest.raises(InvalidTransactionError):
        load_ledger(csv_path)


def test_prepare_health_report_defaults_to_latest_month(sample_ledger_csv):
    report = prepare_health_report(sample_ledger_csv, opening=AccountSnapshot(cash=1000))

    assert report["month_key"] == "2024-02"
    assert report["trend"] is None
    assert 0 <= report["money_health"]["score"] <= 100
    assert report["score_label"]
    assert report["month_health"]["adherence_score"] == 8


def test_build_health_report_bundles_every_scorer(sample_transactions):
    months = group_by_month(sample_transactions)
    snapshot = AccountSnapshot(cash=2000, emergency=3000)
    debts = [DebtItem("d1", "loan", "Car", 6000, 200)]

    report = build_health_report(months, "2024-03", snapshot, debts, Targets())

    # 3500 income, 1450 expenses, 300 savings, 150 investing, 200 debt payments.
    money = report["money_health"]
    assert money["components"] == {"cashflow": 40, "discipline": 18, "debt": 25, "trend": 5}
    assert money["score"] == 93
    assert report["score_label"] == "Excellent control"
    assert report["score_color"] == "#22c55e"
    assert any(action["title"] == "Emergency Fund Building" for action in report["actions"])
    assert report["tips"][-1]["title"] == "No savings targets set"


def test_build_health_report_for_unrecorded_month():
    report = build_health_report({}, "2030-01")

    assert report["money_health"]["score"] == 0
    assert report["month_health"]["total"] == 0
    assert report["actions"][0]["title"] == "Get Started with Your Finances"
