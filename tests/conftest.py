"""Shared fixtures for the Spendio test suite."""

from __future__ import annotations

import sys
from datetime import date
from pathlib import Path

import pytest
import streamlit as st

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import get_app_settings, get_settings
from core.models import Transaction


@pytest.fixture(autouse=True)
def clear_streamlit_secrets(monkeypatch):
    """Provide an empty secrets mapping so tests don't rely on Streamlit runtime."""

    monkeypatch.setattr(st, "secrets", {}, raising=False)
    for name in ("OPENAI_API_KEY", "OPENAI_BASE_URL", "OPENAI_MODEL", "OPENAI_TIMEOUT_SECONDS", "SPENDIO_CURRENCY"):
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    get_app_settings.cache_clear()
    yield
    get_settings.cache_clear()
    get_app_settings.cache_clear()


@pytest.fixture()
def sample_transactions() -> list[Transaction]:
    return [
        Transaction("t1", "salary", date(2024, 3, 1), "Salary", 3000.0),
        Transaction("t2", "expense", date(2024, 3, 3), "Food", 250.0, sub_category="Groceries"),
        Transaction("t3", "expense", date(2024, 3, 5), "Rent", 1200.0),
        Transaction("t4", "savings", date(2024, 3, 10), "Savings", 300.0),
        Transaction("t5", "investing", date(2024, 3, 12), "ETF", 150.0),
        Transaction("t6", "debt_payment", date(2024, 3, 15), "Loan", 200.0),
        Transaction("t7", "freelance", date(2024, 3, 20), "Design", 500.0, sub_category="Logo"),
        Transaction("t8", "emergency_fund", date(2024, 3, 21), "Emergency", 100.0),
        Transaction("t9", "salary", date(2024, 4, 1), "Salary", 3000.0),
        Transaction("t10", "expense", date(2024, 4, 2), "Food", 300.0, sub_category="Groceries"),
    ]
