"""Formatting helpers for Spendio summaries."""

from __future__ import annotations

import math
from typing import Final

__all__ = [
    "CURRENCY_SYMBOLS",
    "currency_symbol",
    "format_currency",
    "format_percent_change",
    "round_half_up",
    "score_color",
    "score_label",
]

CURRENCY_SYMBOLS: Final[dict[str, str]] = {
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "JPY": "¥",
    "CNY": "¥",
    "INR": "₹",
    "AUD": "A$",
    "CAD": "C$",
    "CHF": "CHF",
    "SEK": "kr",
    "NZD": "NZ$",
    "MXN": "$",
    "SGD": "S$",
    "HKD": "HK$",
    "NOK": "kr",
    "KRW": "₩",
    "TRY": "₺",
    "RUB": "₽",
    "BRL": "R$",
    "ZAR": "R",
    "GEL": "₾",
    "DKK": "kr",
    "THB": "฿",
}


def currency_symbol(currency: str) -> str:
    """Return the display symbol for an ISO currency code, or the code itself."""

    return CURRENCY_SYMBOLS.get(currency.upper(), currency) if currency else ""


def format_currency(value: float, currency: str = "EUR") -> str:
    """Render a whole-unit amount with thousands separators, e.g. ``€1,250``.

    Amounts are displayed as recorded; no exchange-rate conversion happens.
    """

    rounded = int(round_half_up(value))
    return f"{currency_symbol(currency)}{rounded:,}"


def format_percent_change(current: float, previous: float) -> float:
    """Return the percentage change rounded to one decimal, 0.0 when undefined."""

    if previous <= 0:
        return 0.0
    return round_half_up((current - previous) / previous * 100, 1)


def score_label(score: float) -> str:
    if score >= 85:
        return "Excellent control"
    if score >= 70:
        return "Healthy & stable"
    if score >= 50:
        return "Needs attention"
    if score >= 30:
        return "Financial stress"
    return "High risk"


def score_color(score: float) -> str:
    if score >= 75:
        return "#22c55e"
    if score >= 55:
        return "#f97316"
    return "#ef4444"


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round halves upwards, e.g. ``0.125 -> 0.13`` at two digits."""

    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor
