"""AI-focused helpers for Spendio."""

from .advisor import ask_advisor, assess_transaction_narrative, build_financial_context, generate_ai_tips
from .client import AIServiceError, request_completion
from .health_score import (
    BENCHMARKS,
    build_health_score_prompt,
    calculate_ai_health_score,
    fallback_health_score,
    prepare_financial_data,
    rating_for_score,
)

__all__ = [
    "AIServiceError",
    "request_completion",
    "BENCHMARKS",
    "build_health_score_prompt",
    "calculate_ai_health_score",
    "fallback_health_score",
    "prepare_financial_data",
    "rating_for_score",
    "ask_advisor",
    "assess_transaction_narrative",
    "build_financial_context",
    "generate_ai_tips",
]
