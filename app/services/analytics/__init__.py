"""Per-user prompt analytics: retrieval, aggregation, trends and insights."""

from app.services.analytics.aggregator import summarize
from app.services.analytics.insights import generate_insights
from app.services.analytics.repository import AnalyticsRepository, AnalyticsSnapshot, window_days
from app.services.analytics.trends import classify_score_trend, classify_token_trend

__all__ = [
    "AnalyticsRepository",
    "AnalyticsSnapshot",
    "classify_score_trend",
    "classify_token_trend",
    "generate_insights",
    "summarize",
    "window_days",
]
