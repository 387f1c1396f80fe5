"""Three-way trend labels from before/after sub-window means."""

from collections.abc import Sequence

from app.schemas.analytics import DailyBucket, OptimizationRecord, ScoreTrend, TokenTrend

SCORE_TREND_WINDOW = 3
SCORE_TREND_THRESHOLD = 0.05

TOKEN_TREND_WINDOW = 5
TOKEN_TREND_RATIO = 0.1


def classify_score_trend(daily_stats: Sequence[DailyBucket]) -> ScoreTrend:
    """Compare the last three daily average scores against the first three.

    Each window sum is divided by the window size even when fewer buckets exist.
    """
    if len(daily_stats) < 2:
        return "stable"

    recent = daily_stats[-SCORE_TREND_WINDOW:]
    earlier = daily_stats[:SCORE_TREND_WINDOW]
    recent_avg = sum(day.avg_score for day in recent) / SCORE_TREND_WINDOW
    earlier_avg = sum(day.avg_score for day in earlier) / SCORE_TREND_WINDOW

    if recent_avg > earlier_avg + SCORE_TREND_THRESHOLD:
        return "improving"
    if recent_avg < earlier_avg - SCORE_TREND_THRESHOLD:
        return "declining"
    return "stable"


def classify_token_trend(optimizations: Sequence[OptimizationRecord]) -> TokenTrend:
    """Compare mean tokens of the last five optimizations against the first five.

    The two windows overlap when there are fewer than ten records.
    """
    if len(optimizations) < TOKEN_TREND_WINDOW:
        return "stable"

    recent = optimizations[-TOKEN_TREND_WINDOW:]
    earlier = optimizations[:TOKEN_TREND_WINDOW]
    recent_avg = sum(o.tokens_used or 0 for o in recent) / len(recent)
    earlier_avg = sum(o.tokens_used or 0 for o in earlier) / len(earlier)

    if recent_avg > earlier_avg * (1 + TOKEN_TREND_RATIO):
        return "increasing"
    if recent_avg < earlier_avg * (1 - TOKEN_TREND_RATIO):
        return "decreasing"
    return "stable"
