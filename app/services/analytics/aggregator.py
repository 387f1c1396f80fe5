"""Per-user analytics summary computed from already-fetched records.

Pure functions only: no database or network access happens here. The summary
is recomputed from scratch on every call; ``now`` fixes the day boundaries.
"""

from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta

from app.schemas.analytics import (
    ActivityItem,
    AnalyticsSummary,
    ChatSessionRecord,
    DailyBucket,
    Engagement,
    GroupStats,
    OptimizationRecord,
    Overview,
    Performance,
    PromptRecord,
    ScoreDistribution,
    TokenAnalytics,
    Usage,
)
from app.services.analytics.insights import generate_insights
from app.services.analytics.rounding import round_half_up
from app.services.analytics.trends import classify_score_trend, classify_token_trend

DAILY_WINDOW = 7
RECENT_ACTIVITY_LIMIT = 10

# (label, lower bound inclusive), checked from the top
SCORE_BUCKETS = [
    ("excellent", 0.8),
    ("good", 0.6),
    ("average", 0.4),
    ("poor", 0.0),
]


def _score(prompt: PromptRecord) -> float:
    return prompt.score or 0


def _score_bucket(score: float) -> str:
    for label, lower in SCORE_BUCKETS:
        if score >= lower:
            return label
    return "poor"


def _score_distribution(prompts: Sequence[PromptRecord]) -> ScoreDistribution:
    counts = {label: 0 for label, _ in SCORE_BUCKETS}
    for prompt in prompts:
        counts[_score_bucket(_score(prompt))] += 1
    return ScoreDistribution(**counts)


def _group_stats(
    prompts: Sequence[PromptRecord],
    key: Callable[[PromptRecord], str],
) -> dict[str, GroupStats]:
    """Count and mean score per group, in first-seen order."""
    totals: dict[str, list[float]] = {}
    for prompt in prompts:
        group = totals.setdefault(key(prompt), [0, 0.0])
        group[0] += 1
        group[1] += _score(prompt)
    return {
        name: GroupStats(count=int(count), avg_score=total / count)
        for name, (count, total) in totals.items()
    }


def _daily_stats(
    prompts: Sequence[PromptRecord],
    optimizations: Sequence[OptimizationRecord],
    now: datetime,
) -> list[DailyBucket]:
    """One bucket per calendar day (in ``now``'s timezone) for the trailing week, today included."""
    tz = now.tzinfo
    today = now.date()
    days = [today - timedelta(days=offset) for offset in range(DAILY_WINDOW - 1, -1, -1)]

    def local_day(ts: datetime) -> date:
        return ts.astimezone(tz).date()

    prompts_by_day: dict[date, list[PromptRecord]] = {day: [] for day in days}
    for prompt in prompts:
        bucket = prompts_by_day.get(local_day(prompt.created_at))
        if bucket is not None:
            bucket.append(prompt)

    optimizations_by_day: dict[date, list[OptimizationRecord]] = {day: [] for day in days}
    for optimization in optimizations:
        bucket = optimizations_by_day.get(local_day(optimization.created_at))
        if bucket is not None:
            bucket.append(optimization)

    buckets = []
    for day in days:
        day_prompts = prompts_by_day[day]
        day_optimizations = optimizations_by_day[day]
        avg_score = sum(_score(p) for p in day_prompts) / len(day_prompts) if day_prompts else 0
        avg_generation = (
            sum(o.generation_time_ms or 0 for o in day_optimizations) / len(day_optimizations)
            if day_optimizations
            else 0
        )
        buckets.append(
            DailyBucket(
                date=day.isoformat(),
                prompt_count=len(day_prompts),
                optimization_count=len(day_optimizations),
                avg_score=avg_score,
                avg_generation_time_ms=avg_generation,
            )
        )
    return buckets


def _recent_activity(prompts: Sequence[PromptRecord]) -> list[ActivityItem]:
    newest_first = sorted(prompts, key=lambda p: p.created_at, reverse=True)
    return [
        ActivityItem(
            id=p.id,
            score=p.score,
            provider=p.provider,
            model=p.model,
            created_at=p.created_at,
            status=p.status,
        )
        for p in newest_first[:RECENT_ACTIVITY_LIMIT]
    ]


def summarize(
    prompts: Sequence[PromptRecord],
    optimizations: Sequence[OptimizationRecord],
    chat_sessions: Sequence[ChatSessionRecord],
    now: datetime | None = None,
) -> AnalyticsSummary:
    """Build the full analytics summary.

    Args:
        prompts: Prompt records, newest first as returned by the repository.
        optimizations: Optimization-history records, oldest first.
        chat_sessions: Chat sessions with their message counts.
        now: Reference time; naive values are taken as server-local time.

    Returns:
        AnalyticsSummary with overview, performance, usage, engagement,
        recent activity and insights.
    """
    if now is None:
        now = datetime.now().astimezone()
    elif now.tzinfo is None:
        now = now.astimezone()

    total_prompts = len(prompts)
    completed_prompts = sum(1 for p in prompts if p.status == "completed")
    average_score = sum(_score(p) for p in prompts) / max(total_prompts, 1)
    rounded_average = round_half_up(average_score, 2)
    total_optimizations = len(optimizations)
    total_tokens = sum(o.tokens_used or 0 for o in optimizations)
    success_rate = (
        int(round_half_up(completed_prompts / total_prompts * 100)) if total_prompts > 0 else 0
    )

    provider_stats = _group_stats(prompts, lambda p: p.provider)
    model_stats = _group_stats(prompts, lambda p: p.model)
    output_type_stats = _group_stats(prompts, lambda p: p.output_type or "unknown")

    daily_stats = _daily_stats(prompts, optimizations, now)

    avg_tokens = total_tokens / total_optimizations if total_optimizations > 0 else 0
    avg_messages = (
        sum(s.message_count for s in chat_sessions) / len(chat_sessions) if chat_sessions else 0
    )

    return AnalyticsSummary(
        overview=Overview(
            total_prompts=total_prompts,
            completed_prompts=completed_prompts,
            average_score=rounded_average,
            total_optimizations=total_optimizations,
            total_chat_sessions=len(chat_sessions),
            total_tokens_used=total_tokens,
            success_rate=success_rate,
        ),
        performance=Performance(
            score_distribution=_score_distribution(prompts),
            average_score=rounded_average,
            improvement_trend=classify_score_trend(daily_stats),
            daily_stats=daily_stats,
        ),
        usage=Usage(
            provider_stats=provider_stats,
            model_stats=model_stats,
            output_type_stats=output_type_stats,
            token_analytics=TokenAnalytics(
                total=total_tokens,
                average=int(round_half_up(avg_tokens)),
                trend=classify_token_trend(optimizations),
            ),
        ),
        engagement=Engagement(
            chat_sessions=len(chat_sessions),
            avg_messages_per_session=round_half_up(avg_messages, 1),
            active_prompts=sum(1 for p in prompts if p.status == "processing"),
        ),
        recent_activity=_recent_activity(prompts),
        insights=generate_insights(prompts, optimizations, provider_stats),
    )
