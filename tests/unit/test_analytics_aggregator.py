"""Unit tests for the analytics summary builder."""

from datetime import datetime, timedelta, timezone

import pytest

from app.schemas.analytics import ChatSessionRecord, OptimizationRecord, PromptRecord
from app.services.analytics.aggregator import summarize
from app.services.analytics.insights import (
    EXCELLENT_PERFORMANCE,
    IMPROVE_CLARITY,
    TOKEN_EFFICIENT,
)

NOW = datetime(2026, 10, 19, 15, 0, tzinfo=timezone.utc)


def _prompt(idx: int = 0, score=0.5, status="completed", provider="openai", model="gpt-4o",
            output_type="text", age=timedelta(hours=1)) -> PromptRecord:
    return PromptRecord(
        id=f"p-{idx}",
        score=score,
        provider=provider,
        model=model,
        output_type=output_type,
        created_at=NOW - age,
        status=status,
    )


def _optimization(tokens=None, generation_ms=None, age=timedelta(hours=1)) -> OptimizationRecord:
    return OptimizationRecord(tokens_used=tokens, generation_time_ms=generation_ms, created_at=NOW - age)


def _session(idx: int, messages: int) -> ChatSessionRecord:
    return ChatSessionRecord(id=f"s-{idx}", created_at=NOW - timedelta(hours=2), message_count=messages)


class TestEmptyInput:
    def test_overview_is_zeroed(self):
        summary = summarize([], [], [], now=NOW)
        overview = summary.overview
        assert overview.total_prompts == 0
        assert overview.completed_prompts == 0
        assert overview.average_score == 0
        assert overview.success_rate == 0
        assert overview.total_tokens_used == 0

    def test_score_distribution_is_zeroed(self):
        dist = summarize([], [], [], now=NOW).performance.score_distribution
        assert (dist.excellent, dist.good, dist.average, dist.poor) == (0, 0, 0, 0)

    def test_daily_stats_still_has_seven_days(self):
        daily = summarize([], [], [], now=NOW).performance.daily_stats
        assert len(daily) == 7
        assert all(d.prompt_count == 0 and d.avg_score == 0 and d.avg_generation_time_ms == 0 for d in daily)

    def test_trends_are_stable(self):
        summary = summarize([], [], [], now=NOW)
        assert summary.performance.improvement_trend == "stable"
        assert summary.usage.token_analytics.trend == "stable"
        assert summary.usage.token_analytics.average == 0

    def test_engagement_is_zeroed(self):
        engagement = summarize([], [], [], now=NOW).engagement
        assert engagement.chat_sessions == 0
        assert engagement.avg_messages_per_session == 0
        assert engagement.active_prompts == 0

    def test_low_score_and_token_insights(self):
        assert summarize([], [], [], now=NOW).insights == [IMPROVE_CLARITY, TOKEN_EFFICIENT]


class TestHighPerformer:
    @pytest.fixture
    def summary(self):
        prompts = [_prompt(i, score=0.9) for i in range(10)]
        return summarize(prompts, [], [], now=NOW)

    def test_all_completed(self, summary):
        assert summary.overview.completed_prompts == 10
        assert summary.overview.success_rate == 100

    def test_all_excellent(self, summary):
        assert summary.performance.score_distribution.excellent == 10
        assert summary.overview.average_score == 0.9

    def test_includes_high_performance_insight(self, summary):
        assert EXCELLENT_PERFORMANCE in summary.insights
        assert IMPROVE_CLARITY not in summary.insights

    def test_best_provider_insight(self, summary):
        assert "🏆 openai shows the best performance with 90% average score." in summary.insights


class TestOverview:
    def test_success_rate_rounds_half_up(self):
        prompts = [_prompt(0), _prompt(1), _prompt(2, status="failed")]
        assert summarize(prompts, [], [], now=NOW).overview.success_rate == 67

    def test_null_scores_count_as_zero(self):
        prompts = [_prompt(0, score=None), _prompt(1, score=0.8)]
        overview = summarize(prompts, [], [], now=NOW).overview
        assert overview.average_score == 0.4

    def test_tokens_sum_treats_null_as_zero(self):
        optimizations = [_optimization(tokens=120), _optimization(tokens=None), _optimization(tokens=30)]
        summary = summarize([], optimizations, [], now=NOW)
        assert summary.overview.total_tokens_used == 150
        assert summary.overview.total_optimizations == 3
        assert summary.usage.token_analytics.average == 50

    def test_active_prompts_counts_processing(self):
        prompts = [_prompt(0, status="processing"), _prompt(1, status="processing"), _prompt(2)]
        summary = summarize(prompts, [], [], now=NOW)
        assert summary.engagement.active_prompts == 2
        assert summary.overview.completed_prompts == 1


class TestScoreDistribution:
    def test_bucket_boundaries(self):
        scores = [1.0, 0.8, 0.79, 0.6, 0.59, 0.4, 0.39, 0.0, None]
        prompts = [_prompt(i, score=s) for i, s in enumerate(scores)]
        dist = summarize(prompts, [], [], now=NOW).performance.score_distribution
        assert dist.excellent == 2
        assert dist.good == 2
        assert dist.average == 2
        assert dist.poor == 3

    def test_buckets_sum_to_total(self):
        prompts = [_prompt(i, score=(i % 11) / 10) for i in range(37)]
        summary = summarize(prompts, [], [], now=NOW)
        dist = summary.performance.score_distribution
        assert dist.excellent + dist.good + dist.average + dist.poor == summary.overview.total_prompts


class TestDailyStats:
    def test_dates_cover_trailing_week_including_today(self):
        daily = summarize([], [], [], now=NOW).performance.daily_stats
        assert [d.date for d in daily] == [
            "2026-10-13",
            "2026-10-14",
            "2026-10-15",
            "2026-10-16",
            "2026-10-17",
            "2026-10-18",
            "2026-10-19",
        ]

    def test_records_land_in_their_day(self):
        prompts = [
            _prompt(0, score=0.6, age=timedelta(hours=1)),
            _prompt(1, score=0.8, age=timedelta(hours=2)),
            _prompt(2, score=0.5, age=timedelta(days=1)),
        ]
        optimizations = [
            _optimization(generation_ms=1000, age=timedelta(hours=3)),
            _optimization(generation_ms=None, age=timedelta(hours=4)),
        ]
        daily = summarize(prompts, optimizations, [], now=NOW).performance.daily_stats
        today, yesterday = daily[-1], daily[-2]
        assert today.prompt_count == 2
        assert today.avg_score == pytest.approx(0.7)
        assert today.optimization_count == 2
        assert today.avg_generation_time_ms == 500
        assert yesterday.prompt_count == 1
        assert yesterday.optimization_count == 0

    def test_records_older_than_a_week_are_not_bucketed(self):
        prompts = [_prompt(0, age=timedelta(days=20))]
        summary = summarize(prompts, [], [], now=NOW)
        assert summary.overview.total_prompts == 1
        assert sum(d.prompt_count for d in summary.performance.daily_stats) == 0

    def test_day_boundary_follows_now_timezone(self):
        tz = timezone(timedelta(hours=-5))
        local_now = datetime(2026, 10, 19, 1, 0, tzinfo=tz)
        # 03:00 UTC on the 19th is 22:00 on the 18th at UTC-5
        prompt = PromptRecord(
            id="p-tz",
            score=0.5,
            provider="openai",
            model="gpt-4o",
            created_at=datetime(2026, 10, 19, 3, 0, tzinfo=timezone.utc),
            status="completed",
        )
        daily = summarize([prompt], [], [], now=local_now).performance.daily_stats
        assert daily[-1].date == "2026-10-19"
        assert daily[-1].prompt_count == 0
        assert daily[-2].prompt_count == 1

    def test_improving_trend_from_daily_scores(self):
        prompts = [_prompt(0, score=0.2, age=timedelta(days=6))] + [
            _prompt(i, score=0.9, age=timedelta(days=i - 1)) for i in range(1, 4)
        ]
        assert summarize(prompts, [], [], now=NOW).performance.improvement_trend == "improving"


class TestUsage:
    def test_group_stats_by_provider_model_and_output_type(self):
        prompts = [
            _prompt(0, score=0.6, provider="openai", model="gpt-4o", output_type="code"),
            _prompt(1, score=0.8, provider="openai", model="gpt-4o-mini", output_type=None),
            _prompt(2, score=0.4, provider="anthropic", model="claude", output_type="code"),
        ]
        usage = summarize(prompts, [], [], now=NOW).usage
        assert usage.provider_stats["openai"].count == 2
        assert usage.provider_stats["openai"].avg_score == pytest.approx(0.7)
        assert usage.provider_stats["anthropic"].avg_score == pytest.approx(0.4)
        assert set(usage.model_stats) == {"gpt-4o", "gpt-4o-mini", "claude"}
        assert usage.output_type_stats["unknown"].count == 1
        assert usage.output_type_stats["code"].count == 2

    def test_token_trend_increasing(self):
        optimizations = [
            _optimization(tokens=t, age=timedelta(hours=10 - i))
            for i, t in enumerate([100, 100, 100, 100, 100, 900])
        ]
        tokens = summarize([], optimizations, [], now=NOW).usage.token_analytics
        assert tokens.total == 1400
        assert tokens.average == 233
        assert tokens.trend == "increasing"


class TestEngagementAndActivity:
    def test_avg_messages_rounded_to_one_decimal(self):
        sessions = [_session(0, 1), _session(1, 2), _session(2, 2)]
        engagement = summarize([], [], sessions, now=NOW).engagement
        assert engagement.chat_sessions == 3
        assert engagement.avg_messages_per_session == 1.7

    def test_recent_activity_keeps_ten_newest(self):
        prompts = [_prompt(i, age=timedelta(hours=12 - i)) for i in range(12)]
        activity = summarize(prompts, [], [], now=NOW).recent_activity
        assert len(activity) == 10
        assert [a.id for a in activity] == [f"p-{i}" for i in range(11, 1, -1)]
        assert activity[0].type == "prompt_optimization"

    def test_serializes_with_camel_case_keys(self):
        summary = summarize([_prompt(0)], [_optimization(tokens=10)], [_session(0, 3)], now=NOW)
        data = summary.model_dump(mode="json", by_alias=True)
        assert set(data) == {"overview", "performance", "usage", "engagement", "recentActivity", "insights"}
        assert "totalPrompts" in data["overview"]
        assert "successRate" in data["overview"]
        assert set(data["performance"]["dailyStats"][0]) == {
            "date",
            "prompts",
            "optimizations",
            "avgScore",
            "avgGenerationTime",
        }
        assert data["usage"]["tokenAnalytics"]["trend"] == "stable"
        assert data["engagement"]["avgMessagesPerSession"] == 3.0
        assert data["recentActivity"][0]["createdAt"].startswith("2026-10-19T14:00:00")
