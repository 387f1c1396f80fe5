from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, Field

# ── Records (validated at the retrieval boundary) ─────────────────────────────


def _as_utc(value: datetime) -> datetime:
    """Naive timestamps from the database are stored in UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class PromptRecord(BaseModel):
    id: str
    score: float | None = Field(default=None, ge=0.0, le=1.0)
    provider: str
    model: str
    output_type: str | None = None
    created_at: UtcDatetime
    status: str | None = None

    model_config = {"frozen": True}


class OptimizationRecord(BaseModel):
    score: float | None = None
    metrics: dict | None = None
    generation_time_ms: int | None = Field(default=None, ge=0)
    tokens_used: int | None = Field(default=None, ge=0)
    created_at: UtcDatetime

    model_config = {"frozen": True}


class ChatSessionRecord(BaseModel):
    id: str
    created_at: UtcDatetime
    message_count: int = Field(default=0, ge=0)

    model_config = {"frozen": True}


class Timeframe(str, Enum):
    day = "1d"
    week = "7d"
    month = "30d"


# ── Summary ───────────────────────────────────────────────────────────────────

ScoreTrend = Literal["improving", "declining", "stable"]
TokenTrend = Literal["increasing", "decreasing", "stable"]


class Overview(BaseModel):
    total_prompts: int = Field(alias="totalPrompts")
    completed_prompts: int = Field(alias="completedPrompts")
    average_score: float = Field(alias="averageScore")
    total_optimizations: int = Field(alias="totalOptimizations")
    total_chat_sessions: int = Field(alias="totalChatSessions")
    total_tokens_used: int = Field(alias="totalTokensUsed")
    success_rate: int = Field(alias="successRate")

    model_config = {"populate_by_name": True}


class ScoreDistribution(BaseModel):
    excellent: int = 0
    good: int = 0
    average: int = 0
    poor: int = 0


class DailyBucket(BaseModel):
    date: str
    prompt_count: int = Field(alias="prompts")
    optimization_count: int = Field(alias="optimizations")
    avg_score: float = Field(alias="avgScore")
    avg_generation_time_ms: float = Field(alias="avgGenerationTime")

    model_config = {"populate_by_name": True}


class Performance(BaseModel):
    score_distribution: ScoreDistribution = Field(alias="scoreDistribution")
    average_score: float = Field(alias="averageScore")
    improvement_trend: ScoreTrend = Field(alias="improvementTrend")
    daily_stats: list[DailyBucket] = Field(alias="dailyStats")

    model_config = {"populate_by_name": True}


class GroupStats(BaseModel):
    count: int
    avg_score: float = Field(alias="avgScore")

    model_config = {"populate_by_name": True}


class TokenAnalytics(BaseModel):
    total: int
    average: int
    trend: TokenTrend


class Usage(BaseModel):
    provider_stats: dict[str, GroupStats] = Field(alias="providerStats")
    model_stats: dict[str, GroupStats] = Field(alias="modelStats")
    output_type_stats: dict[str, GroupStats] = Field(alias="outputTypeStats")
    token_analytics: TokenAnalytics = Field(alias="tokenAnalytics")

    model_config = {"populate_by_name": True, "protected_namespaces": ()}


class Engagement(BaseModel):
    chat_sessions: int = Field(alias="chatSessions")
    avg_messages_per_session: float = Field(alias="avgMessagesPerSession")
    active_prompts: int = Field(alias="activePrompts")

    model_config = {"populate_by_name": True}


class ActivityItem(BaseModel):
    id: str
    type: str = "prompt_optimization"
    score: float | None
    provider: str
    model: str
    created_at: datetime = Field(alias="createdAt")
    status: str | None

    model_config = {"populate_by_name": True}


class AnalyticsSummary(BaseModel):
    overview: Overview
    performance: Performance
    usage: Usage
    engagement: Engagement
    recent_activity: list[ActivityItem] = Field(alias="recentActivity")
    insights: list[str]

    model_config = {"populate_by_name": True}
