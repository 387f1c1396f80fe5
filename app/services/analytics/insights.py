"""Natural-language observations derived from a user's prompt activity."""

from collections.abc import Mapping, Sequence

from app.schemas.analytics import GroupStats, OptimizationRecord, PromptRecord
from app.services.analytics.rounding import round_half_up

HIGH_SCORE = 0.8
LOW_SCORE = 0.5
SKILL_MIN_PROMPTS = 10
SKILL_WINDOW = 5
SKILL_GAIN = 0.1
EFFICIENT_TOKENS = 500

EXCELLENT_PERFORMANCE = "🎯 Excellent prompt performance! Your optimization strategies are highly effective."
IMPROVE_CLARITY = "💡 Consider focusing on prompt clarity and specificity to improve scores."
SKILLS_IMPROVING = "📈 Your prompt optimization skills are improving over time!"
TOKEN_EFFICIENT = "⚡ Great token efficiency! You're optimizing prompts without excessive API usage."


def _mean_score(prompts: Sequence[PromptRecord]) -> float:
    return sum(p.score or 0 for p in prompts) / max(len(prompts), 1)


def _best_provider(provider_stats: Mapping[str, GroupStats]) -> tuple[str, float]:
    best, best_score = "", 0.0
    for provider, stats in provider_stats.items():
        if stats.avg_score > best_score:
            best, best_score = provider, stats.avg_score
    return best, best_score


def generate_insights(
    prompts: Sequence[PromptRecord],
    optimizations: Sequence[OptimizationRecord],
    provider_stats: Mapping[str, GroupStats],
) -> list[str]:
    """Evaluate the insight rules in order, each contributing at most one message.

    The skill comparison uses the prompts in the order given, not sorted by date.
    """
    insights: list[str] = []

    avg_score = _mean_score(prompts)
    if avg_score > HIGH_SCORE:
        insights.append(EXCELLENT_PERFORMANCE)
    elif avg_score < LOW_SCORE:
        insights.append(IMPROVE_CLARITY)

    provider, provider_score = _best_provider(provider_stats)
    if provider:
        percent = int(round_half_up(provider_score * 100))
        insights.append(f"🏆 {provider} shows the best performance with {percent}% average score.")

    if len(prompts) > SKILL_MIN_PROMPTS:
        recent_avg = _mean_score(prompts[-SKILL_WINDOW:])
        older_avg = _mean_score(prompts[:SKILL_WINDOW])
        if recent_avg > older_avg + SKILL_GAIN:
            insights.append(SKILLS_IMPROVING)

    avg_tokens = sum(o.tokens_used or 0 for o in optimizations) / max(len(optimizations), 1)
    if avg_tokens < EFFICIENT_TOKENS:
        insights.append(TOKEN_EFFICIENT)

    return insights
