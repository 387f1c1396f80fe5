from datetime import datetime

import structlog
from fastapi import APIRouter, Depends, Query

from app.core.exceptions import ApiError, InternalError, ValidationError
from app.dependencies import get_analytics_repository
from app.schemas.analytics import AnalyticsSummary
from app.services.analytics.aggregator import summarize
from app.services.analytics.repository import AnalyticsRepository

logger = structlog.get_logger()

router = APIRouter()


@router.get("/ai-analytics", response_model=AnalyticsSummary)
async def ai_analytics(
    user_id: str | None = Query(default=None, alias="userId"),
    timeframe: str | None = Query(default="7d"),
    repository: AnalyticsRepository = Depends(get_analytics_repository),
) -> AnalyticsSummary:
    """Per-user analytics summary over the requested window."""
    if not user_id:
        raise ValidationError("userId is required")

    now = datetime.now().astimezone()
    try:
        snapshot = await repository.fetch(user_id, timeframe, now=now)
        summary = summarize(snapshot.prompts, snapshot.optimizations, snapshot.chat_sessions, now=now)
    except ApiError:
        raise
    except Exception as exc:
        logger.exception("analytics_summary_failed", user_id=user_id, timeframe=timeframe)
        raise InternalError(str(exc) or type(exc).__name__) from exc

    logger.info(
        "analytics_summary_built",
        user_id=user_id,
        timeframe=timeframe,
        total_prompts=summary.overview.total_prompts,
    )
    return summary
