from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import pydantic
import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.database import ChatMessage, ChatSession, OptimizationHistory, Prompt
from app.core.exceptions import RetrievalError
from app.schemas.analytics import ChatSessionRecord, OptimizationRecord, PromptRecord, Timeframe

logger = structlog.get_logger()

_TIMEFRAME_DAYS = {
    Timeframe.month: 30,
    Timeframe.week: 7,
}


def window_days(timeframe: str | None) -> int:
    """Trailing-day count for a timeframe token.

    Absent or empty means "7d"; any token other than "30d" or "7d" means one day.
    """
    token = timeframe or Timeframe.week.value
    try:
        return _TIMEFRAME_DAYS.get(Timeframe(token), 1)
    except ValueError:
        return 1


@dataclass(frozen=True)
class AnalyticsSnapshot:
    prompts: list[PromptRecord]
    optimizations: list[OptimizationRecord]
    chat_sessions: list[ChatSessionRecord]


class AnalyticsRepository:
    """Reads a user's prompt, optimization and chat rows for a time window."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def fetch(
        self,
        user_id: str,
        timeframe: str | None = None,
        now: datetime | None = None,
    ) -> AnalyticsSnapshot:
        now = now or datetime.now(timezone.utc)
        since = (now - timedelta(days=window_days(timeframe))).astimezone(timezone.utc)

        async with self._session_factory() as session:
            prompts = await self._fetch_prompts(session, user_id, since)
            optimizations = await self._fetch_optimizations(session, user_id, since)
            chat_sessions = await self._fetch_chat_sessions(session, user_id, since)

        logger.debug(
            "analytics_rows_fetched",
            user_id=user_id,
            since=since.isoformat(),
            prompts=len(prompts),
            optimizations=len(optimizations),
            chat_sessions=len(chat_sessions),
        )
        return AnalyticsSnapshot(prompts=prompts, optimizations=optimizations, chat_sessions=chat_sessions)

    async def _fetch_prompts(self, session: AsyncSession, user_id: str, since: datetime) -> list[PromptRecord]:
        stmt = (
            select(Prompt)
            .where(Prompt.user_id == user_id, Prompt.created_at >= since)
            .order_by(Prompt.created_at.desc())
        )
        try:
            rows = (await session.execute(stmt)).scalars().all()
            return [
                PromptRecord(
                    id=row.id,
                    score=row.score,
                    provider=row.ai_provider,
                    model=row.model_name,
                    output_type=row.output_type,
                    created_at=row.created_at,
                    status=row.status,
                )
                for row in rows
            ]
        except (SQLAlchemyError, pydantic.ValidationError) as exc:
            logger.error("analytics_fetch_failed", table="prompts", user_id=user_id, error=str(exc))
            raise RetrievalError("Failed to fetch prompt data") from exc

    async def _fetch_optimizations(
        self, session: AsyncSession, user_id: str, since: datetime
    ) -> list[OptimizationRecord]:
        stmt = (
            select(OptimizationHistory)
            .where(OptimizationHistory.user_id == user_id, OptimizationHistory.created_at >= since)
            .order_by(OptimizationHistory.created_at.asc())
        )
        try:
            rows = (await session.execute(stmt)).scalars().all()
            return [
                OptimizationRecord(
                    score=row.score,
                    metrics=row.metrics,
                    generation_time_ms=row.generation_time_ms,
                    tokens_used=row.tokens_used,
                    created_at=row.created_at,
                )
                for row in rows
            ]
        except (SQLAlchemyError, pydantic.ValidationError) as exc:
            logger.error("analytics_fetch_failed", table="optimization_history", user_id=user_id, error=str(exc))
            raise RetrievalError("Failed to fetch optimization history") from exc

    async def _fetch_chat_sessions(
        self, session: AsyncSession, user_id: str, since: datetime
    ) -> list[ChatSessionRecord]:
        message_count = func.count(ChatMessage.id).label("message_count")
        stmt = (
            select(ChatSession.id, ChatSession.created_at, message_count)
            .outerjoin(ChatMessage, ChatMessage.session_id == ChatSession.id)
            .where(ChatSession.user_id == user_id, ChatSession.created_at >= since)
            .group_by(ChatSession.id, ChatSession.created_at)
            .order_by(ChatSession.created_at.asc())
        )
        try:
            rows = (await session.execute(stmt)).all()
            return [
                ChatSessionRecord(id=row.id, created_at=row.created_at, message_count=row.message_count)
                for row in rows
            ]
        except (SQLAlchemyError, pydantic.ValidationError) as exc:
            logger.error("analytics_fetch_failed", table="chat_sessions", user_id=user_id, error=str(exc))
            raise RetrievalError("Failed to fetch chat data") from exc
