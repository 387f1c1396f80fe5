from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.services.analytics.repository import AnalyticsRepository
from app.services.email.backend import EmailBackend


def get_session_factory(request: Request) -> async_sessionmaker[AsyncSession]:
    """Return the session factory built during lifespan."""
    return request.app.state.session_factory


def get_analytics_repository(request: Request) -> AnalyticsRepository:
    return AnalyticsRepository(get_session_factory(request))


def get_email_backend(request: Request) -> EmailBackend:
    """Return the mail backend stored on app state during lifespan."""
    return request.app.state.email_backend
