from contextlib import asynccontextmanager

import httpx
import structlog
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from app.api.v1.router import v1_router
from app.config import settings
from app.core.database import build_engine, build_session_factory, create_tables
from app.core.exceptions import ApiError, api_error_handler, request_validation_handler, unhandled_error_handler
from app.core.middleware import CorsHeadersMiddleware, RequestLoggingMiddleware
from app.services.email.backend import EmailBackend, LoggingEmailBackend, ResendBackend

_NAME_TO_LEVEL = {
    "debug": 10,
    "info": 20,
    "warning": 30,
    "warn": 30,
    "error": 40,
    "critical": 50,
}

structlog.configure(
    processors=[
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    wrapper_class=structlog.make_filtering_bound_logger(
        _NAME_TO_LEVEL.get(settings.promptek_log_level.lower(), 20)
    ),
)

logger = structlog.get_logger()


def _build_email_backend() -> EmailBackend:
    if not settings.resend_api_key:
        return LoggingEmailBackend()
    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(
            connect=settings.promptek_http_connect_timeout,
            read=settings.promptek_http_read_timeout,
            write=5.0,
            pool=5.0,
        )
    )
    return ResendBackend(
        api_key=settings.resend_api_key,
        base_url=settings.resend_base_url,
        http_client=http_client,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    engine = build_engine(settings.promptek_db_url)
    if settings.promptek_db_create_tables:
        await create_tables(engine)
    app.state.session_factory = build_session_factory(engine)
    app.state.email_backend = _build_email_backend()

    logger.info(
        "promptek_backend_starting",
        db_driver=engine.url.drivername,
        email_backend=type(app.state.email_backend).__name__,
    )
    yield

    await app.state.email_backend.close()
    await engine.dispose()
    logger.info("promptek_backend_stopping")


app = FastAPI(
    title="PrompTek Backend",
    description="Prompt analytics and transactional email for PrompTek",
    version="0.1.0",
    lifespan=lifespan,
)

# Exception handlers
app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)
app.add_exception_handler(Exception, unhandled_error_handler)

# Middleware (Starlette: last-added = outermost)
# 1. RequestLogging (outermost): logs every request including preflights
# 2. CorsHeaders: answers OPTIONS and stamps headers on every response
app.add_middleware(
    CorsHeadersMiddleware,
    allow_origin=settings.promptek_cors_allow_origin,
    allow_headers=settings.promptek_cors_allow_headers,
)
app.add_middleware(RequestLoggingMiddleware)

# Routes
app.include_router(v1_router)


@app.get("/")
async def root():
    return {"service": "promptek-backend", "version": "0.1.0"}
