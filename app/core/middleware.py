import time

import structlog
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from app.core.exceptions import InternalError

logger = structlog.get_logger()


class CorsHeadersMiddleware(BaseHTTPMiddleware):
    """Answers every OPTIONS request with an empty 200 and stamps CORS headers on all responses.

    Browsers call the edge handlers with arbitrary preflights, so this does not
    depend on Origin / Access-Control-Request-Method being present.
    """

    def __init__(self, app, allow_origin: str = "*", allow_headers: str = "*"):
        super().__init__(app)
        self.headers = {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Headers": allow_headers,
        }

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.method == "OPTIONS":
            return Response(status_code=200, headers=self.headers)

        try:
            response = await call_next(request)
        except Exception as exc:
            # Unhandled errors are rendered here so the 500 keeps the CORS headers
            logger.error("unhandled_error", path=request.url.path, error=str(exc), exc_type=type(exc).__name__)
            error = InternalError(str(exc) or type(exc).__name__)
            return JSONResponse(status_code=error.status, content=error.to_dict(), headers=self.headers)
        response.headers.update(self.headers)
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request as structured JSON."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = round((time.perf_counter() - start) * 1000, 1)

        logger.info(
            "http_request",
            method=request.method,
            path=request.url.path,
            status=response.status_code,
            latency_ms=latency_ms,
        )
        return response
