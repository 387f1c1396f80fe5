import structlog
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = structlog.get_logger()


class ApiError(Exception):
    """Base exception for PrompTek API errors.

    Rendered as a flat body: ``{"error": message}`` plus ``"details"`` when set.
    """

    def __init__(
        self,
        code: str,
        message: str,
        status: int = 500,
        details: str | dict | list | None = None,
    ):
        self.code = code
        self.message = message
        self.status = status
        self.details = details
        super().__init__(message)

    def to_dict(self) -> dict:
        result = {"error": self.message}
        if self.details is not None:
            result["details"] = self.details
        return result


class ValidationError(ApiError):
    def __init__(self, message: str = "Invalid request.", details: str | dict | list | None = None):
        super().__init__(code="validation_error", message=message, status=400, details=details)


class RetrievalError(ApiError):
    """An upstream query failed; the detail carries the reason, the message stays generic."""

    def __init__(self, details: str = "Failed to fetch data"):
        super().__init__(code="retrieval_failed", message="Internal server error", status=500, details=details)


class InternalError(ApiError):
    def __init__(self, details: str = "Unknown error"):
        super().__init__(code="internal_error", message="Internal server error", status=500, details=details)


class EmailDeliveryError(ApiError):
    def __init__(self, message: str = "Email delivery failed.", details: str | dict | None = None):
        super().__init__(code="email_delivery_failed", message=message, status=500, details=details)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Global exception handler for ApiError and subclasses."""
    logger.warning(
        "api_error",
        code=exc.code,
        status=exc.status,
        path=request.url.path,
        message=exc.message,
        details=exc.details,
    )
    return JSONResponse(status_code=exc.status, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render body/query validation failures as 400 with the flat error shape."""
    error = ValidationError(
        "Invalid request body",
        details=[{"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors()],
    )
    return await api_error_handler(request, error)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: log and render unexpected failures as a generic 500."""
    logger.error("unhandled_error", path=request.url.path, error=str(exc), exc_type=type(exc).__name__)
    error = InternalError(str(exc) or type(exc).__name__)
    return JSONResponse(status_code=error.status, content=error.to_dict())
