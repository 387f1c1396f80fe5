from fastapi import APIRouter

from app.schemas.health import HealthResponse

router = APIRouter()


@router.get("/health")
async def health_check() -> HealthResponse:
    """Liveness check."""
    return HealthResponse(status="ok")
