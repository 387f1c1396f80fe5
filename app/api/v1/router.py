from fastapi import APIRouter

from app.api.v1.analytics import router as analytics_router
from app.api.v1.email import router as email_router
from app.api.v1.health import router as health_router

v1_router = APIRouter()

v1_router.include_router(health_router, tags=["Health"])
v1_router.include_router(analytics_router, tags=["Analytics"])
v1_router.include_router(email_router, tags=["Email"])
