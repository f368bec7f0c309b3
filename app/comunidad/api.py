from fastapi import APIRouter

from app.comunidad.core.config import settings
from app.comunidad.routers.admin import router as admin_router
from app.comunidad.routers.health import router as health_router
from app.comunidad.routers.metrics import router as metrics_router
from app.comunidad.routers.public import router as public_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(public_router, tags=["public"])
api_router.include_router(admin_router, prefix="/admin", tags=["admin"])
if settings.METRICS_ENABLED:
    api_router.include_router(metrics_router, tags=["ops"])
