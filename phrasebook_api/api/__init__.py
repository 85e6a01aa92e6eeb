# API endpoints and routers

from .health_endpoints import router as health_router
from .translation_endpoints import router as translation_router
from .sync_endpoints import router as sync_router

__all__ = [
    "health_router",
    "translation_router",
    "sync_router",
]
