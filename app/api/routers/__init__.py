"""
app/api/routers package marker.
"""

from app.api.routers.insight_router import router as insight_router
from app.api.routers.performance_router import router as performance_router

__all__ = [
    "insight_router",
    "performance_router",
]
