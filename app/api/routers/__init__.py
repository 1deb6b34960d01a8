"""
app/api/routers package marker.
"""

from app.api.routers.comments import router as comments_router
from app.api.routers.manage import router as manage_router

__all__ = [
    "comments_router",
    "manage_router",
]
