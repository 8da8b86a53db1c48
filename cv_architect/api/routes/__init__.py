from __future__ import annotations

from cv_architect.api.routes.cv import router as cv_router
from cv_architect.api.routes.dashboard import router as dashboard_router
from cv_architect.api.routes.documents import router as documents_router
from cv_architect.api.routes.headshot import router as headshot_router
from cv_architect.api.routes.health import router as health_router
from cv_architect.api.routes.history import router as history_router
from cv_architect.api.routes.report import router as report_router

__all__ = [
    "cv_router",
    "dashboard_router",
    "documents_router",
    "headshot_router",
    "health_router",
    "history_router",
    "report_router",
]
